# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""YamlFileLoader — reads service definitions and parameters from YAML.

Format::

    parameters:
      app.greeting: hello

    services:
      order_service:
        class: app.services.OrderService
        file: src/app/services.py          # optional
        arguments: ["@repository", "%app.greeting%"]
        calls:
          - [set_clock, ["@clock"]]
        properties: {retries: 3}
        tags:
          - {name: flyweave_aop.pointcut, interceptor: logging}

``"@id"`` is a service reference, ``"%name%"`` a parameter, and a mapping with
a ``class`` key inside arguments/calls/properties is an inline definition.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from flyweave.container.builder import ContainerBuilder
from flyweave.container.definition import Definition, Parameter, Reference
from flyweave.kernel.exceptions import ConfigurationException


class YamlFileLoader:
    """Loads YAML service files into a :class:`ContainerBuilder`."""

    def __init__(self, container: ContainerBuilder) -> None:
        self._container = container
        self._base_dir = Path(".")

    def load(self, path: str | Path) -> None:
        path = Path(path)
        with open(path) as f:
            content = yaml.safe_load(f) or {}
        if not isinstance(content, dict):
            raise ConfigurationException(f"Service file '{path}' must contain a mapping", code="CONTAINER_YAML")

        for name, value in (content.get("parameters") or {}).items():
            self._container.set_parameter(name, value)

        # Relative "file:" entries are resolved against the YAML file's directory
        self._base_dir = path.parent
        for service_id, spec in (content.get("services") or {}).items():
            self._container.set_definition(service_id, self._parse_definition(service_id, spec or {}))
        self._container.add_resource(str(path.resolve()))

    def _parse_definition(self, service_id: str, spec: Any) -> Definition:
        if not isinstance(spec, dict):
            raise ConfigurationException(
                f"Service '{service_id}' must be a mapping", code="CONTAINER_YAML", context={"service": service_id}
            )

        definition = Definition(
            class_name=spec.get("class"),
            file=str(self._base_dir / spec["file"]) if spec.get("file") else None,
            arguments=[self._parse_value(service_id, v) for v in spec.get("arguments") or []],
            properties={k: self._parse_value(service_id, v) for k, v in (spec.get("properties") or {}).items()},
            synthetic=bool(spec.get("synthetic", False)),
        )

        for call in spec.get("calls") or []:
            method, *rest = call
            arguments = rest[0] if rest else []
            definition.add_method_call(method, [self._parse_value(service_id, v) for v in arguments])

        for tag in spec.get("tags") or []:
            if isinstance(tag, str):
                definition.add_tag(tag)
                continue
            attributes = dict(tag)
            name = attributes.pop("name", None)
            if not name:
                raise ConfigurationException(
                    f"A tag of service '{service_id}' is missing its 'name'",
                    code="CONTAINER_YAML",
                    context={"service": service_id},
                )
            definition.add_tag(name, **attributes)

        factory = spec.get("factory")
        if factory:
            owner, method = factory
            definition.factory = (self._parse_value(service_id, owner), method)

        return definition

    def _parse_value(self, service_id: str, value: Any) -> Any:
        if isinstance(value, str):
            if value.startswith("@@"):
                return value[1:]
            if value.startswith("@"):
                return Reference(value[1:])
            if len(value) > 2 and value.startswith("%") and value.endswith("%"):
                return Parameter(value[1:-1])
            return value
        if isinstance(value, list):
            return [self._parse_value(service_id, v) for v in value]
        if isinstance(value, dict):
            if "class" in value:
                return self._parse_definition(service_id, value)
            return {k: self._parse_value(service_id, v) for k, v in value.items()}
        return value
