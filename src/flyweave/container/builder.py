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
"""ContainerBuilder — build-time service container."""

from __future__ import annotations

import difflib
from typing import Any

from flyweave.container.class_loader import load_class
from flyweave.container.definition import Definition, Parameter, Reference
from flyweave.container.exceptions import NoSuchParameterError, NoSuchServiceError, ServiceCreationException

SERVICE_CONTAINER_ID = "service_container"


class ContainerBuilder:
    """Holds service definitions and parameters while a build is compiled.

    Compiler passes inspect and rewrite definitions; :meth:`get` instantiates
    a definition on demand, resolving :class:`Reference`, :class:`Parameter`
    and inline :class:`Definition` values in its arguments, method calls and
    properties. Instances are shared (one per id).
    """

    def __init__(self, parameters: dict[str, Any] | None = None) -> None:
        self._definitions: dict[str, Definition] = {}
        self._parameters: dict[str, Any] = dict(parameters or {})
        self._services: dict[str, Any] = {SERVICE_CONTAINER_ID: self}
        self._resources: list[str] = []

    # -- definitions -----------------------------------------------------------

    def register(self, service_id: str, class_name: str | None = None) -> Definition:
        """Create, store and return a new definition for *service_id*."""
        return self.set_definition(service_id, Definition(class_name=class_name))

    def set_definition(self, service_id: str, definition: Definition) -> Definition:
        self._definitions[service_id] = definition
        self._services.pop(service_id, None)
        return definition

    def has_definition(self, service_id: str) -> bool:
        return service_id in self._definitions

    def get_definition(self, service_id: str) -> Definition:
        if service_id not in self._definitions:
            raise NoSuchServiceError(service_id, suggestions=self._similar(service_id, self._definitions))
        return self._definitions[service_id]

    def get_definitions(self) -> dict[str, Definition]:
        return dict(self._definitions)

    def find_tagged_service_ids(self, tag: str) -> dict[str, list[dict[str, Any]]]:
        """Return ``{service_id: [attributes, ...]}`` for every definition tagged *tag*."""
        return {
            service_id: [dict(attrs) for attrs in definition.tags[tag]]
            for service_id, definition in self._definitions.items()
            if tag in definition.tags
        }

    # -- parameters ------------------------------------------------------------

    def set_parameter(self, name: str, value: Any) -> None:
        self._parameters[name] = value

    def has_parameter(self, name: str) -> bool:
        return name in self._parameters

    def get_parameter(self, name: str) -> Any:
        if name not in self._parameters:
            raise NoSuchParameterError(name, suggestions=self._similar(name, self._parameters))
        return self._parameters[name]

    # -- resources -------------------------------------------------------------

    def add_resource(self, path: str) -> None:
        """Record *path* as an input of this build."""
        if path not in self._resources:
            self._resources.append(path)

    def get_resources(self) -> list[str]:
        return list(self._resources)

    # -- services --------------------------------------------------------------

    def set(self, service_id: str, service: Any) -> None:
        """Register an already-built instance (e.g. for synthetic services)."""
        self._services[service_id] = service

    def get(self, service_id: str) -> Any:
        """Return the shared instance for *service_id*, building it if needed."""
        if service_id in self._services:
            return self._services[service_id]

        definition = self.get_definition(service_id)
        if definition.synthetic:
            raise ServiceCreationException(
                subject=service_id,
                reason="Synthetic service has not been set on the container",
                code="CONTAINER_SYNTHETIC_SERVICE",
            )
        instance = self._create(definition)
        self._services[service_id] = instance
        return instance

    def _create(self, definition: Definition) -> Any:
        arguments = [self._resolve(arg) for arg in definition.arguments]

        if definition.factory is not None:
            owner, method = definition.factory
            target = self.get(owner.id) if isinstance(owner, Reference) else load_class(str(owner))
            instance = getattr(target, method)(*arguments)
        else:
            if not definition.class_name:
                raise ServiceCreationException(
                    subject=repr(definition),
                    reason="Definition has neither a class nor a factory",
                    code="CONTAINER_NO_CLASS",
                )
            cls = load_class(definition.class_name, definition.file)
            instance = cls(*arguments)

        for name, value in definition.properties.items():
            setattr(instance, name, self._resolve(value))
        for method, call_arguments in definition.method_calls:
            getattr(instance, method)(*[self._resolve(arg) for arg in call_arguments])
        return instance

    def _resolve(self, value: Any) -> Any:
        if isinstance(value, Reference):
            return self.get(value.id)
        if isinstance(value, Parameter):
            return self.get_parameter(value.name)
        if isinstance(value, Definition):
            return self._create(value)
        if isinstance(value, list):
            return [self._resolve(v) for v in value]
        if isinstance(value, dict):
            return {k: self._resolve(v) for k, v in value.items()}
        return value

    @staticmethod
    def _similar(name: str, candidates: dict[str, Any]) -> list[str]:
        return difflib.get_close_matches(name, list(candidates), n=5, cutoff=0.6)
