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
"""Service definitions — the build-time description of container services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Reference:
    """Reference to another service by id."""

    id: str

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class Parameter:
    """Reference to a container parameter by name."""

    name: str


@dataclass
class Definition:
    """Metadata for a service the container can build.

    Attributes:
        class_name: Dotted ``module.QualName`` of the service class.
        file: Source file to load before importing the class, if any.
        arguments: Constructor arguments; may contain references,
            parameters and inline definitions.
        method_calls: ``(method, arguments)`` pairs applied after creation.
        properties: Attributes set after creation.
        tags: Tag name to attribute dicts, one dict per occurrence.
        synthetic: Instance is injected at runtime, never built.
        factory: ``(service_or_class, method)`` building the instance, if any.
    """

    class_name: str | None = None
    file: str | None = None
    arguments: list[Any] = field(default_factory=list)
    method_calls: list[tuple[str, list[Any]]] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)
    tags: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    synthetic: bool = False
    factory: tuple[Any, str] | None = None

    def add_argument(self, value: Any) -> Definition:
        self.arguments.append(value)
        return self

    def add_method_call(self, method: str, arguments: list[Any] | None = None) -> Definition:
        self.method_calls.append((method, list(arguments or [])))
        return self

    def add_tag(self, name: str, **attributes: Any) -> Definition:
        self.tags.setdefault(name, []).append(dict(attributes))
        return self

    def has_method_call(self, method: str) -> bool:
        return any(name == method for name, _ in self.method_calls)
