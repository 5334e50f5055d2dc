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
"""Class metadata model consumed by pointcut matching and proxy generation."""

from __future__ import annotations

import inspect
from collections.abc import Iterator
from dataclasses import dataclass

# Constructors are never proxied
_CONSTRUCTORS = frozenset({"__init__", "__new__"})


@dataclass(frozen=True)
class MethodMetadata:
    """A method a proxy subclass may override.

    Attributes:
        name: Method name.
        declaring_class: Qualified name of the class that defines it.
    """

    name: str
    declaring_class: str


@dataclass(frozen=True)
class ClassMetadata:
    """Build-time description of a service class.

    Attributes:
        name: Qualified ``module.QualName``.
        file: Source file, or None for classes without one.
        final: Decorated with ``typing.final``.
        methods: Overridable methods in resolution order, constructors excluded.
        parent: Metadata of the first base class, None below ``object``.
    """

    name: str
    file: str | None = None
    final: bool = False
    methods: tuple[MethodMetadata, ...] = ()
    parent: ClassMetadata | None = None

    @property
    def short_name(self) -> str:
        return self.name.rpartition(".")[2]

    @property
    def module(self) -> str:
        return self.name.rpartition(".")[0]

    def lineage(self) -> Iterator[ClassMetadata]:
        """Yield this class followed by each ancestor, nearest first."""
        current: ClassMetadata | None = self
        while current is not None:
            yield current
            current = current.parent


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def source_file(cls: type) -> str | None:
    """Return the file defining *cls*, or None for built-in or dynamic classes."""
    try:
        return inspect.getsourcefile(cls) or inspect.getfile(cls)
    except (TypeError, OSError):
        return None


def class_metadata_from_type(cls: type) -> ClassMetadata:
    """Introspect *cls* into a :class:`ClassMetadata`.

    Methods are collected along the MRO (``object`` excluded), subclasses
    first and in declaration order; the first definition of a name wins.
    Static and class methods, private/dunder names and ``typing.final``
    methods are not overridable.
    """
    methods: list[MethodMetadata] = []
    seen: set[str] = set()
    for klass in cls.__mro__:
        if klass is object:
            continue
        for name, value in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            if name in _CONSTRUCTORS or name.startswith("__"):
                continue
            if not inspect.isfunction(value):
                continue
            if getattr(value, "__final__", False):
                continue
            methods.append(MethodMetadata(name=name, declaring_class=qualified_name(klass)))

    bases = [base for base in cls.__mro__[1:2] if base is not object]
    return ClassMetadata(
        name=qualified_name(cls),
        file=source_file(cls),
        final=bool(cls.__dict__.get("__final__", False)),
        methods=tuple(methods),
        parent=class_metadata_from_type(bases[0]) if bases else None,
    )
