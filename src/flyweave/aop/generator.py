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
"""Proxy code generation — the generator contract and the default renderer."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from flyweave.aop.metadata import ClassMetadata, MethodMetadata
from flyweave.aop.naming import DefaultNamingStrategy
from flyweave.aop.paths import RelativePath
from flyweave.aop.services import SET_LOADER_METHOD


@dataclass(frozen=True)
class MethodFilter:
    """Selects the methods a proxy overrides, by name."""

    names: frozenset[str]

    @classmethod
    def of(cls, names: Iterable[str]) -> MethodFilter:
        return cls(frozenset(names))

    def __call__(self, method: MethodMetadata) -> bool:
        return method.name in self.names


@runtime_checkable
class ProxyCodeGenerator(Protocol):
    """Writes the source of a proxy class to *filename*.

    *required_file* is how the proxy reaches the original class: None to
    import it by name, a :class:`RelativePath` relative to the proxy's
    directory, or an absolute path.
    """

    def write_class(
        self,
        cls: ClassMetadata,
        method_filter: MethodFilter,
        naming_strategy: DefaultNamingStrategy,
        filename: str,
        required_file: str | None = None,
    ) -> None: ...


_TEMPLATE = '''"""Proxy for {original} generated by flyweave; do not edit."""

from flyweave.aop.interception import intercept, require_class

_Target = require_class({original!r}, __file__, {required_file!r}, relative={relative!r})


class {proxy}(_Target):
    __flyweave_loader__ = None

    def {set_loader}(self, loader):
        self.__flyweave_loader__ = loader
{methods}'''

_METHOD_TEMPLATE = '''
    def {name}(self, *args, **kwargs):
        return intercept(self, _Target, {name!r}, args, kwargs)
'''


class InterceptionGenerator:
    """Renders a Python module defining the proxy subclass.

    Each filtered method is overridden to route through
    :func:`flyweave.aop.interception.intercept`, which runs the interceptors
    registered for it before delegating to the overridden method.
    """

    def render(
        self,
        cls: ClassMetadata,
        method_filter: MethodFilter,
        naming_strategy: DefaultNamingStrategy,
        required_file: str | None = None,
    ) -> str:
        methods = "".join(_METHOD_TEMPLATE.format(name=m.name) for m in cls.methods if method_filter(m))
        return _TEMPLATE.format(
            original=cls.name,
            required_file=str(required_file) if required_file is not None else None,
            relative=isinstance(required_file, RelativePath),
            proxy=naming_strategy.class_name(cls),
            set_loader=SET_LOADER_METHOD,
            methods=methods,
        )

    def write_class(
        self,
        cls: ClassMetadata,
        method_filter: MethodFilter,
        naming_strategy: DefaultNamingStrategy,
        filename: str,
        required_file: str | None = None,
    ) -> None:
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(cls, method_filter, naming_strategy, required_file), encoding="utf-8")
