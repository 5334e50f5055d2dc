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
"""Runtime support imported by generated proxies."""

from __future__ import annotations

import types
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from flyweave.aop.metadata import qualified_name
from flyweave.aop.paths import RelativePath
from flyweave.container.class_loader import load_class


@runtime_checkable
class MethodInterceptor(Protocol):
    """Advice implementation; call ``invocation.proceed()`` to continue the chain."""

    def intercept(self, invocation: MethodInvocation) -> Any: ...


@dataclass
class MethodInvocation:
    """An intercepted call travelling through its interceptor chain.

    Attributes:
        target: The proxy instance whose method was called.
        method_name: Name of the intercepted method.
        args: Positional arguments passed to the method.
        kwargs: Keyword arguments passed to the method.
        interceptors: Remaining chain, outermost first.
        original: The overridden method bound to *target*.
    """

    target: Any
    method_name: str
    args: tuple
    kwargs: dict[str, Any]
    interceptors: list[MethodInterceptor]
    original: Callable[..., Any]
    _index: int = field(default=0, repr=False)

    def proceed(self) -> Any:
        """Invoke the next interceptor, or the original method after the last one."""
        if self._index < len(self.interceptors):
            interceptor = self.interceptors[self._index]
            self._index += 1
            return interceptor.intercept(self)
        return self.original(*self.args, **self.kwargs)


class InterceptorLoader:
    """Resolves interceptors for proxied methods from the container.

    *interceptors* is the index produced by the matching pass:
    declaring class name -> method name -> interceptor service ids.
    """

    def __init__(self, container: Any, interceptors: dict[str, dict[str, list[str]]] | None = None) -> None:
        self._container = container
        self._interceptors = interceptors or {}
        self._loaded: dict[tuple[type, str], list[MethodInterceptor]] = {}

    def load_interceptors(self, target_cls: type, method_name: str) -> list[MethodInterceptor]:
        """Return the interceptors advising *method_name*, looked up along the MRO."""
        key = (target_cls, method_name)
        if key not in self._loaded:
            ids: list[str] = []
            for klass in target_cls.__mro__:
                ids = self._interceptors.get(qualified_name(klass), {}).get(method_name, [])
                if ids:
                    break
            self._loaded[key] = [self._container.get(interceptor_id) for interceptor_id in ids]
        return self._loaded[key]

    def invoke(self, target: Any, target_cls: type, method_name: str, args: tuple, kwargs: dict[str, Any]) -> Any:
        original = types.MethodType(getattr(target_cls, method_name), target)
        invocation = MethodInvocation(
            target=target,
            method_name=method_name,
            args=args,
            kwargs=kwargs,
            interceptors=list(self.load_interceptors(target_cls, method_name)),
            original=original,
        )
        return invocation.proceed()


def intercept(proxy: Any, target_cls: type, method_name: str, args: tuple, kwargs: dict[str, Any]) -> Any:
    """Entry point of every proxied method."""
    loader: InterceptorLoader | None = getattr(proxy, "__flyweave_loader__", None)
    if loader is None:
        return getattr(target_cls, method_name)(proxy, *args, **kwargs)
    return loader.invoke(proxy, target_cls, method_name, args, kwargs)


def require_class(class_name: str, proxy_file: str, required_file: str | None, relative: bool = False) -> type:
    """Load the original class of a proxy module."""
    if required_file is None:
        return load_class(class_name)
    if relative:
        required_file = RelativePath(required_file).resolve_from(proxy_file)
    return load_class(class_name, required_file)
