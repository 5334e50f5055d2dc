"""Pointcuts — predicates selecting the classes and methods that receive advice."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Protocol, runtime_checkable

from flyweave.aop.metadata import ClassMetadata, MethodMetadata


@runtime_checkable
class Pointcut(Protocol):
    """Decides whether a class, then each of its methods, is advised."""

    def matches_class(self, cls: ClassMetadata) -> bool: ...

    def matches_method(self, method: MethodMetadata) -> bool: ...


class ExpressionPointcut:
    """Pointcut built from two glob patterns.

    *class_pattern* is matched against the qualified class name and
    *method_pattern* against the bare method name, both with
    :func:`matches_pattern` rules.

    Example::

        ExpressionPointcut("app.services.*Service", "create_*")
    """

    def __init__(self, class_pattern: str, method_pattern: str = "*") -> None:
        self.class_pattern = class_pattern
        self.method_pattern = method_pattern

    def matches_class(self, cls: ClassMetadata) -> bool:
        return matches_pattern(self.class_pattern, cls.name)

    def matches_method(self, method: MethodMetadata) -> bool:
        return matches_pattern(self.method_pattern, method.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.class_pattern!r}, {self.method_pattern!r})"


def matches_pattern(pattern: str, qualified_name: str) -> bool:
    """Check whether *qualified_name* matches a glob *pattern*.

    Pattern syntax
    --------------
    * ``*``  — matches exactly one dot-separated segment.
    * ``**`` — matches one or more segments (crosses dots).
    * Partial globs within a segment use fnmatch rules,
      e.g. ``get_*`` matches ``get_order``.

    Examples
    --------
    >>> matches_pattern("app.*.OrderService", "app.services.OrderService")
    True
    >>> matches_pattern("**.*Service", "a.b.c.OrderService")
    True
    >>> matches_pattern("get_*", "get_order")
    True
    >>> matches_pattern("*.OrderService", "a.b.OrderService")
    False
    """
    return _pattern_to_regex(pattern).fullmatch(qualified_name) is not None


def _segment_to_regex(seg: str) -> str:
    """Convert a single pattern segment to a regex fragment."""
    if seg == "**":
        return r"(?:[^.]+\.)*[^.]+"
    if seg == "*":
        return r"[^.]+"

    parts: list[str] = []
    for ch in seg:
        if ch == "*":
            parts.append("[^.]*")
        elif ch == "?":
            parts.append("[^.]")
        else:
            parts.append(re.escape(ch))
    return "".join(parts)


@lru_cache(maxsize=256)
def _pattern_to_regex(pattern: str) -> re.Pattern[str]:
    """Convert a pattern string into a compiled regex."""
    return re.compile(r"\.".join(_segment_to_regex(seg) for seg in pattern.split(".")))
