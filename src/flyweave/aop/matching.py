"""MatchEngine — applies a pointcut set to class metadata."""

from __future__ import annotations

from flyweave.aop.metadata import ClassMetadata, MethodMetadata
from flyweave.aop.pointcut import Pointcut
from flyweave.aop.registry import PointcutSet


class MatchEngine:
    """Stateless evaluation of pointcut predicates.

    Results preserve the iteration order of the pointcut set, which decides
    the order interceptors are applied in.
    """

    def match_class(self, pointcuts: PointcutSet, cls: ClassMetadata) -> dict[str, Pointcut]:
        """Return the pointcuts whose class predicate holds for *cls*."""
        return {interceptor: pointcut for interceptor, pointcut in pointcuts.items() if pointcut.matches_class(cls)}

    def match_method(self, matching: dict[str, Pointcut], method: MethodMetadata) -> list[str]:
        """Return the interceptor ids of *matching* that advise *method*."""
        return [interceptor for interceptor, pointcut in matching.items() if pointcut.matches_method(method)]
