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
"""PointcutRegistry — resolves the active pointcut set and its identity hash."""

from __future__ import annotations

import hashlib
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import structlog

from flyweave.aop.metadata import qualified_name
from flyweave.aop.pointcut import Pointcut
from flyweave.aop.services import POINTCUT_CONTAINER_ID, POINTCUT_TAG
from flyweave.container.builder import ContainerBuilder
from flyweave.container.definition import Reference
from flyweave.kernel.exceptions import ConfigurationException

logger = structlog.get_logger("flyweave.aop.registry")


def pointcuts_hash(pointcuts: Mapping[str, Pointcut]) -> str:
    """Identity hash of a pointcut set.

    Depends only on the ordered sequence of pointcut implementation types,
    so it is stable across builds and changes when a type is added, removed,
    replaced or reordered.
    """
    joined = ":".join(qualified_name(type(pointcut)) for pointcut in pointcuts.values())
    return hashlib.md5(joined.encode()).hexdigest()


@dataclass(frozen=True)
class PointcutSet:
    """Ordered, immutable mapping of interceptor id to pointcut for one build."""

    pointcuts: Mapping[str, Pointcut]
    hash: str = field(default="")

    @classmethod
    def of(cls, pointcuts: Mapping[str, Pointcut]) -> PointcutSet:
        frozen = MappingProxyType(dict(pointcuts))
        return cls(pointcuts=frozen, hash=pointcuts_hash(frozen))

    def items(self) -> Iterator[tuple[str, Pointcut]]:
        return iter(self.pointcuts.items())

    def __iter__(self) -> Iterator[str]:
        return iter(self.pointcuts)

    def __len__(self) -> int:
        return len(self.pointcuts)


class PointcutRegistry:
    """Supplies the :class:`PointcutSet` for a build.

    With a static mapping the set is exactly that mapping. Otherwise every
    service tagged ``flyweave_aop.pointcut`` is instantiated and registered
    under the ``interceptor`` attribute of its tag, in definition order.

    Usage::

        registry = PointcutRegistry()
        pointcut_set = registry.resolve(container)
        pointcut_set.hash  # stable for the same pointcut types
    """

    def __init__(self, pointcuts: Mapping[str, Pointcut] | None = None) -> None:
        self._static = dict(pointcuts) if pointcuts is not None else None

    def resolve(self, container: ContainerBuilder) -> PointcutSet:
        """Resolve the pointcut set.

        Raises:
            ConfigurationException: a tagged service does not declare the
                interceptor it provides.
        """
        if self._static is not None:
            return PointcutSet.of(self._static)

        pointcuts: dict[str, Pointcut] = {}
        references: dict[str, Reference] = {}
        for service_id, tags in container.find_tagged_service_ids(POINTCUT_TAG).items():
            interceptor = tags[0].get("interceptor") if tags else None
            if not interceptor:
                raise ConfigurationException(
                    f'You need to set the "interceptor" attribute for the "{POINTCUT_TAG}" tag of service "{service_id}".',
                    code="AOP_POINTCUT_TAG",
                    context={"service": service_id},
                )
            references[interceptor] = Reference(service_id)
            pointcuts[interceptor] = container.get(service_id)

        if container.has_definition(POINTCUT_CONTAINER_ID):
            container.get_definition(POINTCUT_CONTAINER_ID).add_argument(references)

        pointcut_set = PointcutSet.of(pointcuts)
        logger.debug("pointcuts_resolved", count=len(pointcut_set), hash=pointcut_set.hash)
        return pointcut_set


class PointcutContainer:
    """Runtime lookup of pointcuts by interceptor id."""

    def __init__(self, pointcuts: Mapping[str, Pointcut] | None = None) -> None:
        self._pointcuts = dict(pointcuts or {})

    def has(self, interceptor: str) -> bool:
        return interceptor in self._pointcuts

    def get(self, interceptor: str) -> Pointcut:
        return self._pointcuts[interceptor]

    def all(self) -> dict[str, Pointcut]:
        return dict(self._pointcuts)
