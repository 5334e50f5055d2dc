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
"""PointcutMatchingPass — matches pointcuts against services and generates proxies.

For every class the container can build, the pass either recomputes the
advice (class or pointcut files changed, or the compilation cache is off) or
trusts what previous builds persisted, and then decides whether the proxy
file has to be written again.
"""

from __future__ import annotations

import contextlib
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from flyweave.aop.advice import AdviceIndexBuilder, InterceptorIndex, advices_hash, merge_interceptors
from flyweave.aop.compilation_cache import CompilationCache
from flyweave.aop.generator import InterceptionGenerator, MethodFilter, ProxyCodeGenerator
from flyweave.aop.loading import ClassResolver
from flyweave.aop.matching import MatchEngine
from flyweave.aop.metadata import ClassMetadata, class_metadata_from_type
from flyweave.aop.naming import DefaultNamingStrategy
from flyweave.aop.paths import proxy_filename, required_file_reference
from flyweave.aop.pointcut import Pointcut
from flyweave.aop.registry import PointcutRegistry, PointcutSet
from flyweave.aop.services import (
    CACHE_DIR_PARAMETER,
    COMPILATION_CACHE_ID,
    INTERCEPTOR_LOADER_ID,
    SET_LOADER_METHOD,
    USE_COMPILATION_CACHE_PARAMETER,
)
from flyweave.container.builder import ContainerBuilder
from flyweave.container.definition import Definition, Reference

logger = structlog.get_logger("flyweave.aop")


@dataclass(frozen=True)
class ProxyRecord:
    """A definition redirected to a proxy class."""

    service_id: str
    class_name: str
    proxy_class_name: str
    proxy_file: str
    generated: bool


@dataclass
class CompilationResult:
    """Outcome of one pass over the container."""

    interceptors: InterceptorIndex = field(default_factory=dict)
    proxies: list[ProxyRecord] = field(default_factory=list)

    @property
    def generated(self) -> list[ProxyRecord]:
        return [proxy for proxy in self.proxies if proxy.generated]


@dataclass
class _Build:
    """State of a single pass, threaded through every per-class step."""

    container: ContainerBuilder
    pointcuts: PointcutSet
    cache: CompilationCache | None
    naming: DefaultNamingStrategy
    proxy_dir: Path
    result: CompilationResult = field(default_factory=CompilationResult)
    pointcuts_changed: bool | None = None
    modified_files: dict[str, bool] = field(default_factory=dict)


class PointcutMatchingPass:
    """Compiler pass weaving proxies into a :class:`ContainerBuilder`.

    Usage::

        result = PointcutMatchingPass().process(container)
        result.interceptors  # declaring class -> method -> interceptor ids
    """

    def __init__(
        self,
        pointcuts: Mapping[str, Pointcut] | None = None,
        *,
        generator: ProxyCodeGenerator | None = None,
        class_resolver: Callable[[Definition], ClassMetadata | None] | None = None,
        match_engine: MatchEngine | None = None,
    ) -> None:
        self._registry = PointcutRegistry(pointcuts)
        self._generator = generator or InterceptionGenerator()
        self._resolve_class = class_resolver or ClassResolver()
        self._engine = match_engine or MatchEngine()
        self._advice_builder = AdviceIndexBuilder(self._engine)

    def process(self, container: ContainerBuilder) -> CompilationResult:
        cache_dir = str(container.get_parameter(CACHE_DIR_PARAMETER))
        use_cache = bool(container.get_parameter(USE_COMPILATION_CACHE_PARAMETER))
        cache: CompilationCache | None = container.get(COMPILATION_CACHE_ID) if use_cache else None

        build = _Build(
            container=container,
            pointcuts=self._registry.resolve(container),
            cache=cache,
            naming=DefaultNamingStrategy.for_cache_dir(cache_dir),
            proxy_dir=Path(cache_dir) / "proxies",
        )

        with cache if cache is not None else contextlib.nullcontext():
            for service_id, definition in container.get_definitions().items():
                self._process_definition(build, service_id, definition)
                self._process_inline_definitions(build, service_id, definition.arguments)
                self._process_inline_definitions(build, service_id, definition.method_calls)
                self._process_inline_definitions(build, service_id, definition.properties)

        if container.has_definition(INTERCEPTOR_LOADER_ID):
            container.get_definition(INTERCEPTOR_LOADER_ID).add_argument(build.result.interceptors)

        logger.info(
            "pointcut_matching_finished",
            proxies=len(build.result.proxies),
            generated=len(build.result.generated),
            cache=use_cache,
        )
        return build.result

    def _process_inline_definitions(self, build: _Build, service_id: str, values: Any) -> None:
        items: Iterable[Any] = values.values() if isinstance(values, dict) else values
        for value in items:
            if isinstance(value, Definition):
                self._process_definition(build, service_id, value)
            elif isinstance(value, (list, tuple, dict)):
                self._process_inline_definitions(build, service_id, value)

    def _process_definition(self, build: _Build, service_id: str, definition: Definition) -> None:
        if definition.synthetic or definition.factory is not None:
            return

        cls = self._resolve_class(definition)
        if cls is None:
            logger.debug("class_skipped", service=service_id, class_name=definition.class_name, reason="not loadable")
            return

        if build.cache is None or cls.file is None or self._should_recompile(build, build.cache, cls):
            self._recompute(build, service_id, definition, cls)
        else:
            self._reuse(build, build.cache, service_id, definition, cls)

    # -- recompute / reuse -----------------------------------------------------

    def _recompute(self, build: _Build, service_id: str, definition: Definition, cls: ClassMetadata) -> None:
        cache = build.cache if cls.file is not None else None
        pointcuts_hash = build.pointcuts.hash

        matching = self._engine.match_class(build.pointcuts, cls)
        if cache is not None:
            cache.save_pointcuts_match(pointcuts_hash, cls, bool(matching))
        if not matching:
            return

        self._add_resources(build.container, cls)
        if cls.final:
            logger.debug("class_skipped", service=service_id, class_name=cls.name, reason="final")
            return

        advice = self._advice_builder.build(matching, cls)
        merge_interceptors(build.result.interceptors, advice.class_name_methods)
        if cache is not None:
            cache.save_class_advices(pointcuts_hash, cls, advice.advices)
            cache.save_class_name_methods(pointcuts_hash, cls, advice.class_name_methods)
        if not advice:
            return

        proxy_file = self._generate_proxy(build, definition, cls, advice.advices)
        if cache is not None:
            cache.save_proxy_generated(build.naming.class_name(cls), advices_hash(advice.advices))
        self._redirect(build, service_id, definition, cls, proxy_file, generated=True)

    def _reuse(
        self,
        build: _Build,
        cache: CompilationCache,
        service_id: str,
        definition: Definition,
        cls: ClassMetadata,
    ) -> None:
        pointcuts_hash = build.pointcuts.hash

        match = cache.get_pointcuts_match(pointcuts_hash, cls)
        if match is None:
            # Never matched against this pointcut set
            self._recompute(build, service_id, definition, cls)
            return
        if not match:
            return

        self._add_resources(build.container, cls)
        if cls.final:
            return

        merge_interceptors(build.result.interceptors, cache.get_class_name_methods(pointcuts_hash, cls) or {})

        class_advices = cache.get_class_advices(pointcuts_hash, cls) or {}
        if not class_advices:
            return

        proxy_file = proxy_filename(build.proxy_dir, cls)
        proxy_class_name = build.naming.class_name(cls)
        content_hash = advices_hash(class_advices)

        generated = not Path(proxy_file).exists() or not cache.get_proxy_generated(proxy_class_name, content_hash)
        if generated:
            self._generate_proxy(build, definition, cls, class_advices)
            cache.save_proxy_generated(proxy_class_name, content_hash)
        else:
            logger.debug("proxy_reused", service=service_id, proxy_file=proxy_file)
        self._redirect(build, service_id, definition, cls, proxy_file, generated=generated)

    def _should_recompile(self, build: _Build, cache: CompilationCache, cls: ClassMetadata) -> bool:
        # Both checks stamp fingerprints, so neither may be skipped
        class_modified = self._file_modified(build, cache, cls)
        pointcuts_changed = self._has_pointcut_changed(build, cache)
        return class_modified or pointcuts_changed

    def _has_pointcut_changed(self, build: _Build, cache: CompilationCache) -> bool:
        if build.pointcuts_changed is None:
            # Stamp every pointcut file, not just up to the first change
            changed = [
                self._file_modified(build, cache, class_metadata_from_type(type(pointcut)))
                for _, pointcut in build.pointcuts.items()
            ]
            build.pointcuts_changed = any(changed)
        return build.pointcuts_changed

    @staticmethod
    def _file_modified(build: _Build, cache: CompilationCache, cls: ClassMetadata) -> bool:
        # The first class of a file restamps its fingerprint, so the answer
        # is kept for the rest of the pass
        if cls.file is None:
            return cache.has_class_modified(cls)
        if cls.file not in build.modified_files:
            build.modified_files[cls.file] = cache.has_class_modified(cls)
        return build.modified_files[cls.file]

    # -- proxies ---------------------------------------------------------------

    def _generate_proxy(
        self,
        build: _Build,
        definition: Definition,
        cls: ClassMetadata,
        class_advices: dict[str, list[str]],
    ) -> str:
        proxy_file = proxy_filename(build.proxy_dir, cls)
        required_file = required_file_reference(proxy_file, definition.file) if definition.file else None

        self._generator.write_class(
            cls,
            MethodFilter.of(class_advices),
            build.naming,
            proxy_file,
            required_file,
        )
        logger.info("proxy_generated", class_name=cls.name, proxy_file=proxy_file, methods=sorted(class_advices))
        return proxy_file

    def _redirect(
        self,
        build: _Build,
        service_id: str,
        definition: Definition,
        cls: ClassMetadata,
        proxy_file: str,
        generated: bool,
    ) -> None:
        proxy_class_name = build.naming.class_name(cls)
        definition.file = proxy_file
        definition.class_name = proxy_class_name
        definition.add_method_call(SET_LOADER_METHOD, [Reference(INTERCEPTOR_LOADER_ID)])
        build.result.proxies.append(
            ProxyRecord(
                service_id=service_id,
                class_name=cls.name,
                proxy_class_name=proxy_class_name,
                proxy_file=proxy_file,
                generated=generated,
            )
        )

    @staticmethod
    def _add_resources(container: ContainerBuilder, cls: ClassMetadata) -> None:
        for klass in cls.lineage():
            if klass.file is None:
                break
            container.add_resource(klass.file)
