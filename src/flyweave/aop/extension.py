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
"""AopExtension — registers AOP parameters and services on a container."""

from __future__ import annotations

from pathlib import Path

import structlog

from flyweave.aop.services import (
    CACHE_DIR_PARAMETER,
    CACHE_PROVIDER_PARAMETER,
    COMPILATION_CACHE_ID,
    FILE_CACHE_PROVIDER_ID,
    INTERCEPTOR_LOADER_ID,
    MEMORY_CACHE_PROVIDER_ID,
    POINTCUT_CONTAINER_ID,
    USE_COMPILATION_CACHE_PARAMETER,
)
from flyweave.config.properties.aop import AopProperties
from flyweave.container.builder import SERVICE_CONTAINER_ID, ContainerBuilder
from flyweave.container.definition import Definition, Parameter, Reference
from flyweave.core.config import Config
from flyweave.kernel.exceptions import ConfigurationException

logger = structlog.get_logger("flyweave.aop.extension")


class AopExtension:
    """Loads ``flyweave.aop`` configuration into a :class:`ContainerBuilder`.

    Sets the ``flyweave_aop.*`` parameters consumed by the matching pass and
    defines the interceptor loader, pointcut container, compilation cache
    and the built-in cache providers.
    """

    def load(self, config: Config, container: ContainerBuilder) -> AopProperties:
        props = config.bind(AopProperties)

        cache_dir = Path(props.cache_dir)
        try:
            cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationException(
                f'Could not create cache directory "{cache_dir}".',
                code="AOP_CACHE_DIR",
                context={"cache_dir": str(cache_dir)},
            ) from exc

        container.set_parameter(CACHE_DIR_PARAMETER, str(cache_dir))
        container.set_parameter(USE_COMPILATION_CACHE_PARAMETER, bool(props.use_compilation_cache))
        container.set_parameter(CACHE_PROVIDER_PARAMETER, props.compilation_cache_provider_service or None)

        container.set_definition(
            INTERCEPTOR_LOADER_ID,
            Definition(
                class_name="flyweave.aop.interception.InterceptorLoader",
                arguments=[Reference(SERVICE_CONTAINER_ID)],
            ),
        )
        container.set_definition(
            POINTCUT_CONTAINER_ID,
            Definition(class_name="flyweave.aop.registry.PointcutContainer"),
        )
        container.set_definition(
            FILE_CACHE_PROVIDER_ID,
            Definition(
                class_name="flyweave.cache.adapters.file.FileCacheProvider",
                arguments=[Parameter(CACHE_DIR_PARAMETER)],
            ),
        )
        container.set_definition(
            MEMORY_CACHE_PROVIDER_ID,
            Definition(class_name="flyweave.cache.adapters.memory.InMemoryCacheProvider"),
        )

        provider = props.compilation_cache_provider_service
        container.set_definition(
            COMPILATION_CACHE_ID,
            Definition(
                class_name="flyweave.aop.compilation_cache.CompilationCache",
                arguments=[Reference(provider) if provider else None],
            ),
        )

        logger.debug(
            "aop_extension_loaded",
            cache_dir=str(cache_dir),
            use_compilation_cache=props.use_compilation_cache,
            provider=provider or None,
        )
        return props
