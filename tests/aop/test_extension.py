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
"""Tests for AopExtension service and parameter registration."""

from __future__ import annotations

from pathlib import Path

import pytest

from flyweave.aop.compilation_cache import CompilationCache
from flyweave.aop.extension import AopExtension
from flyweave.aop.interception import InterceptorLoader
from flyweave.aop.registry import PointcutContainer
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
from flyweave.cache.adapters.file import FileCacheProvider
from flyweave.cache.adapters.memory import InMemoryCacheProvider
from flyweave.container.builder import ContainerBuilder
from flyweave.core.config import Config
from flyweave.kernel.exceptions import ConfigurationException


def aop_config(**aop) -> Config:
    return Config({"flyweave": {"aop": aop}})


class TestAopExtension:
    def test_sets_parameters_and_creates_cache_dir(self, tmp_path: Path) -> None:
        cache_dir = tmp_path / "build" / "aop"
        container = ContainerBuilder()

        props = AopExtension().load(aop_config(cache_dir=str(cache_dir)), container)

        assert cache_dir.is_dir()
        assert props.cache_dir == str(cache_dir)
        assert container.get_parameter(CACHE_DIR_PARAMETER) == str(cache_dir)
        assert container.get_parameter(USE_COMPILATION_CACHE_PARAMETER) is True
        assert container.get_parameter(CACHE_PROVIDER_PARAMETER) == FILE_CACHE_PROVIDER_ID

    def test_defines_runtime_services(self, tmp_path: Path) -> None:
        container = ContainerBuilder()
        AopExtension().load(aop_config(cache_dir=str(tmp_path)), container)

        assert isinstance(container.get(INTERCEPTOR_LOADER_ID), InterceptorLoader)
        assert isinstance(container.get(POINTCUT_CONTAINER_ID), PointcutContainer)
        assert isinstance(container.get(MEMORY_CACHE_PROVIDER_ID), InMemoryCacheProvider)
        assert isinstance(container.get(FILE_CACHE_PROVIDER_ID), FileCacheProvider)

    def test_compilation_cache_uses_configured_provider(self, tmp_path: Path) -> None:
        container = ContainerBuilder()
        AopExtension().load(
            aop_config(cache_dir=str(tmp_path), compilation_cache_provider_service=FILE_CACHE_PROVIDER_ID),
            container,
        )

        with container.get(COMPILATION_CACHE_ID) as cache:
            cache.save("prefix", "key", 1)

        assert isinstance(cache, CompilationCache)
        assert (tmp_path / "aop_compilation.cache").is_file()

    def test_without_provider_cache_is_in_memory_only(self, tmp_path: Path) -> None:
        container = ContainerBuilder()
        AopExtension().load(aop_config(cache_dir=str(tmp_path), compilation_cache_provider_service=""), container)

        with container.get(COMPILATION_CACHE_ID) as cache:
            cache.save("prefix", "key", 1)

        assert list(tmp_path.iterdir()) == []

    def test_cache_can_be_disabled(self, tmp_path: Path) -> None:
        container = ContainerBuilder()
        AopExtension().load(aop_config(cache_dir=str(tmp_path), use_compilation_cache=False), container)
        assert container.get_parameter(USE_COMPILATION_CACHE_PARAMETER) is False

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLYWEAVE_AOP_USE_COMPILATION_CACHE", "false")
        container = ContainerBuilder()
        AopExtension().load(aop_config(cache_dir=str(tmp_path)), container)
        assert container.get_parameter(USE_COMPILATION_CACHE_PARAMETER) is False

    def test_unwritable_cache_dir_is_configuration_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")

        with pytest.raises(ConfigurationException, match="Could not create cache directory") as exc_info:
            AopExtension().load(aop_config(cache_dir=str(blocker / "aop")), ContainerBuilder())

        assert exc_info.value.code == "AOP_CACHE_DIR"
