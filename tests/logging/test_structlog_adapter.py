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
"""Tests for StructlogAdapter — default LoggingPort implementation."""

import logging

import pytest
import structlog

from flyweave.core.config import Config
from flyweave.logging.port import LoggingPort
from flyweave.logging.structlog_adapter import StructlogAdapter


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    structlog.reset_defaults()
    logging.basicConfig(force=True, level=logging.WARNING)
    for name in ("flyweave.aop", "flyweave.cache", "flyweave.other"):
        logging.getLogger(name).setLevel(logging.NOTSET)


class TestStructlogAdapterConformance:
    def test_implements_logging_port(self):
        adapter = StructlogAdapter()
        assert isinstance(adapter, LoggingPort)


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._root_level == "INFO"

    def test_configure_reads_root_level(self):
        adapter = StructlogAdapter()
        config = Config({"flyweave": {"logging": {"level": {"root": "debug"}}}})
        adapter.configure(config)
        assert adapter._root_level == "DEBUG"
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_reads_format(self):
        adapter = StructlogAdapter()
        config = Config({"flyweave": {"logging": {"format": "json"}}})
        adapter.configure(config)
        assert adapter._format == "json"

    def test_configure_defaults_console_format(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._format == "console"

    def test_configure_reads_per_module_levels(self):
        adapter = StructlogAdapter()
        config = Config({"flyweave": {"logging": {"level": {"root": "INFO", "flyweave.aop": "DEBUG"}}}})
        adapter.configure(config)
        assert adapter._module_levels == {"flyweave.aop": "DEBUG"}
        assert logging.getLogger("flyweave.aop").level == logging.DEBUG

    def test_env_override_of_format(self, monkeypatch):
        monkeypatch.setenv("FLYWEAVE_LOGGING_FORMAT", "JSON")
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._format == "json"


class TestStructlogAdapterGetLogger:
    def test_get_logger_returns_bound_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        logger = adapter.get_logger("flyweave.test")
        assert logger is not None
        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "debug", None))


class TestStructlogAdapterSetLevel:
    def test_set_level_updates_module_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        adapter.set_level("flyweave.cache", "DEBUG")
        assert logging.getLogger("flyweave.cache").level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        adapter = StructlogAdapter()
        adapter.set_level("flyweave.other", "loud")
        assert logging.getLogger("flyweave.other").level == logging.INFO
