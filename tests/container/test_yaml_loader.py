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
"""Tests for YamlFileLoader."""

from __future__ import annotations

from pathlib import Path

import pytest

from flyweave.container.builder import ContainerBuilder
from flyweave.container.definition import Definition, Parameter, Reference
from flyweave.container.loader import YamlFileLoader
from flyweave.kernel.exceptions import ConfigurationException

SERVICES_YAML = """
parameters:
  app.dsn: sqlite:///orders.db

services:
  repository:
    class: app.repositories.OrderRepository
    file: src/repositories.py
    arguments: ["%app.dsn%"]

  order_service:
    class: app.services.OrderService
    arguments:
      - "@repository"
      - "@@literal"
      - {class: app.clock.UtcClock, arguments: [utc]}
    calls:
      - [set_clock, ["@clock"]]
      - [warm_up]
    properties:
      retries: 3
    tags:
      - {name: flyweave_aop.pointcut, interceptor: logging}
      - monitored

  clock:
    class: app.clock.UtcClock
    synthetic: true

  connection:
    factory: ["@repository", connect]
"""


@pytest.fixture
def container(tmp_path: Path) -> ContainerBuilder:
    path = tmp_path / "services.yaml"
    path.write_text(SERVICES_YAML)
    container = ContainerBuilder()
    YamlFileLoader(container).load(path)
    return container


class TestYamlFileLoader:
    def test_parameters(self, container: ContainerBuilder):
        assert container.get_parameter("app.dsn") == "sqlite:///orders.db"

    def test_file_is_relative_to_yaml_directory(self, container: ContainerBuilder, tmp_path: Path):
        definition = container.get_definition("repository")
        assert definition.file == str(tmp_path / "src" / "repositories.py")
        assert definition.arguments == [Parameter("app.dsn")]

    def test_argument_values(self, container: ContainerBuilder):
        arguments = container.get_definition("order_service").arguments

        assert arguments[0] == Reference("repository")
        assert arguments[1] == "@literal"
        assert isinstance(arguments[2], Definition)
        assert arguments[2].class_name == "app.clock.UtcClock"
        assert arguments[2].arguments == ["utc"]

    def test_calls_properties_and_tags(self, container: ContainerBuilder):
        definition = container.get_definition("order_service")

        assert definition.method_calls == [("set_clock", [Reference("clock")]), ("warm_up", [])]
        assert definition.properties == {"retries": 3}
        assert definition.tags == {
            "flyweave_aop.pointcut": [{"interceptor": "logging"}],
            "monitored": [{}],
        }

    def test_synthetic_and_factory(self, container: ContainerBuilder):
        assert container.get_definition("clock").synthetic is True
        assert container.get_definition("connection").factory == (Reference("repository"), "connect")

    def test_yaml_file_is_a_resource(self, container: ContainerBuilder, tmp_path: Path):
        assert container.get_resources() == [str((tmp_path / "services.yaml").resolve())]

    def test_tag_without_name(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("services:\n  a:\n    class: x.A\n    tags:\n      - {interceptor: log}\n")

        with pytest.raises(ConfigurationException, match="missing its 'name'") as exc_info:
            YamlFileLoader(ContainerBuilder()).load(path)
        assert exc_info.value.context == {"service": "a"}

    def test_non_mapping_document(self, tmp_path: Path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationException, match="must contain a mapping"):
            YamlFileLoader(ContainerBuilder()).load(path)

    def test_empty_document(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        container = ContainerBuilder()
        YamlFileLoader(container).load(path)
        assert container.get_definitions() == {}
