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
"""End-to-end weaving: generated proxies built by the container run their interceptors."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from flyweave.aop.extension import AopExtension
from flyweave.aop.interception import MethodInvocation
from flyweave.aop.matching_pass import PointcutMatchingPass
from flyweave.aop.metadata import qualified_name
from flyweave.aop.pointcut import ExpressionPointcut
from flyweave.aop.registry import PointcutContainer
from flyweave.aop.services import POINTCUT_CONTAINER_ID, POINTCUT_TAG
from flyweave.container.builder import ContainerBuilder
from flyweave.core.config import Config

SHOP_SOURCE = '''
class Base:
    def describe(self):
        return "base"


class Shop(Base):
    def __init__(self, name):
        self.name = name

    def bar(self):
        return self.name

    def baz(self):
        return "baz"
'''


class Upper:
    def intercept(self, invocation: MethodInvocation):
        return invocation.proceed().upper()


class Exclaim:
    def intercept(self, invocation: MethodInvocation):
        return invocation.proceed() + "!"


@pytest.fixture
def shop_file(tmp_path: Path) -> Path:
    path = tmp_path / "src" / "shop_service.py"
    path.parent.mkdir()
    path.write_text(SHOP_SOURCE)
    return path


def build_container(tmp_path: Path, shop_file: Path) -> ContainerBuilder:
    container = ContainerBuilder()
    AopExtension().load(Config({"flyweave": {"aop": {"cache_dir": str(tmp_path / "cache")}}}), container)
    container.register("upper", qualified_name(Upper))
    container.register("exclaim", qualified_name(Exclaim))
    shop = container.register("shop", "shop_service.Shop")
    shop.file = str(shop_file)
    shop.add_argument("acme")
    return container


POINTCUTS = {
    "upper": ExpressionPointcut("shop_service.Shop", "bar"),
    "exclaim": ExpressionPointcut("shop_service.*", "describe"),
}


class TestWeaving:
    def test_proxy_runs_interceptors(self, tmp_path, shop_file):
        container = build_container(tmp_path, shop_file)

        result = PointcutMatchingPass(POINTCUTS).process(container)
        shop = container.get("shop")

        assert [p.service_id for p in result.generated] == ["shop"]
        assert isinstance(shop, sys.modules["shop_service"].Shop)
        assert shop.bar() == "ACME"
        assert shop.describe() == "base!"
        assert shop.baz() == "baz"

    def test_interceptor_index_keys_declaring_class(self, tmp_path, shop_file):
        result = PointcutMatchingPass(POINTCUTS).process(build_container(tmp_path, shop_file))

        assert result.interceptors == {
            "shop_service.Shop": {"bar": ["upper"]},
            "shop_service.Base": {"describe": ["exclaim"]},
        }

    def test_proxy_file_references_original_relatively(self, tmp_path, shop_file):
        result = PointcutMatchingPass(POINTCUTS).process(build_container(tmp_path, shop_file))

        source = Path(result.proxies[0].proxy_file).read_text()
        assert "'../../src/shop_service.py', relative=True" in source

    def test_second_build_reuses_proxy_from_file_cache(self, tmp_path, shop_file):
        PointcutMatchingPass(POINTCUTS).process(build_container(tmp_path, shop_file))
        assert (tmp_path / "cache" / "aop_compilation.cache").is_file()

        container = build_container(tmp_path, shop_file)
        result = PointcutMatchingPass(POINTCUTS).process(container)

        assert result.generated == []
        assert len(result.proxies) == 1
        assert container.get("shop").bar() == "ACME"


class TestTaggedPointcuts:
    def test_pointcut_services_drive_weaving(self, tmp_path, shop_file):
        container = build_container(tmp_path, shop_file)
        pointcut = container.register("pointcut.upper", qualified_name(ExpressionPointcut))
        pointcut.add_argument("shop_service.Shop").add_argument("bar")
        pointcut.add_tag(POINTCUT_TAG, interceptor="upper")

        PointcutMatchingPass().process(container)

        assert container.get("shop").bar() == "ACME"
        pointcut_container = container.get(POINTCUT_CONTAINER_ID)
        assert isinstance(pointcut_container, PointcutContainer)
        assert pointcut_container.get("upper") is container.get("pointcut.upper")
