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
"""Tests for proxy filenames, path relativization and proxy naming."""

from __future__ import annotations

import hashlib

from flyweave.aop.metadata import ClassMetadata
from flyweave.aop.naming import DefaultNamingStrategy
from flyweave.aop.paths import RelativePath, proxy_filename, relativize_path, required_file_reference


class TestRelativizePath:
    def test_sibling_of_proxy_directory(self) -> None:
        assert relativize_path("/a/b/proxies/X.ext", "/a/b/Orig.ext") == "../Orig.ext"

    def test_no_common_ancestor_returns_path_unchanged(self) -> None:
        assert relativize_path("/a/b/c/X.ext", "/x/y/Orig.ext") == "/x/y/Orig.ext"

    def test_several_levels_up(self) -> None:
        assert relativize_path("/p/cache/aop/proxies/X.py", "/p/src/app/foo.py") == "../../../src/app/foo.py"

    def test_same_directory(self) -> None:
        assert relativize_path("/a/b/X.py", "/a/b/c/Orig.py") == "c/Orig.py"

    def test_prefix_must_end_on_directory_boundary(self) -> None:
        assert relativize_path("/a/b/X.py", "/a/bc/Orig.py") == "../bc/Orig.py"


class TestRequiredFileReference:
    def test_relative_result_is_relative_path(self) -> None:
        ref = required_file_reference("/a/b/proxies/X.py", "/a/b/Orig.py")
        assert isinstance(ref, RelativePath)
        assert ref == "../Orig.py"

    def test_original_below_proxy_directory_has_no_parent_steps(self) -> None:
        ref = required_file_reference("/a/b/X.py", "/a/b/c/Orig.py")
        assert isinstance(ref, RelativePath)
        assert ref == "c/Orig.py"
        assert ref.resolve_from("/a/b/X.py") == "/a/b/c/Orig.py"

    def test_absolute_result_is_plain_string(self) -> None:
        ref = required_file_reference("/a/b/c/X.py", "/x/y/Orig.py")
        assert not isinstance(ref, RelativePath)
        assert ref == "/x/y/Orig.py"

    def test_relative_path_resolves_from_proxy_directory(self) -> None:
        assert RelativePath("../Orig.py").resolve_from("/a/b/proxies/X.py") == "/a/b/Orig.py"


class TestProxyFilename:
    def test_namespace_separators_replaced(self) -> None:
        cls = ClassMetadata(name="app.services.OrderService")
        assert proxy_filename("/cache/proxies", cls) == "/cache/proxies/app-services-OrderService.py"


class TestDefaultNamingStrategy:
    def test_class_name_is_identifier(self) -> None:
        name = DefaultNamingStrategy("EnhancedProxy").class_name(ClassMetadata(name="app.services.Outer.Inner"))
        assert name == "EnhancedProxy__app_services_Outer_Inner"
        assert name.isidentifier()

    def test_prefix_derived_from_cache_dir(self) -> None:
        strategy = DefaultNamingStrategy.for_cache_dir("/tmp/cache")
        assert strategy.prefix == "EnhancedProxy" + hashlib.md5(b"/tmp/cache").hexdigest()[:8]

    def test_stable_for_same_configuration(self) -> None:
        cls = ClassMetadata(name="app.Foo")
        first = DefaultNamingStrategy.for_cache_dir("/c").class_name(cls)
        second = DefaultNamingStrategy.for_cache_dir("/c").class_name(cls)
        assert first == second
        assert first != DefaultNamingStrategy.for_cache_dir("/d").class_name(cls)
