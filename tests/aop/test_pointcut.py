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
"""Tests for pointcut expressions."""

from __future__ import annotations

from flyweave.aop.metadata import ClassMetadata, MethodMetadata
from flyweave.aop.pointcut import ExpressionPointcut, Pointcut, matches_pattern


class TestMatchesPattern:
    """matches_pattern covers exact, single-star, double-star, and partial globs."""

    def test_exact_match(self) -> None:
        assert matches_pattern("app.services.OrderService", "app.services.OrderService")

    def test_star_matches_single_segment(self) -> None:
        assert matches_pattern("app.*.OrderService", "app.services.OrderService")

    def test_star_does_not_cross_dots(self) -> None:
        assert not matches_pattern("*.OrderService", "app.services.OrderService")

    def test_doublestar_any_depth(self) -> None:
        assert matches_pattern("**.*Service", "a.b.c.OrderService")

    def test_doublestar_deep(self) -> None:
        assert matches_pattern("**.Repo", "a.b.c.d.e.Repo")

    def test_partial_glob_prefix(self) -> None:
        assert matches_pattern("get_*", "get_order")
        assert not matches_pattern("get_*", "set_order")

    def test_question_mark_matches_one_character(self) -> None:
        assert matches_pattern("v?", "v2")
        assert not matches_pattern("v?", "v10")

    def test_regex_characters_are_literal(self) -> None:
        assert not matches_pattern("app.Order+", "app.Orderr")


class TestExpressionPointcut:
    def test_is_a_pointcut(self) -> None:
        assert isinstance(ExpressionPointcut("**"), Pointcut)

    def test_matches_class_by_qualified_name(self) -> None:
        pointcut = ExpressionPointcut("app.services.*Service")
        assert pointcut.matches_class(ClassMetadata(name="app.services.OrderService"))
        assert not pointcut.matches_class(ClassMetadata(name="app.repos.OrderRepo"))

    def test_matches_method_by_name(self) -> None:
        pointcut = ExpressionPointcut("**", "create_*")
        assert pointcut.matches_method(MethodMetadata("create_order", "app.OrderService"))
        assert not pointcut.matches_method(MethodMetadata("delete_order", "app.OrderService"))

    def test_default_method_pattern_matches_everything(self) -> None:
        pointcut = ExpressionPointcut("**")
        assert pointcut.matches_method(MethodMetadata("anything", "app.X"))

    def test_repr(self) -> None:
        assert repr(ExpressionPointcut("a.*", "b")) == "ExpressionPointcut('a.*', 'b')"
