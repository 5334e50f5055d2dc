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
"""AdviceIndexBuilder — advice maps per class and the cross-class interceptor index."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field

from flyweave.aop.matching import MatchEngine
from flyweave.aop.metadata import ClassMetadata
from flyweave.aop.pointcut import Pointcut

# declaring class -> method -> interceptor ids
InterceptorIndex = dict[str, dict[str, list[str]]]


@dataclass
class ClassAdvice:
    """Advice discovered for one class.

    Attributes:
        advices: Method name to interceptor ids, in method order.
        class_name_methods: The same advice keyed by each method's
            declaring class, as merged into the global interceptor index.
    """

    advices: dict[str, list[str]] = field(default_factory=dict)
    class_name_methods: InterceptorIndex = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.advices)


class AdviceIndexBuilder:
    """Builds :class:`ClassAdvice` from the pointcuts matching a class."""

    def __init__(self, engine: MatchEngine | None = None) -> None:
        self._engine = engine or MatchEngine()

    def build(self, matching: dict[str, Pointcut], cls: ClassMetadata) -> ClassAdvice:
        result = ClassAdvice()
        for method in cls.methods:
            advices = self._engine.match_method(matching, method)
            if not advices:
                continue
            result.advices[method.name] = advices
            result.class_name_methods.setdefault(method.declaring_class, {})[method.name] = advices
        return result


def merge_interceptors(index: InterceptorIndex, class_name_methods: InterceptorIndex) -> None:
    """Fold one class's projection into the global *index*, later entries winning."""
    for class_name, methods in class_name_methods.items():
        for method, advices in methods.items():
            index.setdefault(class_name, {})[method] = list(advices)


def advices_hash(advices: dict[str, list[str]]) -> str:
    """Content hash of an advice map; sensitive to method and interceptor order."""
    return hashlib.md5(json.dumps(advices, separators=(",", ":")).encode()).hexdigest()
