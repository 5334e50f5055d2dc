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
"""Proxy class naming."""

from __future__ import annotations

import hashlib
import re

from flyweave.aop.metadata import ClassMetadata

_NON_IDENTIFIER = re.compile(r"\W")


class DefaultNamingStrategy:
    """Maps a class to a single, stable proxy class name.

    The name is ``{prefix}__{qualified name as identifier}``, so the same
    class gets the same proxy name for as long as the prefix is unchanged.
    """

    def __init__(self, prefix: str = "EnhancedProxy") -> None:
        self.prefix = prefix

    @classmethod
    def for_cache_dir(cls, cache_dir: str) -> DefaultNamingStrategy:
        """Strategy whose prefix is tied to the cache directory configuration."""
        return cls("EnhancedProxy" + hashlib.md5(cache_dir.encode()).hexdigest()[:8])

    def class_name(self, cls: ClassMetadata) -> str:
        return f"{self.prefix}__{_NON_IDENTIFIER.sub('_', cls.name)}"
