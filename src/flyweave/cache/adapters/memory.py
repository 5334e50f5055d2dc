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
"""In-memory cache provider."""

from __future__ import annotations


class InMemoryCacheProvider:
    """Process-local provider.

    Suitable for tests and for builds that only want in-run memoization.
    """

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    def fetch(self, key: str) -> str | None:
        """Return the stored blob or None."""
        return self._store.get(key)

    def save(self, key: str, value: str) -> None:
        self._store[key] = value

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if the key existed."""
        return self._store.pop(key, None) is not None
