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
"""Redis-backed cache provider."""

from __future__ import annotations

from typing import Any, cast


class RedisCacheProvider:
    """Cache provider that delegates to a ``redis.Redis``-like client.

    Blobs are stored as UTF-8 strings under ``{namespace}{key}``.
    """

    def __init__(self, client: Any, namespace: str = "flyweave:") -> None:
        self._client = client
        self._namespace = namespace

    @classmethod
    def from_url(cls, url: str, namespace: str = "flyweave:") -> RedisCacheProvider:
        """Create a provider connected to *url* (``redis://host:port/db``)."""
        import redis

        return cls(redis.Redis.from_url(url), namespace=namespace)

    def fetch(self, key: str) -> str | None:
        """Retrieve a stored blob."""
        raw = self._client.get(self._namespace + key)
        if raw is None:
            return None
        return raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)

    def save(self, key: str, value: str) -> None:
        self._client.set(self._namespace + key, value.encode("utf-8"))

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if the key existed."""
        count = self._client.delete(self._namespace + key)
        return cast(bool, count > 0)
