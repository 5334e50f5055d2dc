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
"""CompilationCache — persistent memo of pointcut matching across builds."""

from __future__ import annotations

import json
from pathlib import Path
from types import TracebackType
from typing import Any

import structlog

from flyweave.aop.metadata import ClassMetadata
from flyweave.cache.ports.outbound import CacheProvider

logger = structlog.get_logger("flyweave.aop.cache")

CACHE_KEY = "aop_compilation"

MODIFIED_FILE = "modified_file"
POINTCUTS_MATCH = "pointcuts_match"
CLASS_ADVICES = "class_advices"
CLASS_NAME_METHODS = "class_name_methods"
PROXY_GENERATED = "proxy_generated"


def fingerprint(file: str) -> float | None:
    """Return the modification time of *file*, or None when it cannot be read."""
    try:
        return Path(file).stat().st_mtime
    except OSError:
        return None


class CompilationCache:
    """Buffered two-level (prefix -> key -> value) store.

    The whole unit of work is read from the provider once by :meth:`load` and
    written back as one JSON blob by :meth:`flush`. Use it as a context
    manager so the flush happens on every exit path::

        with CompilationCache(provider) as cache:
            ...

    Without a provider the cache works in memory only and ``flush`` does
    nothing.
    """

    def __init__(self, provider: CacheProvider | None = None) -> None:
        self._provider = provider
        self._unit_of_work: dict[str, dict[str, Any]] = {}
        self._loaded = False

    def __enter__(self) -> CompilationCache:
        self.load()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.flush()

    # -- unit of work ----------------------------------------------------------

    def load(self) -> None:
        """Populate the unit of work from the provider (first call only)."""
        if self._loaded:
            return
        self._loaded = True
        if self._provider is None:
            return

        try:
            blob = self._provider.fetch(CACHE_KEY)
        except Exception:
            logger.warning("compilation_cache_load_failed", key=CACHE_KEY, exc_info=True)
            return
        self._unit_of_work = self._decode(blob)

    def fetch(self, prefix: str, key: str) -> Any | None:
        return self._unit_of_work.get(prefix, {}).get(key)

    def save(self, prefix: str, key: str, value: Any) -> None:
        self._unit_of_work.setdefault(prefix, {})[key] = value

    def flush(self) -> None:
        """Write the unit of work back to the provider.

        Provider failures are logged and dropped; the next build then sees an
        older (or empty) cache and recomputes.
        """
        if self._provider is None:
            return
        try:
            self._provider.save(CACHE_KEY, json.dumps(self._unit_of_work))
        except Exception:
            logger.warning("compilation_cache_flush_failed", key=CACHE_KEY, exc_info=True)

    @staticmethod
    def _decode(blob: str | None) -> dict[str, dict[str, Any]]:
        if not blob:
            return {}
        try:
            data = json.loads(blob)
        except (json.JSONDecodeError, TypeError):
            logger.warning("compilation_cache_decode_failed", key=CACHE_KEY)
            return {}
        if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
            return {}
        return data

    # -- change detection ------------------------------------------------------

    def has_class_modified(self, cls: ClassMetadata) -> bool:
        """Stamp the current fingerprint of *cls*'s file and report whether it changed.

        The stamp is written whatever the outcome, so a second call with no
        change in between returns False.
        """
        if cls.file is None:
            return True
        current = fingerprint(cls.file)
        cached = self.fetch(MODIFIED_FILE, cls.file)
        self.save(MODIFIED_FILE, cls.file, current)
        return current is None or current != cached

    # -- typed accessors -------------------------------------------------------

    @staticmethod
    def class_key(pointcuts_hash: str, cls: ClassMetadata) -> str:
        """Key of a class in the match prefixes; classes sharing a file stay apart."""
        return f"{pointcuts_hash}{cls.file}:{cls.name}"

    def save_pointcuts_match(self, pointcuts_hash: str, cls: ClassMetadata, match: bool) -> None:
        self.save(POINTCUTS_MATCH, self.class_key(pointcuts_hash, cls), match)

    def get_pointcuts_match(self, pointcuts_hash: str, cls: ClassMetadata) -> bool | None:
        return self.fetch(POINTCUTS_MATCH, self.class_key(pointcuts_hash, cls))

    def save_class_advices(self, pointcuts_hash: str, cls: ClassMetadata, class_advices: dict[str, list[str]]) -> None:
        self.save(CLASS_ADVICES, self.class_key(pointcuts_hash, cls), class_advices)

    def get_class_advices(self, pointcuts_hash: str, cls: ClassMetadata) -> dict[str, list[str]] | None:
        return self.fetch(CLASS_ADVICES, self.class_key(pointcuts_hash, cls))

    def save_class_name_methods(
        self,
        pointcuts_hash: str,
        cls: ClassMetadata,
        class_name_methods: dict[str, dict[str, list[str]]],
    ) -> None:
        self.save(CLASS_NAME_METHODS, self.class_key(pointcuts_hash, cls), class_name_methods)

    def get_class_name_methods(self, pointcuts_hash: str, cls: ClassMetadata) -> dict[str, dict[str, list[str]]] | None:
        return self.fetch(CLASS_NAME_METHODS, self.class_key(pointcuts_hash, cls))

    def save_proxy_generated(self, proxy_class_name: str, advices_hash: str) -> None:
        self.save(PROXY_GENERATED, proxy_class_name + advices_hash, True)

    def get_proxy_generated(self, proxy_class_name: str, advices_hash: str) -> bool:
        return bool(self.fetch(PROXY_GENERATED, proxy_class_name + advices_hash))
