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
"""File-backed cache provider, the default store for the compilation cache."""

from __future__ import annotations

from pathlib import Path


class FileCacheProvider:
    """Provider writing one file per key under *directory*."""

    def __init__(self, directory: str | Path, suffix: str = ".cache") -> None:
        self._directory = Path(directory)
        self._suffix = suffix

    def path_for(self, key: str) -> Path:
        return self._directory / f"{key}{self._suffix}"

    def fetch(self, key: str) -> str | None:
        """Read the blob for *key*; a missing file is a miss."""
        path = self.path_for(key)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def save(self, key: str, value: str) -> None:
        """Write the blob for *key*, creating the directory when needed."""
        self._directory.mkdir(parents=True, exist_ok=True)
        self.path_for(key).write_text(value, encoding="utf-8")

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        if not path.exists():
            return False
        path.unlink()
        return True
