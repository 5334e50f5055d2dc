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
"""Proxy file naming and relative paths back to original sources."""

from __future__ import annotations

import os
from pathlib import Path

from flyweave.aop.metadata import ClassMetadata


class RelativePath(str):
    """A path relative to the directory of the generated proxy file."""

    def resolve_from(self, proxy_file: str) -> str:
        return os.path.normpath(os.path.join(os.path.dirname(proxy_file), self))


def proxy_filename(proxy_dir: str | Path, cls: ClassMetadata) -> str:
    """Return ``<proxy_dir>/<qualified name with "." replaced by "-">.py``."""
    return str(Path(proxy_dir) / f"{cls.name.replace('.', '-')}.py")


def relativize_path(target_path: str, path: str) -> str:
    """Express *path* relative to the directory of *target_path*.

    The directory of *target_path* is truncated one level at a time until it
    is an ancestor of *path*; each truncation adds one ``../``. When the only
    shared ancestor is the filesystem root, *path* is returned unchanged.

    >>> relativize_path("/a/b/proxies/X.py", "/a/b/Orig.py")
    '../Orig.py'
    >>> relativize_path("/a/b/c/X.py", "/x/y/Orig.py")
    '/x/y/Orig.py'
    """
    common = os.path.dirname(target_path)
    level = 0
    while common and common != os.path.dirname(common):
        if path.startswith(common.rstrip(os.sep) + os.sep):
            return "../" * level + path[len(common.rstrip(os.sep)) + 1 :]
        common = os.path.dirname(common)
        level += 1
    return path


def required_file_reference(proxy_file: str, original_file: str) -> str:
    """Reference to *original_file* as stored in the proxy: relative when possible."""
    relative = relativize_path(proxy_file, original_file)
    if not os.path.isabs(relative):
        return RelativePath(relative)
    return relative
