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
"""Class loading by dotted name, optionally from an explicit source file."""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from flyweave.container.exceptions import ClassNotFoundError


def load_class(class_name: str, file: str | None = None) -> type:
    """Return the class named *class_name*.

    When *file* is given it is executed first (once per resolved path) and the
    class is looked up in the resulting module. Otherwise the longest
    importable module prefix of *class_name* is imported and the remaining
    segments are resolved as attributes, so nested classes work too.

    Raises:
        ClassNotFoundError: the module or attribute does not exist, or the
            resolved object is not a class.
    """
    try:
        if file:
            module = _load_file(_module_name_for(class_name, file), file)
            obj: object = getattr(module, class_name.rpartition(".")[2])
        else:
            obj = _import_dotted(class_name)
    except (ImportError, AttributeError, OSError) as exc:
        raise ClassNotFoundError(class_name, file, cause=str(exc)) from exc

    if not isinstance(obj, type):
        raise ClassNotFoundError(class_name, file, cause="not a class")
    return obj


def _module_name_for(class_name: str, file: str) -> str:
    module, _, _ = class_name.rpartition(".")
    if module:
        return module
    digest = hashlib.md5(str(Path(file).resolve()).encode()).hexdigest()[:12]
    return f"_flyweave_{class_name}_{digest}"


def _load_file(module_name: str, file: str) -> ModuleType:
    path = Path(file).resolve()
    existing = sys.modules.get(module_name)
    if existing is not None and getattr(existing, "__file__", None):
        if Path(existing.__file__).resolve() == path:  # type: ignore[arg-type]
            return existing

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load module '{module_name}' from '{path}'")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def _import_dotted(class_name: str) -> object:
    parts = class_name.split(".")
    for i in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:i])
        try:
            obj: object = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # Only a missing prefix means "try a shorter one"
            if exc.name is not None and not module_name.startswith(exc.name):
                raise
            continue
        for attr in parts[i:]:
            obj = getattr(obj, attr)
        return obj
    raise ImportError(f"No importable module in '{class_name}'")
