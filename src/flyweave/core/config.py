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
"""Build configuration: layered YAML/TOML files, env overrides and dataclass binding.

Values are read with dotted keys (``flyweave.aop.cache_dir``). Layers merge in
this order, later winning:

1. ``flyweave/resources/flyweave-defaults.yaml`` shipped with the package
2. the project file passed to :meth:`Config.from_file`
3. ``{stem}-{profile}{suffix}`` overlays for each active profile
4. ``FLYWEAVE_*`` environment variables, checked on every :meth:`Config.get`
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]

from flyweave.kernel.exceptions import ConfigurationException

T = TypeVar("T")

_PREFIX_ATTR = "__flyweave_config_prefix__"
_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")
_MAX_PLACEHOLDER_DEPTH = 10
_MISSING = object()

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Attach a configuration prefix to a dataclass so :meth:`Config.bind` can fill it.

    Usage:
        @config_properties(prefix="flyweave.aop")
        @dataclass
        class AopProperties:
            cache_dir: str = ".flyweave/aop"
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _PREFIX_ATTR, prefix)
        return cls

    return decorator


def _lookup(data: Mapping[str, Any], key: str) -> Any:
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, Mapping) or current.get(part) is None:
            return _MISSING
        current = current[part]
    return current


def _env_name(key: str) -> str:
    # flyweave.aop.cache_dir -> FLYWEAVE_AOP_CACHE_DIR
    return "FLYWEAVE_" + key.removeprefix("flyweave.").upper().replace(".", "_").replace("-", "_")


def _merge(base: dict[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(merged.get(key), dict) and isinstance(value, Mapping):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read(path: Path) -> dict[str, Any]:
    try:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f)
        with open(path) as f:
            return yaml.safe_load(f) or {}
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationException(f"Cannot parse {path}: {exc}", code="CONFIG_PARSE", context={"path": str(path)}) from exc


def _coerce(value: Any, expected: Any) -> Any:
    if not isinstance(value, str):
        return value
    if expected is bool:
        return value.strip().lower() in _TRUE_STRINGS
    if expected in (int, float):
        return expected(value)
    return value


class Config:
    """Read-only view over merged configuration data."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._sources: list[str] = []

    @classmethod
    def from_file(
        cls,
        path: str | Path | None = None,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load the framework defaults, *path* (if it exists) and its profile overlays."""
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            resource = importlib.resources.files("flyweave.resources").joinpath("flyweave-defaults.yaml")
            data = yaml.safe_load(resource.read_text(encoding="utf-8")) or {}
            sources.append("flyweave-defaults.yaml (framework defaults)")

        if path is not None and Path(path).exists():
            path = Path(path)
            layers = [(path, str(path))]
            for profile in active_profiles or []:
                overlay = path.with_name(f"{path.stem}-{profile}{path.suffix}")
                if overlay.exists():
                    layers.append((overlay, f"{overlay} (profile: {profile})"))
            for layer, label in layers:
                data = _merge(data, _read(layer))
                sources.append(label)

        config = cls(data)
        config._sources = sources
        return config

    @property
    def loaded_sources(self) -> list[str]:
        """Files merged into this configuration, in merge order."""
        return list(self._sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value at dotted *key*.

        A ``FLYWEAVE_*`` environment variable named after the key wins over
        file values. String values may contain ``${NAME}``, ``${dotted.key}``
        or ``${NAME:fallback}`` placeholders.
        """
        env_value = os.environ.get(_env_name(key))
        if env_value is not None:
            return env_value

        value = _lookup(self._data, key)
        if value is _MISSING:
            return default
        if isinstance(value, str):
            return self._interpolate(value)
        return value

    def get_section(self, prefix: str) -> dict[str, Any]:
        section = _lookup(self._data, prefix)
        return section if isinstance(section, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Instantiate a ``@config_properties`` dataclass from this configuration.

        Fields without a configured value keep their dataclass default;
        string values (e.g. from environment variables) are coerced to the
        field's ``bool``, ``int`` or ``float`` type.
        """
        prefix = getattr(config_cls, _PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        hints = get_type_hints(config_cls)
        values: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{field.name}")
            if value is None:
                continue
            try:
                values[field.name] = _coerce(value, hints.get(field.name))
            except ValueError as exc:
                raise ConfigurationException(
                    f"Invalid value for '{prefix}.{field.name}': {value!r}",
                    code="CONFIG_VALUE",
                    context={"key": f"{prefix}.{field.name}"},
                ) from exc
        return config_cls(**values)

    def _interpolate(self, value: str, depth: int = 0) -> str:
        if "${" not in value:
            return value
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ConfigurationException(
                f"Placeholders in '{value}' nest too deeply; check for circular references",
                code="CONFIG_PLACEHOLDER",
                context={"value": value},
            )

        def substitute(match: re.Match[str]) -> str:
            name, has_fallback, fallback = match.group(1).partition(":")
            if name in os.environ:
                return os.environ[name]
            found = _lookup(self._data, name)
            if found is not _MISSING:
                return self._interpolate(str(found), depth + 1)
            if has_fallback:
                return fallback
            raise ConfigurationException(
                f"Cannot resolve placeholder '${{{match.group(1)}}}': not found in environment or config",
                code="CONFIG_PLACEHOLDER",
                context={"placeholder": name},
            )

        return _PLACEHOLDER.sub(substitute, value)
