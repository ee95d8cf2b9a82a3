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
"""Configuration with YAML/TOML files, env vars, and dataclass binding."""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

from hopfly.kernel.exceptions import ConfigurationException

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_MAX_PLACEHOLDER_DEPTH = 10

_CONFIG_PREFIX_ATTR = "__hopfly_config_prefix__"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass or pydantic model as bindable to a configuration prefix.

    Usage:
        @config_properties(prefix="hopfly.web")
        @dataclass
        class WebProperties:
            request_logging: bool = True
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PREFIX_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (``HOPFLY_SECTION_KEY`` format)
    2. Configuration dict / file values
    3. Dataclass defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        return list(self._loaded_sources)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load configuration from a YAML or TOML file.

        Merge order (later wins): library defaults, *path*, then one
        ``{stem}-{profile}{suffix}`` overlay per active profile.
        """
        path = Path(path)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls._load_defaults()
            sources.append("hopfly-defaults.yaml (library defaults)")

        candidates = [path] + [
            path.with_name(f"{path.stem}-{profile}{path.suffix}") for profile in active_profiles or []
        ]
        for candidate in candidates:
            if candidate.is_file():
                data = cls._deep_merge(data, cls._load_config_data(candidate))
                sources.append(str(candidate))

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @classmethod
    def defaults(cls) -> Config:
        """Configuration holding only the bundled library defaults."""
        instance = cls(cls._load_defaults())
        instance._loaded_sources = ["hopfly-defaults.yaml (library defaults)"]
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f) or {}
        with open(path) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _load_defaults() -> dict[str, Any]:
        defaults_file = importlib.resources.files("hopfly.resources").joinpath("hopfly-defaults.yaml")
        return yaml.safe_load(defaults_file.read_text()) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        merged = dict(base)
        for key, value in override.items():
            if isinstance(merged.get(key), dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None
        return current

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        ``hopfly.web.error-details`` is overridden by ``HOPFLY_WEB_ERROR_DETAILS``.
        String values may contain ``${ENV_VAR}``, ``${config.key}`` or
        ``${key:default}`` placeholders.
        """
        env_key = "HOPFLY_" + key.removeprefix("hopfly.").upper().replace(".", "_").replace("-", "_")
        env_val = os.environ.get(env_key)
        if env_val is not None:
            return env_val

        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return self._resolve_placeholders(value)
        return value

    def _resolve_placeholders(self, value: str, _depth: int = 0) -> str:
        if _depth > _MAX_PLACEHOLDER_DEPTH:
            raise ConfigurationException(
                f"Circular placeholder reference in '{value}'",
                code="CONFIG_PLACEHOLDER_DEPTH",
            )

        def _replace(match: re.Match[str]) -> str:
            ref_key, sep, default_val = match.group(1).partition(":")

            env_val = os.environ.get(ref_key)
            if env_val is not None:
                return env_val

            found = self._lookup(ref_key)
            if found is not None:
                resolved = str(found)
                if "${" in resolved:
                    resolved = self._resolve_placeholders(resolved, _depth + 1)
                return resolved

            if sep:
                return default_val
            raise ConfigurationException(
                f"Cannot resolve placeholder '${{{match.group(1)}}}'",
                code="CONFIG_PLACEHOLDER_UNRESOLVED",
                context={"key": ref_key},
            )

        return _PLACEHOLDER_RE.sub(_replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get all values under a prefix as a dict."""
        section = self._lookup(prefix)
        return section if isinstance(section, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a ``@config_properties`` dataclass or pydantic model.

        Keys may be written kebab-case (``error-details``) or snake_case.
        Env var overrides apply per field.
        """
        prefix = getattr(config_cls, _CONFIG_PREFIX_ATTR, None)
        if prefix is None:
            raise ConfigurationException(f"{config_cls.__name__} is not decorated with @config_properties")

        section = {k.replace("-", "_"): v for k, v in self.get_section(prefix).items()}

        if issubclass(config_cls, BaseModel):
            try:
                return config_cls.model_validate(section)
            except ValidationError as exc:
                raise ConfigurationException(
                    f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}",
                    context={"prefix": prefix},
                ) from exc

        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{field.name}", section.get(field.name))
            if value is None:
                continue
            kwargs[field.name] = _coerce(value, hints.get(field.name), field.name)
        return config_cls(**kwargs)


def _coerce(value: Any, expected: Any, name: str) -> Any:
    if not isinstance(value, str):
        return value
    try:
        if expected is int:
            return int(value)
        if expected is float:
            return float(value)
    except ValueError as exc:
        raise ConfigurationException(f"Invalid value {value!r} for '{name}'") from exc
    if expected is bool:
        return value.lower() in ("true", "1", "yes")
    return value
