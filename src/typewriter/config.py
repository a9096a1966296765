"""
Runtime configuration for the declaration generator.

Settings come from three layers: a YAML file, TYPEWRITER_* environment
variables, then command-line flags. Later layers win.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import yaml

from typewriter.backends import Language
from typewriter.errors import ConfigError

DEFAULT_CONFIG_FILE = "typewriter.yaml"
ENV_PREFIX = "TYPEWRITER_"


@dataclass(frozen=True)
class GeneratorConfig:
    dir: Optional[str] = None
    file: Optional[str] = None
    out: Optional[str] = None
    lang: str = "flow"
    recursive: bool = False
    verbose: bool = False
    include_unexported: bool = False
    log_level: str = "WARNING"

    @property
    def language(self) -> Language:
        return Language.from_name(self.lang)

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.verbose else self.log_level.upper()

    def validate(self) -> "GeneratorConfig":
        try:
            Language.from_name(self.lang)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        if self.dir and self.file:
            raise ConfigError("dir and file are mutually exclusive")
        if not isinstance(getattr(logging, self.log_level.upper(), None), int):
            raise ConfigError(f"Unknown log_level: {self.log_level!r}")
        return self


_BOOL_KEYS = {f.name for f in fields(GeneratorConfig) if f.type in ("bool", bool)}
_KEYS = {f.name for f in fields(GeneratorConfig)}


def _load_yaml(path: str) -> Dict[str, Any]:
    with open(path, encoding="utf-8") as handle:
        try:
            loaded = yaml.safe_load(handle) or {}
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config at {path} must be a mapping, got: {type(loaded).__name__}")
    unknown = sorted(set(loaded) - _KEYS)
    if unknown:
        raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")
    return dict(loaded)


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    raise ConfigError(f"{name} must be a boolean value (true/false), got: {value!r}")


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for key in _KEYS:
        value = os.getenv(ENV_PREFIX + key.upper())
        if value is None or value.strip() == "":
            continue
        overrides[key] = value
    return overrides


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    coerced = {}
    for key, value in values.items():
        if key in _BOOL_KEYS:
            coerced[key] = _as_bool(key, value)
        elif value is None:
            coerced[key] = None
        else:
            coerced[key] = str(value)
    return coerced


def load_config(path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> GeneratorConfig:
    """
    Build the generator configuration.

    Args:
        path: YAML config file. When None, TYPEWRITER_CONFIG or
            ./typewriter.yaml is used if present.
        overrides: Values that win over file and environment (CLI flags).
            None values are ignored.

    Raises:
        ConfigError: If any layer holds an invalid value
        FileNotFoundError: If an explicit path doesn't exist
    """
    if path is None:
        path = os.getenv(ENV_PREFIX + "CONFIG")
        if path is None and os.path.exists(DEFAULT_CONFIG_FILE):
            path = DEFAULT_CONFIG_FILE

    values: Dict[str, Any] = {}
    if path is not None:
        values.update(_load_yaml(path))
    values.update(_env_overrides())
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})

    config = replace(GeneratorConfig(), **_coerce(values))
    return config.validate()
