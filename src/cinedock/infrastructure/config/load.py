"""Layered configuration loading: defaults < YAML < environment < CLI."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_TOP_LEVEL = ("app_name", "environment")
_SECTIONS = ("http", "logging", "catalog", "store", "auth", "proxy", "bunny")

# Flat key (env / CLI) -> "section.key"
_FLAT_KEYS: dict[str, str] = {
    "http_timeout_seconds": "http.timeout_seconds",
    "http_user_agent": "http.user_agent",
    "log_level": "logging.level",
    "log_format": "logging.format",
    "data_dir": "catalog.data_dir",
    "store_backend": "store.backend",
    "store_rest_url": "store.rest_url",
    "store_rest_token": "store.rest_token",
    "store_redis_url": "store.redis_url",
    "require_session": "auth.require_session",
    "jwt_secret": "auth.jwt_secret",
    "bunny_library_id": "bunny.library_id",
    "bunny_security_key": "bunny.security_key",
}


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Bring one layer into the sectioned shape; unknown keys are dropped.

    Sections are copied, so merging never mutates the source layer.
    """
    out: dict[str, Any] = {k: layer[k] for k in _TOP_LEVEL if k in layer}
    for section in _SECTIONS:
        block = layer.get(section)
        if isinstance(block, Mapping):
            out[section] = dict(block)
    for flat_key, dotted in _FLAT_KEYS.items():
        if flat_key in layer:
            section, key = dotted.split(".", 1)
            out.setdefault(section, {})[key] = layer[flat_key]
    return out


def _merge(into: dict[str, Any], layer: Mapping[str, Any]) -> None:
    for key, value in layer.items():
        current = into.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge(current, value)
        else:
            into[key] = value


def _yaml_layer(config_path: Path) -> Mapping[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(config_path)
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Build the validated AppConfig from every layer, later layers winning.

    A ``.env`` file only fills variables that are not already set in the
    process environment.  No files or directories are created.

    Raises:
        FileNotFoundError: ``config_path`` or ``dotenv_path`` does not exist.
        ValueError: The YAML is not a mapping, or the merged config is invalid.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    layers: list[Mapping[str, Any]] = [DEFAULT_CONFIG]
    if config_path is not None:
        layers.append(_yaml_layer(config_path))
    layers.append(EnvOverrides().to_update_dict())
    layers.append(cli_overrides or {})

    merged: dict[str, Any] = {}
    for layer in layers:
        _merge(merged, _sectioned(layer))
    return AppConfig.model_validate(merged)
