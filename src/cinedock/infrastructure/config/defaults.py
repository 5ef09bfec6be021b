"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

from .schema import BROWSER_USER_AGENT

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "cinedock",
    "environment": "dev",
    "http": {
        "timeout_seconds": 10.0,
        "user_agent": BROWSER_USER_AGENT,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "catalog": {
        "data_dir": "./data",
        "movies_file": "catalog.txt",
        "series_file": "series.txt",
        "foreign_file": "foreign-series.txt",
    },
    "store": {
        "backend": "upstash",
    },
    "auth": {
        "require_session": True,
        "cookie_name": "session",
    },
    "proxy": {
        "path": "/api/v1/hls-proxy",
        "cache_max_age": 300,
    },
    "bunny": {
        "token_ttl_seconds": 24 * 60 * 60,
    },
}
