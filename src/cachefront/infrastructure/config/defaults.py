"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "cachefront",
    "environment": "dev",
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "backend": "diskcache",
        "dir": "./.cache/cachefront",
        "redis_url": "redis://localhost:6379/0",
        "namespace": "",
        "failure_mode": "raise",
    },
}
