"""Shared fixtures for integration tests.

These tests use real infrastructure components (DiskcacheDriver on tmp_path,
YAML config files) wired through the composition root.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from cachefront.application.manager import CacheManager
from cachefront.infrastructure.composition import build_cache_manager
from cachefront.infrastructure.config import load_config


@pytest.fixture()
def disk_manager(tmp_path: Path) -> Iterator[CacheManager]:
    """CacheManager over a real DiskcacheDriver in tmp_path (auto-cleaned)."""
    config = load_config(
        cli_overrides={"cache_backend": "diskcache", "cache_dir": str(tmp_path / "cache")}
    )
    with build_cache_manager(config) as manager:
        yield manager
