"""CacheManager - holds the item pool and the simple cache built around it."""

from __future__ import annotations

from typing import Any

import structlog

from cachefront.application.factories.cache_factory import CacheFactory
from cachefront.application.pool import CacheItemPool
from cachefront.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)


class CacheManager:
    """Entry point exposing both cache layers over one driver.

    Implements context manager semantics; closing releases the driver when
    it supports ``close()`` (diskcache, Redis).

        with manager:
            manager.cache.set("key", value, ttl=60)
            item = manager.pool.get_item("key")
    """

    def __init__(self, cache_factory: CacheFactory, pool: CacheItemPool) -> None:
        self._pool = pool
        self._cache = cache_factory.create(pool)

    @property
    def cache(self) -> CachePort:
        return self._cache

    @property
    def pool(self) -> CacheItemPool:
        return self._pool

    def close(self) -> None:
        close = getattr(self._pool.driver, "close", None)
        if callable(close):
            close()
            log.info("cache_manager_closed", driver=type(self._pool.driver).__name__)

    def __enter__(self) -> CacheManager:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
