"""Factory composing a simple-cache façade around a pool or driver."""

from __future__ import annotations

from typing import Literal

import structlog

from cachefront.application.cache import Cache, SafeCache
from cachefront.application.factories.cache_item_factory import CacheItemFactory
from cachefront.application.pool import CacheItemPool
from cachefront.domain.ports.cache import CachePort
from cachefront.domain.ports.cache_driver import CacheDriverPort
from cachefront.domain.ports.cache_item_pool import CacheItemPoolPort

log = structlog.get_logger(__name__)

FailureMode = Literal["raise", "log"]


class CacheFactory:
    """Builds ``Cache`` (failure_mode="raise") or ``SafeCache`` ("log").

    The failure mode is fixed per factory so every façade it builds behaves
    the same way.
    """

    def __init__(
        self,
        item_factory: CacheItemFactory,
        *,
        failure_mode: FailureMode = "raise",
    ) -> None:
        if failure_mode not in ("raise", "log"):
            raise ValueError(
                f"Unknown failure mode: {failure_mode!r}. Must be 'raise' or 'log'."
            )
        self.item_factory = item_factory
        self.failure_mode = failure_mode

    def create(self, pool: CacheItemPoolPort) -> CachePort:
        cache = Cache(pool, self.item_factory)
        log.debug("cache_facade_created", failure_mode=self.failure_mode)
        if self.failure_mode == "log":
            return SafeCache(cache)
        return cache

    def create_for_driver(self, driver: CacheDriverPort) -> CachePort:
        """Wrap ``driver`` in a CacheItemPool, then build the façade."""
        pool = CacheItemPool(driver, self.item_factory.key_validator)
        return self.create(pool)
