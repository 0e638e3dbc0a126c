"""Driver-Factory - creates a storage driver based on config."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import structlog

from cachefront.application.factories.cache_item_factory import CacheItemFactory
from cachefront.domain.ports.cache_driver import CacheDriverPort
from cachefront.infrastructure.drivers.diskcache_driver import DiskcacheDriver
from cachefront.infrastructure.drivers.memory_driver import InMemoryCacheDriver
from cachefront.infrastructure.drivers.redis_driver import RedisDriver

log = structlog.get_logger(__name__)

DriverBackend = Literal["memory", "diskcache", "redis"]


def create_driver(
    item_factory: CacheItemFactory,
    backend: DriverBackend = "diskcache",
    *,
    # Diskcache-Config
    directory: str | Path = "./cache",
    # Redis-Config
    redis_url: str = "redis://localhost:6379/0",
    namespace: str = "",
) -> CacheDriverPort:
    """Factory function: creates the driver for ``backend``.

    Args:
        item_factory: Shared item factory (drivers build the items they return).
        backend: "memory", "diskcache" (SQLite) or "redis".
        directory: Diskcache path.
        redis_url: Redis connection string.
        namespace: Redis key prefix.

    Returns:
        CacheDriverPort implementation.

    Raises:
        ValueError: If ``backend`` is unknown.
    """
    if backend == "memory":
        log.info("driver_factory_create", backend=backend)
        return InMemoryCacheDriver(item_factory)
    elif backend == "diskcache":
        log.info("driver_factory_create", backend=backend, directory=str(directory))
        return DiskcacheDriver(item_factory, directory=directory)
    elif backend == "redis":
        log.info("driver_factory_create", backend=backend, url=redis_url, namespace=namespace)
        return RedisDriver(item_factory, url=redis_url, namespace=namespace)
    else:
        raise ValueError(
            f"Unknown cache backend: {backend!r}. "
            "Must be 'memory', 'diskcache' or 'redis'."
        )
