"""Composition root: wires config into a ready-to-use CacheManager."""

from __future__ import annotations

import structlog

from cachefront.application.factories import CacheFactory, CacheItemFactory
from cachefront.application.manager import CacheManager
from cachefront.application.pool import CacheItemPool
from cachefront.domain.validation import KeyValidator
from cachefront.infrastructure.config.schema import AppConfig
from cachefront.infrastructure.drivers import create_driver

log = structlog.get_logger(__name__)


def build_cache_manager(config: AppConfig) -> CacheManager:
    """Build the full cache stack from a validated config.

    Order matters:
        1. KeyValidator (shared by items, pool and drivers)
        2. CacheItemFactory
        3. Driver (needs the item factory to materialize reads)
        4. CacheItemPool
        5. CacheFactory -> Cache or SafeCache (config.cache.failure_mode)
    """
    key_validator = KeyValidator()
    item_factory = CacheItemFactory(key_validator)

    driver = create_driver(
        item_factory,
        config.cache.backend,
        directory=config.cache.directory,
        redis_url=config.cache.redis_url,
        namespace=config.cache.namespace,
    )
    pool = CacheItemPool(driver, key_validator)
    cache_factory = CacheFactory(item_factory, failure_mode=config.cache.failure_mode)

    manager = CacheManager(cache_factory, pool)
    log.info(
        "cache_manager_built",
        backend=config.cache.backend,
        failure_mode=config.cache.failure_mode,
    )
    return manager
