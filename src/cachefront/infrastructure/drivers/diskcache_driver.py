"""Diskcache driver - SQLite-based cache without daemon process."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from datetime import datetime, timezone
from pathlib import Path

import structlog
from diskcache import Cache as DiskCache

from cachefront.application.factories.cache_item_factory import CacheItemFactory
from cachefront.domain.entities.cache_item import CacheItem
from cachefront.infrastructure.drivers.serialization import decode_item, encode_item

log = structlog.get_logger(__name__)


def _remaining_seconds(expiration: datetime | None) -> float | None:
    if expiration is None:
        return None
    return (expiration - datetime.now(timezone.utc)).total_seconds()


class DiskcacheDriver:
    """Synchronous driver on top of ``diskcache.Cache``.

    - Items are stored as encoded records (see ``serialization``).
    - Expiration is handed to diskcache as a relative ``expire``.
    - ``commit_deferred`` writes the whole buffer in one SQLite transaction.
    - Implements context manager (``with driver:``); the cache is opened
      lazily on first access.

    Args:
        directory: SQLite DB path (default: ``./cache``).
        item_factory: Builds the items returned by ``get``.
    """

    def __init__(
        self,
        item_factory: CacheItemFactory,
        directory: str | Path = "./cache",
    ) -> None:
        self.directory = Path(directory)
        self.item_factory = item_factory
        self._cache: DiskCache | None = None
        self._deferred: dict[str, tuple[bytes, datetime | None]] = {}

        log.info("diskcache_driver_init", directory=str(self.directory))

    # --- Context Manager ---
    def __enter__(self) -> DiskcacheDriver:
        self._open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _open(self) -> DiskCache:
        if self._cache is None:
            self._cache = DiskCache(str(self.directory))
            log.info("diskcache_opened", path=str(self.directory))
        return self._cache

    def close(self) -> None:
        if self._cache is not None:
            self._cache.close()
            self._cache = None
            log.info("diskcache_closed", directory=str(self.directory))

    # --- CacheDriverPort implementation ---
    def _encode(self, item: CacheItem) -> bytes:
        stored = self.item_factory.create(item.key, item.get(), True, item.expiration)
        return encode_item(stored)

    def get(self, key: str) -> CacheItem:
        blob = self._open().get(key, default=None)
        if blob is None:
            log.debug("cache_miss", key=key)
            return self.item_factory.miss(key)
        item = decode_item(blob, key_validator=self.item_factory.key_validator)
        if item.is_expired():
            return self.item_factory.miss(key)
        log.debug("cache_hit", key=key)
        return item

    def get_multiple(self, keys: Sequence[str]) -> Iterator[tuple[str, CacheItem]]:
        for key in keys:
            yield key, self.get(key)

    def has(self, key: str) -> bool:
        # diskcache.Cache.__contains__ checks existence + expiry
        return key in self._open()

    def delete(self, key: str) -> bool:
        deleted = self._open().delete(key)
        log.debug("cache_delete", key=key, deleted=deleted)
        return True

    def delete_multiple(self, keys: Sequence[str]) -> bool:
        cache = self._open()
        with cache.transact():
            for key in keys:
                cache.delete(key)
        log.debug("cache_delete_multiple", count=len(keys))
        return True

    def delete_all(self) -> bool:
        removed = self._open().clear()
        log.warning("cache_cleared", directory=str(self.directory), removed=removed)
        return True

    def _write(
        self, cache: DiskCache, key: str, blob: bytes, expiration: datetime | None
    ) -> bool:
        expire = _remaining_seconds(expiration)
        if expire is not None and expire <= 0:
            cache.delete(key)
            return True
        return bool(cache.set(key, blob, expire=expire))

    def set(self, item: CacheItem) -> bool:
        blob = self._encode(item)
        written = self._write(self._open(), item.key, blob, item.expiration)
        log.debug("cache_set", key=item.key, size_bytes=len(blob))
        return written

    def set_deferred(self, item: CacheItem) -> bool:
        # Encoded now so serialization errors surface while staging.
        self._deferred[item.key] = (self._encode(item), item.expiration)
        return True

    def commit_deferred(self) -> bool:
        staged, self._deferred = self._deferred, {}
        cache = self._open()
        with cache.transact():
            ok = all(
                [
                    self._write(cache, key, blob, expiration)
                    for key, (blob, expiration) in staged.items()
                ]
            )
        log.debug("diskcache_deferred_committed", count=len(staged), ok=ok)
        return ok

    def discard_deferred(self) -> bool:
        self._deferred = {}
        return True
