"""Redis driver - synchronous Redis via redis-py."""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from datetime import datetime, timezone

import structlog
from redis import Redis

from cachefront.application.factories.cache_item_factory import CacheItemFactory
from cachefront.domain.entities.cache_item import CacheItem
from cachefront.infrastructure.drivers.serialization import decode_item, encode_item

log = structlog.get_logger(__name__)


def _remaining_ms(expiration: datetime | None) -> int | None:
    if expiration is None:
        return None
    delta = expiration - datetime.now(timezone.utc)
    return math.ceil(delta.total_seconds() * 1000)


class RedisDriver:
    """Redis cache driver.

    - Items are stored as encoded records under ``namespace + key``.
    - Expiration is applied with ``SET ... PX``; already expired items are
      deleted instead of written.
    - ``commit_deferred`` runs the buffer in a MULTI/EXEC pipeline.
    - ``delete_all`` flushes the DB, or only ``namespace*`` keys when a
      namespace is configured.

    Args:
        item_factory: Builds the items returned by ``get``.
        url: Redis URL (e.g. ``redis://localhost:6379/0``).
        client: Pre-built client (takes precedence over ``url``).
        namespace: Key prefix isolating this cache inside the Redis DB.
        batch_size: Keys per ``MGET`` / ``DEL`` round trip in batch operations.
    """

    def __init__(
        self,
        item_factory: CacheItemFactory,
        url: str = "redis://localhost:6379/0",
        *,
        client: Redis | None = None,
        namespace: str = "",
        batch_size: int = 100,
    ) -> None:
        self.url = url
        self.item_factory = item_factory
        self.namespace = namespace
        self.batch_size = batch_size
        self._client: Redis | None = client
        self._deferred: dict[str, tuple[bytes, datetime | None]] = {}

        log.info("redis_driver_init", url=url, namespace=namespace)

    # --- Context Manager ---
    def __enter__(self) -> RedisDriver:
        self._connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _connect(self) -> Redis:
        if self._client is None:
            # we serialize binary
            self._client = Redis.from_url(self.url, decode_responses=False)
            log.info("redis_connected", url=self.url)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            log.info("redis_closed")

    def _k(self, key: str) -> str:
        return f"{self.namespace}{key}"

    def _decode(self, key: str, raw: bytes | None) -> CacheItem:
        if raw is None:
            return self.item_factory.miss(key)
        item = decode_item(raw, key_validator=self.item_factory.key_validator)
        if item.is_expired():
            return self.item_factory.miss(key)
        return item

    def _encode(self, item: CacheItem) -> bytes:
        stored = self.item_factory.create(item.key, item.get(), True, item.expiration)
        return encode_item(stored)

    # --- CacheDriverPort implementation ---
    def get(self, key: str) -> CacheItem:
        raw = self._connect().get(self._k(key))
        log.debug("cache_hit" if raw is not None else "cache_miss", key=key)
        return self._decode(key, raw)

    def get_multiple(self, keys: Sequence[str]) -> Iterator[tuple[str, CacheItem]]:
        client = self._connect()
        for start in range(0, len(keys), self.batch_size):
            batch = keys[start : start + self.batch_size]
            raws = client.mget([self._k(key) for key in batch])
            for key, raw in zip(batch, raws):
                yield key, self._decode(key, raw)

    def has(self, key: str) -> bool:
        return self._connect().exists(self._k(key)) > 0

    def delete(self, key: str) -> bool:
        deleted = self._connect().delete(self._k(key))
        log.debug("cache_delete", key=key, deleted=deleted > 0)
        return True

    def delete_multiple(self, keys: Sequence[str]) -> bool:
        client = self._connect()
        for start in range(0, len(keys), self.batch_size):
            batch = keys[start : start + self.batch_size]
            client.delete(*[self._k(key) for key in batch])
        return True

    def delete_all(self) -> bool:
        client = self._connect()
        if not self.namespace:
            client.flushdb()
            log.warning("redis_flushed")
            return True
        batch: list[bytes] = []
        for name in client.scan_iter(match=f"{self.namespace}*", count=self.batch_size):
            batch.append(name)
            if len(batch) >= self.batch_size:
                client.delete(*batch)
                batch = []
        if batch:
            client.delete(*batch)
        log.warning("redis_namespace_cleared", namespace=self.namespace)
        return True

    def set(self, item: CacheItem) -> bool:
        blob = self._encode(item)
        px = _remaining_ms(item.expiration)
        client = self._connect()
        if px is not None and px <= 0:
            client.delete(self._k(item.key))
            return True
        written = client.set(self._k(item.key), blob, px=px)
        log.debug("cache_set", key=item.key, ttl_ms=px, size_bytes=len(blob))
        return bool(written)

    def set_deferred(self, item: CacheItem) -> bool:
        self._deferred[item.key] = (self._encode(item), item.expiration)
        return True

    def commit_deferred(self) -> bool:
        staged, self._deferred = self._deferred, {}
        if not staged:
            return True
        pipe = self._connect().pipeline(transaction=True)
        for key, (blob, expiration) in staged.items():
            px = _remaining_ms(expiration)
            if px is not None and px <= 0:
                pipe.delete(self._k(key))
            else:
                pipe.set(self._k(key), blob, px=px)
        pipe.execute()
        log.debug("redis_deferred_committed", count=len(staged))
        return True

    def discard_deferred(self) -> bool:
        self._deferred = {}
        return True
