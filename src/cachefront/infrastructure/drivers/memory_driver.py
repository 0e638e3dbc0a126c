"""In-memory driver - process-local dict, mainly for tests and single-process use."""

from __future__ import annotations

import copy
import threading
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog

from cachefront.application.factories.cache_item_factory import CacheItemFactory
from cachefront.domain.entities.cache_item import CacheItem

log = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class _Entry:
    value: Any
    expiration: datetime | None

    def expired(self, now: datetime) -> bool:
        return self.expiration is not None and self.expiration <= now


class InMemoryCacheDriver:
    """Dict-backed driver with lazy expiry and a deferred write buffer.

    - Expired entries are treated as misses and purged on access.
    - Staged items are snapshotted (``copy.copy``) so later mutation of the
      caller's item does not change what ``commit_deferred`` writes.
    - An ``RLock`` makes single operations and commits atomic per instance.

    Args:
        item_factory: Builds the items returned by ``get``.
        clock: Returns "now" as an aware UTC datetime (injectable for tests).
    """

    def __init__(
        self,
        item_factory: CacheItemFactory,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.item_factory = item_factory
        self._clock = clock or _utcnow
        self._store: dict[str, _Entry] = {}
        self._deferred: dict[str, CacheItem] = {}
        self._lock = threading.RLock()

    def _live_entry(self, key: str) -> _Entry | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.expired(self._clock()):
            del self._store[key]
            log.debug("memory_entry_expired", key=key)
            return None
        return entry

    def get(self, key: str) -> CacheItem:
        with self._lock:
            entry = self._live_entry(key)
        if entry is None:
            return self.item_factory.miss(key)
        return self.item_factory.create(key, entry.value, True, entry.expiration)

    def get_multiple(self, keys: Sequence[str]) -> Iterator[tuple[str, CacheItem]]:
        for key in keys:
            yield key, self.get(key)

    def has(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def delete(self, key: str) -> bool:
        with self._lock:
            self._store.pop(key, None)
        return True

    def delete_multiple(self, keys: Sequence[str]) -> bool:
        with self._lock:
            for key in keys:
                self._store.pop(key, None)
        return True

    def delete_all(self) -> bool:
        with self._lock:
            self._store.clear()
        return True

    def _write(self, item: CacheItem) -> None:
        if item.is_expired(self._clock()):
            self._store.pop(item.key, None)
            return
        self._store[item.key] = _Entry(item.get(), item.expiration)

    def set(self, item: CacheItem) -> bool:
        with self._lock:
            self._write(item)
        return True

    def set_deferred(self, item: CacheItem) -> bool:
        with self._lock:
            self._deferred[item.key] = copy.copy(item)
        return True

    def commit_deferred(self) -> bool:
        with self._lock:
            staged, self._deferred = self._deferred, {}
            for item in staged.values():
                self._write(item)
        log.debug("memory_deferred_committed", count=len(staged))
        return True

    def discard_deferred(self) -> bool:
        with self._lock:
            self._deferred.clear()
        return True

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for entry in self._store.values() if not entry.expired(now))
