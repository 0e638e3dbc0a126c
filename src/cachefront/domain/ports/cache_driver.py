"""Cache Driver Port - storage backend the façades delegate to."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Protocol

from cachefront.domain.entities.cache_item import CacheItem


class CacheDriverPort(Protocol):
    """Port for a synchronous storage driver.

    Implementations:
      - InMemoryCacheDriver (process-local dict)
      - DiskcacheDriver (SQLite-based, no daemon)
      - RedisDriver (redis-py client)

    The driver owns persistence, expiration enforcement and the deferred
    write buffer. ``get`` must return a fresh item per call (``is_hit=False``
    for misses), never a reference the driver keeps.
    """

    def get(self, key: str) -> CacheItem:
        """Fetch one item. Missing/expired keys yield a miss item."""
        ...

    def get_multiple(self, keys: Sequence[str]) -> Iterator[tuple[str, CacheItem]]:
        """Lazily yield (key, item) pairs, in input order."""
        ...

    def has(self, key: str) -> bool: ...

    def delete(self, key: str) -> bool:
        """Delete key. Missing keys are not an error."""
        ...

    def delete_multiple(self, keys: Sequence[str]) -> bool: ...

    def delete_all(self) -> bool: ...

    def set(self, item: CacheItem) -> bool:
        """Write through immediately."""
        ...

    def set_deferred(self, item: CacheItem) -> bool:
        """Stage item in the deferred buffer (not visible until commit)."""
        ...

    def commit_deferred(self) -> bool:
        """Flush the deferred buffer. The buffer is empty afterwards."""
        ...

    def discard_deferred(self) -> bool:
        """Drop everything staged since the last commit without writing it."""
        ...
