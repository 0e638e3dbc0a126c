"""Item Pool Port - item-level (transactional) cache surface."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, Protocol

from cachefront.domain.entities.cache_item import CacheItem


class CacheItemPoolPort(Protocol):
    def get_item(self, key: Any) -> CacheItem: ...

    def get_items(self, keys: Iterable[Any]) -> Iterator[tuple[str, CacheItem]]: ...

    def has_item(self, key: Any) -> bool: ...

    def delete_item(self, key: Any) -> bool: ...

    def delete_items(self, keys: Iterable[Any]) -> bool: ...

    def clear(self) -> bool: ...

    def save(self, item: CacheItem) -> bool: ...

    def save_deferred(self, item: CacheItem) -> bool: ...

    def commit(self) -> bool: ...

    def discard_deferred(self) -> bool: ...
