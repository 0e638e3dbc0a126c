"""Simple-cache façades (value level) built atop a CacheItemPool.

Two failure strategies exist; a façade instance uses exactly one of them:

- ``Cache``: every failure propagates as a ``CacheError``.
- ``SafeCache``: validation failures still propagate, every other
  ``CacheError`` is logged and a safe default is returned.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from cachefront.application.error_translation import translate_errors
from cachefront.domain.ports.cache_item_pool import CacheItemPoolPort
from cachefront.domain.entities.cache_item import CacheItem, expiration_from_ttl
from cachefront.domain.errors import (
    CacheError,
    CacheErrorKind,
    CacheInvalidArgumentError,
    NotIterableError,
)
from cachefront.domain.ports.cache import Ttl

if TYPE_CHECKING:
    from cachefront.application.factories.cache_item_factory import CacheItemFactory

log = structlog.get_logger(__name__)

T = TypeVar("T")


def _pairs(values: Any) -> Iterable[tuple[Any, Any]]:
    if isinstance(values, Mapping):
        return values.items()
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise NotIterableError("The given values are not iterable")
    return values


def _unwrap(
    items: Iterator[tuple[str, CacheItem]], default: Any
) -> Iterator[tuple[str, Any]]:
    for key, item in items:
        yield key, item.get() if item.is_hit else default


class Cache:
    """Value-level cache; errors always propagate.

    Args:
        pool: Item pool that performs validation and driver I/O.
        item_factory: Builds the items written by ``set``/``set_multiple``.
    """

    def __init__(self, pool: CacheItemPoolPort, item_factory: CacheItemFactory) -> None:
        self.pool = pool
        self.item_factory = item_factory

    def get(self, key: Any, default: Any = None) -> Any:
        with translate_errors(CacheErrorKind.GET):
            item = self.pool.get_item(key)
            return item.get() if item.is_hit else default

    def set(self, key: Any, value: Any, ttl: Ttl = None) -> bool:
        with translate_errors(CacheErrorKind.SET):
            item = self.item_factory.create(key, value, True)
            item.expires_at(expiration_from_ttl(ttl))
            return self.pool.save(item)

    def delete(self, key: Any) -> bool:
        with translate_errors(CacheErrorKind.DELETE):
            return self.pool.delete_item(key)

    def clear(self) -> bool:
        with translate_errors(CacheErrorKind.CLEAR):
            return self.pool.clear()

    def has(self, key: Any) -> bool:
        with translate_errors(CacheErrorKind.HAS):
            return self.pool.has_item(key)

    def get_multiple(
        self, keys: Iterable[Any], default: Any = None
    ) -> Iterator[tuple[str, Any]]:
        """Lazily yield (key, value-or-default) in input order.

        Keys are validated eagerly; values are fetched as the iterator is
        consumed. The iterator is single-use.
        """
        with translate_errors(CacheErrorKind.GET_MULTIPLE):
            items = self.pool.get_items(keys)
        return _unwrap(items, default)

    def set_multiple(
        self, values: Mapping[Any, Any] | Iterable[tuple[Any, Any]], ttl: Ttl = None
    ) -> bool:
        """Stage every (key, value) pair, then commit them as one unit.

        All items are built (and their keys validated) before anything is
        staged. If staging any item returns ``False`` or raises, the staged
        part of the batch is discarded and commit is never called.
        """
        with translate_errors(CacheErrorKind.SET_MULTIPLE):
            expiration = expiration_from_ttl(ttl)
            items = [
                self.item_factory.create(key, value, True, expiration)
                for key, value in _pairs(values)
            ]
            try:
                for item in items:
                    if not self.pool.save_deferred(item):
                        log.warning(
                            "cache_set_multiple_aborted",
                            key=item.key,
                            batch_size=len(items),
                        )
                        self.pool.discard_deferred()
                        return False
            except CacheError:
                self.pool.discard_deferred()
                raise
            return self.pool.commit()

    def delete_multiple(self, keys: Iterable[Any]) -> bool:
        with translate_errors(CacheErrorKind.DELETE_MULTIPLE):
            return self.pool.delete_items(keys)


class SafeCache:
    """Log-and-default variant of ``Cache``.

    Invalid arguments are caller bugs and still raise
    ``CacheInvalidArgumentError``. Any other failure is logged and answered
    with ``default`` (``get``), ``False`` (boolean operations) or ``default``
    for every key not yet produced (``get_multiple``).
    """

    def __init__(self, cache: Cache) -> None:
        self.cache = cache

    @property
    def pool(self) -> CacheItemPoolPort:
        return self.cache.pool

    def _guarded(self, fallback: T, operation: Callable[..., T], *args: Any) -> T:
        try:
            return operation(*args)
        except CacheInvalidArgumentError:
            raise
        except CacheError as e:
            self._log_failure(e)
            return fallback

    @staticmethod
    def _log_failure(error: CacheError) -> None:
        log.error(
            f"cache_{error.kind.name.lower()}_failed",
            code=error.code,
            error=str(error),
            exc_info=error,
        )

    def get(self, key: Any, default: Any = None) -> Any:
        return self._guarded(default, self.cache.get, key, default)

    def set(self, key: Any, value: Any, ttl: Ttl = None) -> bool:
        return self._guarded(False, self.cache.set, key, value, ttl)

    def delete(self, key: Any) -> bool:
        return self._guarded(False, self.cache.delete, key)

    def clear(self) -> bool:
        return self._guarded(False, self.cache.clear)

    def has(self, key: Any) -> bool:
        return self._guarded(False, self.cache.has, key)

    def get_multiple(
        self, keys: Iterable[Any], default: Any = None
    ) -> Iterator[tuple[str, Any]]:
        if isinstance(keys, Iterable) and not isinstance(keys, (str, bytes)):
            keys = list(keys)
        try:
            entries = self.cache.get_multiple(keys, default)
        except CacheInvalidArgumentError:
            raise
        except CacheError as e:
            self._log_failure(e)
            return iter([(key, default) for key in keys])
        return self._guard_stream(entries, list(keys), default)

    def _guard_stream(
        self,
        entries: Iterator[tuple[str, Any]],
        keys: list[str],
        default: Any,
    ) -> Iterator[tuple[str, Any]]:
        produced = 0
        try:
            for entry in entries:
                produced += 1
                yield entry
        except CacheError as e:
            self._log_failure(e)
            for key in keys[produced:]:
                yield key, default

    def set_multiple(
        self, values: Mapping[Any, Any] | Iterable[tuple[Any, Any]], ttl: Ttl = None
    ) -> bool:
        return self._guarded(False, self.cache.set_multiple, values, ttl)

    def delete_multiple(self, keys: Iterable[Any]) -> bool:
        return self._guarded(False, self.cache.delete_multiple, keys)
