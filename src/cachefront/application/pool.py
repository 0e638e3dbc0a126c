"""CacheItemPool - item-level façade over a CacheDriverPort.

Stateless: validates inputs, delegates to the driver and translates every
failure into a ``CacheError`` tagged with the operation kind. Deferred
writes are staged in (and owned by) the driver until ``commit()``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

import structlog

from cachefront.application.error_translation import (
    translate_errors,
    translate_iteration,
)
from cachefront.domain.entities.cache_item import CacheItem
from cachefront.domain.errors import CacheErrorKind
from cachefront.domain.ports.cache_driver import CacheDriverPort
from cachefront.domain.validation.key_validator import KeyValidator

log = structlog.get_logger(__name__)


class CacheItemPool:
    """Item pool with exception-always error semantics.

    Args:
        driver: Storage driver (injected by composition root).
        key_validator: Validator applied to every incoming key.
    """

    def __init__(self, driver: CacheDriverPort, key_validator: KeyValidator) -> None:
        self.driver = driver
        self.key_validator = key_validator

    def get_item(self, key: Any) -> CacheItem:
        with translate_errors(CacheErrorKind.GET):
            key = self.key_validator.validate(key)
            item = self.driver.get(key)
        log.debug("pool_get_item", key=key, hit=item.is_hit)
        return item

    def get_items(self, keys: Iterable[Any]) -> Iterator[tuple[str, CacheItem]]:
        """Lazily yield (key, item) pairs in input order (single pass)."""
        with translate_errors(CacheErrorKind.GET_MULTIPLE):
            validated = self.key_validator.validate_multiple(keys)
            items = iter(self.driver.get_multiple(validated))
        log.debug("pool_get_items", count=len(validated))
        return translate_iteration(CacheErrorKind.GET_MULTIPLE, items)

    def has_item(self, key: Any) -> bool:
        with translate_errors(CacheErrorKind.HAS):
            key = self.key_validator.validate(key)
            return self.driver.has(key)

    def delete_item(self, key: Any) -> bool:
        with translate_errors(CacheErrorKind.DELETE):
            key = self.key_validator.validate(key)
            deleted = self.driver.delete(key)
        log.debug("pool_delete_item", key=key, ok=deleted)
        return deleted

    def delete_items(self, keys: Iterable[Any]) -> bool:
        with translate_errors(CacheErrorKind.DELETE_MULTIPLE):
            validated = self.key_validator.validate_multiple(keys)
            deleted = self.driver.delete_multiple(validated)
        log.debug("pool_delete_items", count=len(validated), ok=deleted)
        return deleted

    def clear(self) -> bool:
        with translate_errors(CacheErrorKind.CLEAR):
            cleared = self.driver.delete_all()
        log.info("pool_cleared", ok=cleared)
        return cleared

    def save(self, item: CacheItem) -> bool:
        with translate_errors(CacheErrorKind.SET):
            saved = self.driver.set(item)
        log.debug("pool_save", key=item.key, ok=saved)
        return saved

    def save_deferred(self, item: CacheItem) -> bool:
        """Stage ``item``; it only becomes visible after ``commit()``."""
        with translate_errors(CacheErrorKind.SET_DEFERRED):
            staged = self.driver.set_deferred(item)
        log.debug("pool_save_deferred", key=item.key, ok=staged)
        return staged

    def commit(self) -> bool:
        with translate_errors(CacheErrorKind.COMMIT):
            committed = self.driver.commit_deferred()
        log.debug("pool_commit", ok=committed)
        return committed

    def discard_deferred(self) -> bool:
        """Drop every staged item; nothing staged so far becomes visible."""
        with translate_errors(CacheErrorKind.SET_DEFERRED):
            discarded = self.driver.discard_deferred()
        log.debug("pool_discard_deferred", ok=discarded)
        return discarded
