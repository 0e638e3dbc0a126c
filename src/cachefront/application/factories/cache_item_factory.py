"""Factory for creating validated CacheItem entities."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog

from cachefront.domain.entities.cache_item import CacheItem
from cachefront.domain.validation.key_validator import KeyValidator

log = structlog.get_logger(__name__)


class CacheItemFactory:
    """Creates ``CacheItem``s that share one ``KeyValidator``.

    Fresh items default to ``is_hit=False`` (miss placeholders); façades
    writing caller values pass ``is_hit=True``.
    """

    def __init__(self, key_validator: KeyValidator) -> None:
        self.key_validator = key_validator

    def create(
        self,
        key: Any,
        value: Any = None,
        is_hit: bool = False,
        expiration: datetime | None = None,
    ) -> CacheItem:
        item = CacheItem(
            key,
            value,
            is_hit,
            expiration,
            key_validator=self.key_validator,
        )
        log.debug("cache_item_created", key=item.key, hit=item.is_hit)
        return item

    def miss(self, key: str) -> CacheItem:
        """Placeholder item for a key that was not found."""
        return self.create(key)
