"""Canonical item codec for drivers that persist items as opaque blobs.

The blob is the pickled 4-field record {key, value, expiration, is_hit}
(see ``CacheItem.to_record``), so ``decode_item(encode_item(item)) == item``.
"""

from __future__ import annotations

import pickle

from cachefront.domain.entities.cache_item import CacheItem
from cachefront.domain.errors import CacheSerializationError
from cachefront.domain.validation.key_validator import KeyValidator

_RECORD_FIELDS = frozenset({"key", "value", "expiration", "is_hit"})


def encode_item(item: CacheItem) -> bytes:
    try:
        return pickle.dumps(item.to_record(), protocol=pickle.HIGHEST_PROTOCOL)
    except (pickle.PickleError, TypeError, AttributeError) as e:
        raise CacheSerializationError(
            f"Cannot serialize cache item {item.key!r}: {e}"
        ) from e


def decode_item(blob: bytes, *, key_validator: KeyValidator | None = None) -> CacheItem:
    try:
        record = pickle.loads(blob)
    except (pickle.PickleError, EOFError, TypeError, ValueError) as e:
        raise CacheSerializationError(f"Cannot deserialize cache item: {e}") from e
    if not isinstance(record, dict) or not _RECORD_FIELDS <= record.keys():
        raise CacheSerializationError(
            f"Cache blob is not an item record, got: {type(record)!r}"
        )
    return CacheItem.from_record(record, key_validator=key_validator)
