"""cachefront - item-pool and simple-cache façades over pluggable storage drivers."""

from cachefront.application import (
    Cache,
    CacheFactory,
    CacheItemFactory,
    CacheItemPool,
    CacheManager,
    SafeCache,
)
from cachefront.domain.entities import CacheItem
from cachefront.domain.errors import (
    CacheArgumentError,
    CacheError,
    CacheErrorKind,
    CacheInvalidArgumentError,
    CacheSerializationError,
    EmptyKeyError,
    InvalidKeyError,
    InvalidTtlError,
    NotIterableError,
)
from cachefront.domain.validation import KeyValidator

__all__ = [
    "Cache",
    "CacheArgumentError",
    "CacheError",
    "CacheErrorKind",
    "CacheFactory",
    "CacheInvalidArgumentError",
    "CacheItem",
    "CacheItemFactory",
    "CacheItemPool",
    "CacheManager",
    "CacheSerializationError",
    "EmptyKeyError",
    "InvalidKeyError",
    "InvalidTtlError",
    "KeyValidator",
    "NotIterableError",
    "SafeCache",
]
