from .cache_item import CacheItem, expiration_from_ttl

__all__ = ["CacheItem", "expiration_from_ttl"]
