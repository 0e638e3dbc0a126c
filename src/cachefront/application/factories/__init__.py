from .cache_factory import CacheFactory, FailureMode
from .cache_item_factory import CacheItemFactory

__all__ = ["CacheFactory", "CacheItemFactory", "FailureMode"]
