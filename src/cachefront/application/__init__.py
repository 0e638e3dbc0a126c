from .cache import Cache, SafeCache
from .error_translation import translate_errors, translate_iteration
from .factories import CacheFactory, CacheItemFactory, FailureMode
from .manager import CacheManager
from .pool import CacheItemPool

__all__ = [
    "Cache",
    "CacheFactory",
    "CacheItemFactory",
    "CacheItemPool",
    "CacheManager",
    "FailureMode",
    "SafeCache",
    "translate_errors",
    "translate_iteration",
]
