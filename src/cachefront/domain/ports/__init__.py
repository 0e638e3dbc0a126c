from .cache import CachePort, Ttl
from .cache_driver import CacheDriverPort
from .cache_item_pool import CacheItemPoolPort

__all__ = [
    "CacheDriverPort",
    "CacheItemPoolPort",
    "CachePort",
    "Ttl",
]
