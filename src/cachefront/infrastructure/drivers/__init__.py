"""Driver Infrastructure - Backend-Implementations."""

from .diskcache_driver import DiskcacheDriver
from .driver_factory import DriverBackend, create_driver
from .memory_driver import InMemoryCacheDriver
from .redis_driver import RedisDriver
from .serialization import decode_item, encode_item

__all__ = [
    "DiskcacheDriver",
    "DriverBackend",
    "InMemoryCacheDriver",
    "RedisDriver",
    "create_driver",
    "decode_item",
    "encode_item",
]
