"""Cache error taxonomy.

Every public cache operation is tagged with a ``CacheErrorKind`` so callers
can tell which phase failed. Kinds carry a stable numeric code (grouped by
operation family) and a fixed human-readable message.
"""

from __future__ import annotations

from enum import IntEnum


class CacheErrorKind(IntEnum):
    GET = 32
    GET_MULTIPLE = 33
    SET = 64
    SET_MULTIPLE = 65
    SET_DEFERRED = 66
    DELETE = 128
    DELETE_MULTIPLE = 129
    CLEAR = 256
    HAS = 512
    COMMIT = 1024

    @property
    def code(self) -> int:
        return int(self.value)

    @property
    def family(self) -> int:
        """Power-of-two group code (e.g. SET, SET_MULTIPLE, SET_DEFERRED -> 64)."""
        return 1 << (self.value.bit_length() - 1)

    @property
    def text(self) -> str:
        return _MESSAGES[self]

    @property
    def message(self) -> str:
        return f"CACHESTATE[{self.value}]: {_MESSAGES[self]}"

    def __str__(self) -> str:
        return self.message


_MESSAGES: dict[CacheErrorKind, str] = {
    CacheErrorKind.GET: "Failed to fetch a value from cache",
    CacheErrorKind.GET_MULTIPLE: "Failed to fetch multiple values from cache",
    CacheErrorKind.SET: "Failed to set a value in cache",
    CacheErrorKind.SET_MULTIPLE: "Failed to set multiple values in cache",
    CacheErrorKind.SET_DEFERRED: "Failed to set a deferred value in cache",
    CacheErrorKind.DELETE: "Failed to delete a value from cache",
    CacheErrorKind.DELETE_MULTIPLE: "Failed to delete multiple values from cache",
    CacheErrorKind.CLEAR: "Failed to clear cache",
    CacheErrorKind.HAS: "Failed to check for the availability of a key in cache",
    CacheErrorKind.COMMIT: "Failed to commit a cache transaction",
}


# ---------------------------------------------------------------------------
# Validation failures (raised by KeyValidator / TTL conversion)
# ---------------------------------------------------------------------------


class CacheArgumentError(ValueError):
    """Base class for rejected cache arguments (keys, key collections, TTLs)."""


class InvalidKeyError(CacheArgumentError):
    """Raised when a key is not a string."""


class EmptyKeyError(CacheArgumentError):
    """Raised when a key is an empty string."""


class NotIterableError(CacheArgumentError):
    """Raised when a batch-key argument is not an iterable collection of keys."""


class InvalidTtlError(CacheArgumentError):
    """Raised when a TTL is neither None, an int nor a timedelta."""


# ---------------------------------------------------------------------------
# Façade errors (what callers of Cache / CacheItemPool see)
# ---------------------------------------------------------------------------


class CacheError(Exception):
    """A cache operation failed.

    The message combines the operation kind and the underlying cause, e.g.
    ``CACHESTATE[32]: Failed to fetch a value from cache ; connection refused``.
    """

    def __init__(self, kind: CacheErrorKind, cause: BaseException | None = None):
        message = kind.message
        if cause is not None:
            message = f"{message} ; {cause}"
        super().__init__(message)
        self.kind = kind
        self.cause = cause

    @property
    def code(self) -> int:
        return self.kind.code


class CacheInvalidArgumentError(CacheError, ValueError):
    """A cache operation was called with an invalid key, key collection or TTL."""


class CacheSerializationError(Exception):
    """Raised by blob drivers when an item cannot be encoded or decoded."""
