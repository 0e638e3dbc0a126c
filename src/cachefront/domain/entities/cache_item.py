"""CacheItem - one materialized cache slot (key, value, hit flag, expiration).

Items are mutable value objects owned by exactly one caller at a time:
``set``/``expires_at``/``expires_after`` mutate in place and return the same
instance. Expiration is always stored as an absolute, timezone-aware UTC
``datetime``; durations are converted at the moment they are applied.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from cachefront.domain.errors import InvalidTtlError
from cachefront.domain.validation.key_validator import KeyValidator

_DEFAULT_VALIDATOR = KeyValidator()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(when: datetime) -> datetime:
    # Naive datetimes are interpreted as UTC.
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc)


def expiration_from_ttl(
    ttl: int | timedelta | None, *, now: datetime | None = None
) -> datetime | None:
    """Convert a relative TTL into an absolute expiration.

    Args:
        ttl: ``None`` (never expires), whole seconds, or a ``timedelta``.
        now: Reference point (default: current UTC time).

    Raises:
        InvalidTtlError: For any other type (``bool`` included), or when the
            resulting expiration falls outside the ``datetime`` range.
    """
    if ttl is None:
        return None
    if isinstance(ttl, bool) or not isinstance(ttl, (int, timedelta)):
        raise InvalidTtlError(
            f"The given TTL must be None, int or timedelta, got: {type(ttl).__name__}"
        )
    try:
        if isinstance(ttl, int):
            ttl = timedelta(seconds=ttl)
        return (now or _utcnow()) + ttl
    except OverflowError as e:
        raise InvalidTtlError(f"The given TTL is out of range: {ttl!r}") from e


class CacheItem:
    """A single cache entry.

    Args:
        key: Cache key, validated on construction (non-empty ``str``).
        value: Payload. Only observable through ``get()`` when ``is_hit``.
        is_hit: Whether the entry was found in / explicitly set into the cache.
        expiration: Absolute expiration, or ``None`` for no expiration.
        key_validator: Validator used for ``key`` (default: ``KeyValidator()``).
    """

    __slots__ = ("_key", "_value", "_is_hit", "_expiration")

    def __init__(
        self,
        key: Any,
        value: Any = None,
        is_hit: bool = False,
        expiration: datetime | None = None,
        *,
        key_validator: KeyValidator | None = None,
    ) -> None:
        validator = key_validator or _DEFAULT_VALIDATOR
        self._key: str = validator.validate(key)
        self._value = value
        self._is_hit = bool(is_hit)
        self._expiration = _as_utc(expiration) if expiration is not None else None

    @property
    def key(self) -> str:
        return self._key

    @property
    def is_hit(self) -> bool:
        return self._is_hit

    @property
    def expiration(self) -> datetime | None:
        return self._expiration

    def get(self) -> Any:
        """Return the value, or ``None`` when this item is a miss."""
        if not self._is_hit:
            return None
        return self._value

    def set(self, value: Any) -> CacheItem:
        self._value = value
        self._is_hit = True
        return self

    def expires_at(self, when: datetime | None) -> CacheItem:
        self._expiration = _as_utc(when) if when is not None else None
        return self

    def expires_after(self, ttl: int | timedelta | None) -> CacheItem:
        """Expire ``ttl`` after *now*; each call recomputes from the current time."""
        self._expiration = expiration_from_ttl(ttl)
        return self

    def is_expired(self, now: datetime | None = None) -> bool:
        if self._expiration is None:
            return False
        return self._expiration <= (now or _utcnow())

    # --- Serialization contract ---
    def to_record(self) -> dict[str, Any]:
        """Canonical 4-field record used by blob drivers."""
        return {
            "key": self._key,
            "value": self._value,
            "expiration": (
                self._expiration.isoformat() if self._expiration is not None else None
            ),
            "is_hit": self._is_hit,
        }

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        *,
        key_validator: KeyValidator | None = None,
    ) -> CacheItem:
        expiration = record.get("expiration")
        return cls(
            record["key"],
            record.get("value"),
            bool(record.get("is_hit", False)),
            datetime.fromisoformat(expiration) if expiration is not None else None,
            key_validator=key_validator,
        )

    def describe(self) -> str:
        state = "hit" if self._is_hit else "miss"
        expires = self._expiration.isoformat() if self._expiration else "never"
        return f"{self._key} ({state}, expires: {expires})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CacheItem):
            return NotImplemented
        return (
            self._key == other._key
            and self._value == other._value
            and self._is_hit == other._is_hit
            and self._expiration == other._expiration
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"CacheItem(key={self._key!r}, is_hit={self._is_hit}, "
            f"expiration={self._expiration!r})"
        )
