"""Cache Port - value-level (simple cache) surface."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from datetime import timedelta
from typing import Any, Protocol

Ttl = int | timedelta | None


class CachePort(Protocol):
    """Port for a key/value cache with TTL support.

    Implementations:
      - Cache (errors propagate)
      - SafeCache (driver failures are logged, safe defaults returned)
    """

    def get(self, key: Any, default: Any = None) -> Any:
        """Retrieve value. ``default`` = not found / expired."""
        ...

    def set(self, key: Any, value: Any, ttl: Ttl = None) -> bool:
        """Set value with optional TTL (seconds or timedelta)."""
        ...

    def delete(self, key: Any) -> bool: ...

    def clear(self) -> bool: ...

    def has(self, key: Any) -> bool: ...

    def get_multiple(
        self, keys: Iterable[Any], default: Any = None
    ) -> Iterator[tuple[str, Any]]: ...

    def set_multiple(
        self, values: Mapping[Any, Any] | Iterable[tuple[Any, Any]], ttl: Ttl = None
    ) -> bool:
        """All-or-nothing: nothing is committed when any item fails to stage."""
        ...

    def delete_multiple(self, keys: Iterable[Any]) -> bool: ...
