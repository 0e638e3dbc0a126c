"""Cache key validation.

A key is valid when it is a non-empty ``str``. Keys are returned unchanged:
no trimming, no normalization.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from cachefront.domain.errors import (
    EmptyKeyError,
    InvalidKeyError,
    NotIterableError,
)


class KeyValidator:
    """Validates single keys and batches of keys."""

    def validate(self, key: Any) -> str:
        if not isinstance(key, str):
            raise InvalidKeyError("The given key is not a string")
        if not key:
            raise EmptyKeyError("The given key is empty")
        return key

    def validate_multiple(self, keys: Any) -> list[str]:
        """Validate keys in iteration order, stopping at the first bad one.

        A bare ``str``/``bytes`` is a single key, not a key collection, and is
        rejected like any other non-iterable.
        """
        if isinstance(keys, (str, bytes)) or not isinstance(keys, Iterable):
            raise NotIterableError("The given keys are not iterable")
        return [self.validate(key) for key in keys]
