"""Uniform exception translation for every public façade entry point.

Policy:
  1. Errors that are already ``CacheError`` propagate unchanged.
  2. Validation failures (``CacheArgumentError``) become
     ``CacheInvalidArgumentError`` tagged with the calling operation.
  3. Anything else becomes ``CacheError`` tagged with the calling operation.

The original exception is always kept as ``__cause__``.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TypeVar

from cachefront.domain.errors import (
    CacheArgumentError,
    CacheError,
    CacheErrorKind,
    CacheInvalidArgumentError,
)

T = TypeVar("T")


@contextmanager
def translate_errors(kind: CacheErrorKind) -> Iterator[None]:
    try:
        yield
    except CacheError:
        raise
    except CacheArgumentError as e:
        raise CacheInvalidArgumentError(kind, e) from e
    except Exception as e:
        raise CacheError(kind, e) from e


def translate_iteration(kind: CacheErrorKind, iterator: Iterator[T]) -> Iterator[T]:
    """Yield from ``iterator``, translating failures raised while it is consumed."""
    while True:
        with translate_errors(kind):
            try:
                entry = next(iterator)
            except StopIteration:
                return
        yield entry
