"""Shared test fixtures for cachefront test suite."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator, Sequence
from datetime import datetime, timedelta, timezone

import pytest
import structlog

from cachefront.application.cache import Cache, SafeCache
from cachefront.application.factories import CacheItemFactory
from cachefront.application.pool import CacheItemPool
from cachefront.domain.entities.cache_item import CacheItem
from cachefront.domain.validation import KeyValidator
from cachefront.infrastructure.drivers.memory_driver import InMemoryCacheDriver

# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """UTC clock that starts at the real current time and only moves on advance()."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


# ---------------------------------------------------------------------------
# Fake drivers
# ---------------------------------------------------------------------------


class FailingCacheDriver:
    """Every operation raises ``RuntimeError("test <operation>")``."""

    def __init__(self, item_factory: CacheItemFactory) -> None:
        self.item_factory = item_factory

    def get(self, key: str) -> CacheItem:
        raise RuntimeError("test get")

    def get_multiple(self, keys: Sequence[str]) -> Iterator[tuple[str, CacheItem]]:
        raise RuntimeError("test get multiple")

    def has(self, key: str) -> bool:
        raise RuntimeError("test has")

    def delete(self, key: str) -> bool:
        raise RuntimeError("test delete")

    def delete_multiple(self, keys: Sequence[str]) -> bool:
        raise RuntimeError("test delete multiple")

    def delete_all(self) -> bool:
        raise RuntimeError("test delete all")

    def set(self, item: CacheItem) -> bool:
        raise RuntimeError("test set")

    def set_deferred(self, item: CacheItem) -> bool:
        raise RuntimeError("test set deferred")

    def commit_deferred(self) -> bool:
        raise RuntimeError("test commit")

    def discard_deferred(self) -> bool:
        # Nothing is ever staged, so there is nothing to drop.
        return True


class RefusingCacheDriver:
    """Never raises, but reports ``False`` for every write and finds nothing."""

    def __init__(self, item_factory: CacheItemFactory) -> None:
        self.item_factory = item_factory
        self.deferred: list[CacheItem] = []
        self.commits = 0
        self.discarded = 0

    def get(self, key: str) -> CacheItem:
        return self.item_factory.miss(key)

    def get_multiple(self, keys: Sequence[str]) -> Iterator[tuple[str, CacheItem]]:
        for key in keys:
            yield key, self.item_factory.miss(key)

    def has(self, key: str) -> bool:
        return False

    def delete(self, key: str) -> bool:
        return False

    def delete_multiple(self, keys: Sequence[str]) -> bool:
        return False

    def delete_all(self) -> bool:
        return False

    def set(self, item: CacheItem) -> bool:
        return False

    def set_deferred(self, item: CacheItem) -> bool:
        self.deferred.append(item)
        return len(self.deferred) < 2

    def commit_deferred(self) -> bool:
        self.commits += 1
        return False

    def discard_deferred(self) -> bool:
        self.discarded += 1
        return True


class BrokenStreamDriver(InMemoryCacheDriver):
    """In-memory driver whose batch read fails after ``fail_after`` entries."""

    def __init__(self, item_factory: CacheItemFactory, fail_after: int = 1) -> None:
        super().__init__(item_factory)
        self.fail_after = fail_after

    def get_multiple(self, keys: Sequence[str]) -> Iterator[tuple[str, CacheItem]]:
        for index, key in enumerate(keys):
            if index >= self.fail_after:
                raise ConnectionError("stream broke")
            yield key, self.get(key)


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def key_validator() -> KeyValidator:
    return KeyValidator()


@pytest.fixture()
def item_factory(key_validator: KeyValidator) -> CacheItemFactory:
    return CacheItemFactory(key_validator)


@pytest.fixture()
def memory_driver(
    item_factory: CacheItemFactory, clock: FakeClock
) -> InMemoryCacheDriver:
    """In-memory driver on a fake clock."""
    return InMemoryCacheDriver(item_factory, clock=clock)


@pytest.fixture()
def pool(memory_driver: InMemoryCacheDriver, key_validator: KeyValidator) -> CacheItemPool:
    return CacheItemPool(memory_driver, key_validator)


@pytest.fixture()
def cache(pool: CacheItemPool, item_factory: CacheItemFactory) -> Cache:
    return Cache(pool, item_factory)


@pytest.fixture()
def failing_driver(item_factory: CacheItemFactory) -> FailingCacheDriver:
    return FailingCacheDriver(item_factory)


@pytest.fixture()
def failing_pool(
    failing_driver: FailingCacheDriver, key_validator: KeyValidator
) -> CacheItemPool:
    return CacheItemPool(failing_driver, key_validator)


@pytest.fixture()
def failing_cache(failing_pool: CacheItemPool, item_factory: CacheItemFactory) -> Cache:
    return Cache(failing_pool, item_factory)


@pytest.fixture()
def refusing_driver(item_factory: CacheItemFactory) -> RefusingCacheDriver:
    return RefusingCacheDriver(item_factory)


@pytest.fixture()
def refusing_cache(
    refusing_driver: RefusingCacheDriver,
    key_validator: KeyValidator,
    item_factory: CacheItemFactory,
) -> Cache:
    return Cache(CacheItemPool(refusing_driver, key_validator), item_factory)


@pytest.fixture()
def safe_failing_cache(failing_cache: Cache) -> SafeCache:
    return SafeCache(failing_cache)


@pytest.fixture()
def broken_stream_driver(item_factory: CacheItemFactory) -> BrokenStreamDriver:
    return BrokenStreamDriver(item_factory, fail_after=1)


@pytest.fixture()
def broken_stream_cache(
    broken_stream_driver: BrokenStreamDriver,
    key_validator: KeyValidator,
    item_factory: CacheItemFactory,
) -> Cache:
    return Cache(CacheItemPool(broken_stream_driver, key_validator), item_factory)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _quiet_structlog() -> Iterator[None]:
    """Only WARNING+ events, written to stderr, so stdout stays assertable."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()
