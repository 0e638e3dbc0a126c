"""Tests for InMemoryCacheDriver."""

from __future__ import annotations

from datetime import timedelta

from cachefront.application.factories import CacheItemFactory
from cachefront.infrastructure.drivers.memory_driver import InMemoryCacheDriver


class TestInMemoryCacheDriver:
    def test_get_miss(self, memory_driver: InMemoryCacheDriver) -> None:
        item = memory_driver.get("k")
        assert item.key == "k"
        assert item.is_hit is False

    def test_set_get_returns_fresh_items(
        self, memory_driver: InMemoryCacheDriver, item_factory: CacheItemFactory
    ) -> None:
        memory_driver.set(item_factory.create("k", [1], True))
        first = memory_driver.get("k")
        second = memory_driver.get("k")
        assert first == second
        assert first is not second

    def test_expiry_purges_entry(
        self, memory_driver: InMemoryCacheDriver, item_factory: CacheItemFactory, clock
    ) -> None:
        memory_driver.set(item_factory.create("k", 1, True, clock.now + timedelta(seconds=5)))
        assert len(memory_driver) == 1
        clock.advance(5)
        assert memory_driver.has("k") is False
        assert len(memory_driver) == 0

    def test_get_multiple_order(
        self, memory_driver: InMemoryCacheDriver, item_factory: CacheItemFactory
    ) -> None:
        memory_driver.set(item_factory.create("b", 2, True))
        keys = [key for key, _ in memory_driver.get_multiple(["c", "b", "a"])]
        assert keys == ["c", "b", "a"]

    def test_deletes_always_succeed(self, memory_driver: InMemoryCacheDriver) -> None:
        assert memory_driver.delete("missing") is True
        assert memory_driver.delete_multiple(["x", "y"]) is True
        assert memory_driver.delete_all() is True

    def test_deferred_snapshot(
        self, memory_driver: InMemoryCacheDriver, item_factory: CacheItemFactory
    ) -> None:
        item = item_factory.create("k", "staged", True)
        memory_driver.set_deferred(item)
        item.set("mutated")
        assert memory_driver.has("k") is False
        assert memory_driver.commit_deferred() is True
        assert memory_driver.get("k").get() == "staged"

    def test_commit_clears_buffer(
        self, memory_driver: InMemoryCacheDriver, item_factory: CacheItemFactory
    ) -> None:
        memory_driver.set_deferred(item_factory.create("k", 1, True))
        memory_driver.commit_deferred()
        memory_driver.delete("k")
        memory_driver.commit_deferred()
        assert memory_driver.has("k") is False

    def test_discard_drops_staged_items(
        self, memory_driver: InMemoryCacheDriver, item_factory: CacheItemFactory
    ) -> None:
        memory_driver.set_deferred(item_factory.create("k", 1, True))
        assert memory_driver.discard_deferred() is True
        assert memory_driver.commit_deferred() is True
        assert memory_driver.has("k") is False

    def test_last_staged_write_wins(
        self, memory_driver: InMemoryCacheDriver, item_factory: CacheItemFactory
    ) -> None:
        memory_driver.set_deferred(item_factory.create("k", 1, True))
        memory_driver.set_deferred(item_factory.create("k", 2, True))
        memory_driver.commit_deferred()
        assert memory_driver.get("k").get() == 2
