"""Unit tests for the expiring key registry."""

import pytest

from retail.domain.service.ttl_registry import TTLRegistry


class _Clock:

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestTTLRegistry:

    def test_set_and_get(self):
        registry = TTLRegistry(60, clock=_Clock())
        registry.set("r-1", ("add", 7))
        assert registry.get("r-1") == ("add", 7)
        assert "r-1" in registry

    def test_entry_expires(self):
        clock = _Clock()
        registry = TTLRegistry(60, clock=clock)
        registry.set("r-1")

        clock.now += 59
        assert "r-1" in registry
        clock.now += 1
        assert "r-1" not in registry
        assert registry.get("r-1") is None

    def test_expired_entries_purged_on_write(self):
        clock = _Clock()
        registry = TTLRegistry(10, clock=clock)
        for i in range(100):
            registry.set(f"k{i}")
        clock.now += 11
        registry.set("fresh")
        assert len(registry) == 1

    def test_delete(self):
        registry = TTLRegistry(60, clock=_Clock())
        registry.set("k")
        registry.delete("k")
        registry.delete("missing")
        assert "k" not in registry

    def test_ttl_must_be_positive(self):
        with pytest.raises(ValueError):
            TTLRegistry(0)
