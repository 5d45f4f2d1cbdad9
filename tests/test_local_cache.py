import pytest

from knowledge_scout.services.knowledge.local_cache import TTLCache
from tests.fakes import FakeClock


def test_entry_expires_after_ttl(clock: FakeClock) -> None:
    cache: TTLCache[str] = TTLCache(ttl_seconds=60, clock=clock)
    cache.set("key", "value")

    clock.advance(59)
    assert cache.get("key") == "value"

    clock.advance(1)
    assert cache.get("key") is None
    assert len(cache) == 0


def test_least_recently_used_entry_is_evicted_when_full(clock: FakeClock) -> None:
    cache: TTLCache[int] = TTLCache(ttl_seconds=60, max_entries=2, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.get("a") == 1

    cache.set("c", 3)

    assert cache.get("a") == 1
    assert cache.get("b") is None
    assert cache.get("c") == 3


def test_expired_entries_are_dropped_before_evicting_live_ones(clock: FakeClock) -> None:
    cache: TTLCache[int] = TTLCache(ttl_seconds=10, max_entries=2, clock=clock)
    cache.set("old", 1)
    clock.advance(5)
    cache.set("live", 2)
    clock.advance(6)

    cache.set("new", 3)

    assert cache.get("live") == 2
    assert cache.get("new") == 3


def test_clear_removes_everything(clock: FakeClock) -> None:
    cache: TTLCache[int] = TTLCache(ttl_seconds=60, clock=clock)
    cache.set("a", 1)

    cache.clear()

    assert cache.get("a") is None


@pytest.mark.parametrize(("ttl_seconds", "max_entries"), [(0, 10), (10, 0)])
def test_invalid_configuration_is_rejected(ttl_seconds: int, max_entries: int) -> None:
    with pytest.raises(ValueError):
        TTLCache(ttl_seconds=ttl_seconds, max_entries=max_entries)
