import pytest
from trello_mcp.core.cache import ResponseCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def test_entry_fresh_until_ttl_elapses():
    clock = FakeClock()
    cache = ResponseCache(ttl_seconds=60, clock=clock)
    cache.set("/boards/b1", {"id": "b1"})

    clock.advance(59.999)
    assert cache.get("/boards/b1").payload == {"id": "b1"}

    clock.advance(0.001)
    assert cache.get("/boards/b1") is None
    # stale entries stay stored until swept
    assert "/boards/b1" in cache


def test_set_replaces_and_refreshes_timestamp():
    clock = FakeClock()
    cache = ResponseCache(ttl_seconds=10, clock=clock)
    cache.set("k", 1)
    clock.advance(8)
    cache.set("k", 2)
    clock.advance(8)

    assert cache.get("k").payload == 2
    assert len(cache) == 1


def test_long_expired_entries_swept_on_write():
    clock = FakeClock()
    cache = ResponseCache(ttl_seconds=10, clock=clock)
    cache.set("old", 1)
    clock.advance(50)
    cache.set("new", 2)

    assert "old" not in cache
    assert "new" in cache


def test_oldest_entries_dropped_past_max_entries():
    cache = ResponseCache(ttl_seconds=60, max_entries=2, clock=FakeClock())
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)

    assert "a" not in cache
    assert len(cache) == 2


def test_clear_empties_store():
    cache = ResponseCache(clock=FakeClock())
    cache.set("a", None)
    cache.clear()
    assert len(cache) == 0


def test_none_payload_is_a_hit():
    cache = ResponseCache(clock=FakeClock())
    cache.set("a", None)
    entry = cache.get("a")
    assert entry is not None
    assert entry.payload is None


@pytest.mark.parametrize("kwargs", [{"ttl_seconds": 0}, {"max_entries": 0}])
def test_invalid_limits_rejected(kwargs):
    with pytest.raises(ValueError):
        ResponseCache(**kwargs)
