"""
Session store tests.

Verifies:
- Last write wins per sender
- LRU eviction at capacity
- Optional TTL expiry
"""

import pytest

from agent.session import LRUSessionStore, SessionStore


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestLRUSessionStore:

    def test_is_session_store(self):
        assert isinstance(LRUSessionStore(), SessionStore)

    def test_unknown_sender(self):
        assert LRUSessionStore().get("nobody") is None

    def test_set_then_get(self):
        store = LRUSessionStore()

        store.set("user-1", "https://cdn.example.com/a.jpg")

        assert store.get("user-1") == "https://cdn.example.com/a.jpg"
        # Reads do not remove the entry
        assert store.get("user-1") == "https://cdn.example.com/a.jpg"

    def test_last_write_wins(self):
        store = LRUSessionStore()

        store.set("user-1", "first")
        store.set("user-1", "second")

        assert store.get("user-1") == "second"
        assert len(store) == 1

    def test_senders_are_independent(self):
        store = LRUSessionStore()

        store.set("user-1", "one")
        store.set("user-2", "two")

        assert store.get("user-1") == "one"
        assert store.get("user-2") == "two"

    def test_evicts_least_recently_used(self):
        store = LRUSessionStore(capacity=2)

        store.set("a", "1")
        store.set("b", "2")
        store.get("a")  # a is now most recent
        store.set("c", "3")

        assert len(store) == 2
        assert "b" not in store
        assert store.get("a") == "1"
        assert store.get("c") == "3"

    def test_overwrite_refreshes_recency(self):
        store = LRUSessionStore(capacity=2)

        store.set("a", "1")
        store.set("b", "2")
        store.set("a", "1b")
        store.set("c", "3")

        assert store.get("a") == "1b"
        assert store.get("b") is None

    def test_ttl_expiry(self):
        clock = FakeClock()
        store = LRUSessionStore(ttl_s=60, clock=clock)

        store.set("user-1", "url")
        clock.now = 59
        assert store.get("user-1") == "url"

        clock.now = 61
        assert store.get("user-1") is None
        assert len(store) == 0

    def test_no_ttl_never_expires(self):
        clock = FakeClock()
        store = LRUSessionStore(clock=clock)

        store.set("user-1", "url")
        clock.now = 10 ** 9

        assert store.get("user-1") == "url"

    @pytest.mark.parametrize("kwargs", [{"capacity": 0}, {"capacity": -1}, {"ttl_s": 0}])
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            LRUSessionStore(**kwargs)
