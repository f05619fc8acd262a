"""
Name: Selection Store Tests

Responsibilities:
  - In-memory TTL expiry, scope isolation and bounded size (LRU)
  - Redis key layout, native TTL and failure wrapping
"""

from unittest.mock import MagicMock

import pytest

from app.crosscutting.exceptions import SelectionStoreError
from app.infrastructure.session_store import InMemorySelectionStore, RedisSelectionStore

pytestmark = pytest.mark.unit


class _Clock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestInMemorySelectionStore:
    @pytest.mark.parametrize("ttl", [0, -1])
    def test_ttl_must_be_positive(self, ttl):
        with pytest.raises(ValueError):
            InMemorySelectionStore(ttl_seconds=ttl)

    def test_value_expires_after_ttl(self):
        clock = _Clock()
        store = InMemorySelectionStore(ttl_seconds=60, clock=clock)
        store.set_item("sess-1", "selectedRole", "driver")

        clock.now += 59
        assert store.get_item("sess-1", "selectedRole") == "driver"

        clock.now += 1
        assert store.get_item("sess-1", "selectedRole") is None

    def test_set_refreshes_ttl(self):
        clock = _Clock()
        store = InMemorySelectionStore(ttl_seconds=60, clock=clock)
        store.set_item("sess-1", "selectedRole", "driver")
        clock.now += 50
        store.set_item("sess-1", "selectedRole", "official")
        clock.now += 50

        assert store.get_item("sess-1", "selectedRole") == "official"

    def test_scopes_are_isolated(self):
        store = InMemorySelectionStore(ttl_seconds=60)
        store.set_item("sess-1", "selectedRole", "driver")

        assert store.get_item("sess-2", "selectedRole") is None

    def test_remove_is_idempotent(self):
        store = InMemorySelectionStore(ttl_seconds=60)
        store.set_item("sess-1", "selectedRole", "driver")

        store.remove_item("sess-1", "selectedRole")
        store.remove_item("sess-1", "selectedRole")

        assert store.get_item("sess-1", "selectedRole") is None

    def test_max_entries_must_be_positive(self):
        with pytest.raises(ValueError):
            InMemorySelectionStore(ttl_seconds=60, max_entries=0)

    def test_full_store_evicts_least_recently_used(self):
        store = InMemorySelectionStore(ttl_seconds=60, max_entries=2)
        store.set_item("sess-1", "selectedRole", "driver")
        store.set_item("sess-2", "selectedRole", "partner")
        store.get_item("sess-1", "selectedRole")

        store.set_item("sess-3", "selectedRole", "client")

        assert len(store) == 2
        assert store.get_item("sess-1", "selectedRole") == "driver"
        assert store.get_item("sess-2", "selectedRole") is None
        assert store.get_item("sess-3", "selectedRole") == "client"

    def test_full_store_drops_expired_entries_first(self):
        clock = _Clock()
        store = InMemorySelectionStore(ttl_seconds=60, max_entries=2, clock=clock)
        store.set_item("sess-1", "selectedRole", "driver")
        clock.now += 30
        store.set_item("sess-2", "selectedRole", "partner")
        clock.now += 1
        store.get_item("sess-1", "selectedRole")
        clock.now += 30

        store.set_item("sess-3", "selectedRole", "client")

        assert len(store) == 2
        assert store.get_item("sess-2", "selectedRole") == "partner"

    def test_updating_a_full_store_does_not_evict(self):
        store = InMemorySelectionStore(ttl_seconds=60, max_entries=2)
        store.set_item("sess-1", "selectedRole", "driver")
        store.set_item("sess-2", "selectedRole", "partner")

        store.set_item("sess-1", "selectedRole", "official")

        assert store.get_item("sess-1", "selectedRole") == "official"
        assert store.get_item("sess-2", "selectedRole") == "partner"
        assert store.get_item("sess-1", "selectedRole") is None


class TestRedisSelectionStore:
    def _store(self, client=None):
        return RedisSelectionStore(
            redis_url="redis://localhost:6379/0",
            ttl_seconds=900,
            client=client or MagicMock(),
        )

    def test_requires_url_or_client(self):
        with pytest.raises(ValueError):
            RedisSelectionStore(redis_url="")

    def test_set_uses_prefixed_key_and_ttl(self):
        client = MagicMock()

        self._store(client).set_item("sess-1", "selectedRole", "manager")

        client.set.assert_called_once_with(
            "backoffice:session:sess-1:selectedRole", "manager", ex=900
        )

    def test_get_and_remove(self):
        client = MagicMock()
        client.get.return_value = "manager"
        store = self._store(client)

        assert store.get_item("sess-1", "selectedRole") == "manager"
        store.remove_item("sess-1", "selectedRole")

        client.get.assert_called_once_with("backoffice:session:sess-1:selectedRole")
        client.delete.assert_called_once_with("backoffice:session:sess-1:selectedRole")

    @pytest.mark.parametrize("operation", ["get", "set", "delete"])
    def test_client_failure_is_selection_store_error(self, operation):
        client = MagicMock()
        getattr(client, operation).side_effect = ConnectionError("redis down")
        store = self._store(client)

        with pytest.raises(SelectionStoreError):
            if operation == "get":
                store.get_item("s", "k")
            elif operation == "set":
                store.set_item("s", "k", "v")
            else:
                store.remove_item("s", "k")

    def test_ping(self):
        client = MagicMock()
        client.ping.return_value = True

        assert self._store(client).ping() is True

        client.ping.side_effect = TimeoutError("slow")
        with pytest.raises(SelectionStoreError):
            self._store(client).ping()
