import asyncio

import pytest

from pantry.core.types import DocumentSnapshot, InventoryItem
from pantry.exec.mutations import decrement_or_delete, increment_or_create
from pantry.state.store import InventorySync
from pantry.store.base import Subscription
from pantry.store.memory import MemoryDocumentStore


class _ManualStore(MemoryDocumentStore):
    """Hands the subscriber callback to the test instead of calling it."""

    def __init__(self):
        super().__init__()
        self.callback = None
        self.cancelled = 0

    def subscribe_collection(self, collection, callback):
        self.callback = callback

        def _cancel():
            self.cancelled += 1

        return Subscription(_cancel)


def test_subscribe_delivers_initial_snapshot():
    store = MemoryDocumentStore()
    store.seed("pantry", {"apple": {"quantity": 3}, "salt": {}})
    sync = InventorySync(store, "pantry")
    seen = []
    sync.subscribe(seen.append)
    assert sync.items == (InventoryItem("apple", 3), InventoryItem("salt", 0))
    assert seen == [sync.items]
    assert sync.version == 1


def test_mutations_flow_back_into_snapshot():
    store = MemoryDocumentStore()
    store.seed("pantry", {"apple": {"quantity": 3}, "banana": {"quantity": 1}})
    sync = InventorySync(store, "pantry")
    sync.subscribe()

    async def go():
        await decrement_or_delete(store, "pantry", "banana")
        await increment_or_create(store, "pantry", "apple")

    asyncio.run(go())
    assert sync.items == (InventoryItem("apple", 4),)


def test_snapshot_is_replaced_not_patched():
    store = _ManualStore()
    sync = InventorySync(store, "pantry")
    sync.subscribe()
    store.callback([DocumentSnapshot("a", {"quantity": 1}), DocumentSnapshot("b", {"quantity": 2})])
    store.callback([DocumentSnapshot("c", {"quantity": 5})])
    assert sync.items == (InventoryItem("c", 5),)
    assert sync.version == 2


def test_order_follows_store_delivery():
    store = _ManualStore()
    sync = InventorySync(store)
    sync.subscribe()
    store.callback([DocumentSnapshot("zucchini", {"quantity": 1}), DocumentSnapshot("apple", {"quantity": 1})])
    assert [i.name for i in sync.items] == ["zucchini", "apple"]


def test_unsubscribe_is_idempotent():
    store = _ManualStore()
    sync = InventorySync(store)
    sub = sync.subscribe()
    sub.unsubscribe()
    sub.unsubscribe()
    assert store.cancelled == 1
    assert not sub.active
    assert not sync.subscribed


def test_no_updates_after_unsubscribe():
    store = MemoryDocumentStore()
    sync = InventorySync(store, "pantry")
    seen = []
    with sync.subscribe(seen.append):
        asyncio.run(increment_or_create(store, "pantry", "milk"))
    asyncio.run(increment_or_create(store, "pantry", "eggs"))
    assert len(seen) == 2
    assert sync.items == (InventoryItem("milk", 1),)


def test_double_subscribe_rejected():
    sync = InventorySync(MemoryDocumentStore())
    sync.subscribe()
    with pytest.raises(RuntimeError):
        sync.subscribe()


def test_resubscribe_after_unsubscribe():
    sync = InventorySync(MemoryDocumentStore())
    sync.subscribe().unsubscribe()
    sub = sync.subscribe()
    assert sub.active and sync.version == 2


def test_view_filters_current_snapshot():
    store = MemoryDocumentStore()
    store.seed("pantry", {"eggplant": {"quantity": 1}, "milk": {"quantity": 2}})
    sync = InventorySync(store)
    sync.subscribe()
    assert sync.view("EGG") == [InventoryItem("eggplant", 1)]
    assert len(sync.view("")) == 2


class _BrokenStore(MemoryDocumentStore):
    async def list_documents(self, collection):
        raise ConnectionError("store unavailable")


def test_refresh_applies_full_collection():
    store = MemoryDocumentStore()
    store.seed("pantry", {"apple": {"quantity": 2}})
    sync = InventorySync(store)
    assert asyncio.run(sync.refresh()) == (InventoryItem("apple", 2),)
    assert sync.version == 1


def test_refresh_propagates_store_failure():
    sync = InventorySync(_BrokenStore())
    with pytest.raises(ConnectionError):
        asyncio.run(sync.refresh())
    assert sync.items == ()
