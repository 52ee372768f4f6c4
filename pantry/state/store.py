"""Local mirror of the inventory collection."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from ..core.types import DocumentSnapshot, InventoryItem
from ..io.metrics import inc_snapshots
from ..store.base import DocumentStore, Subscription
from ..view.filter import filter_items

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[Tuple[InventoryItem, ...]], None]


class InventorySync:
    """Keeps an in-memory copy of a collection in step with the store.

    Every notification carries the whole collection and replaces the local
    snapshot outright. ``_on_snapshot`` is the only writer of ``_items``.
    """

    def __init__(self, store: DocumentStore, collection: str = "pantry"):
        self.store = store
        self.collection = collection
        self._items: Tuple[InventoryItem, ...] = ()
        self._on_change: Optional[ChangeCallback] = None
        self._subscription: Optional[Subscription] = None
        self.version = 0

    @property
    def items(self) -> Tuple[InventoryItem, ...]:
        return self._items

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def view(self, query: str = "") -> List[InventoryItem]:
        return filter_items(self._items, query)

    async def refresh(self) -> Tuple[InventoryItem, ...]:
        """Fetch the collection once and apply it like a notification.

        Store failures propagate to the caller.
        """
        self._on_snapshot(await self.store.list_documents(self.collection))
        return self._items

    def subscribe(self, on_change: Optional[ChangeCallback] = None) -> Subscription:
        if self.subscribed:
            raise RuntimeError(f"already subscribed to {self.collection!r}")
        self._on_change = on_change
        inner = self.store.subscribe_collection(self.collection, self._on_snapshot)
        self._subscription = Subscription(self._release(inner))
        return self._subscription

    def _release(self, inner: Subscription) -> Callable[[], None]:
        def _cancel():
            inner.unsubscribe()
            self._on_change = None
            logger.debug("unsubscribed from %s", self.collection)

        return _cancel

    def _on_snapshot(self, docs: List[DocumentSnapshot]) -> None:
        self._items = tuple(InventoryItem.from_document(d) for d in docs)
        self.version += 1
        inc_snapshots()
        logger.debug(
            "snapshot %d of %s: %d items", self.version, self.collection, len(self._items)
        )
        if self._on_change is not None:
            self._on_change(self._items)
