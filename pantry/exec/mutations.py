"""Inventory mutations.

Each operation is a read followed by a dependent write against the store.
There is no transaction around the pair: concurrent writers to the same key
race and the store keeps the last write. Store failures propagate.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..core.types import InventoryItem
from ..core.utils import coerce_quantity, parse_int
from ..io.metrics import inc_mutation
from ..store.base import DocumentStore

logger = logging.getLogger(__name__)


async def increment_or_create(
    store: DocumentStore, collection: str, name: str
) -> InventoryItem:
    snap = await store.get_document(collection, name)
    if snap.exists:
        item = InventoryItem(name, coerce_quantity(snap.data.get("quantity")) + 1)
        outcome = "incremented"
    else:
        item = InventoryItem(name, 1)
        outcome = "created"
    await store.set_document(collection, name, item.to_document())
    logger.debug("%s %s -> %d", outcome, name, item.quantity)
    inc_mutation("increment", outcome)
    return item


async def decrement_or_delete(
    store: DocumentStore, collection: str, name: str
) -> Optional[InventoryItem]:
    """Take one off ``name``; the document goes away when the count was 1.

    Returns the updated item, or None when nothing is left or the item was
    never there.
    """
    snap = await store.get_document(collection, name)
    if not snap.exists:
        inc_mutation("decrement", "missing")
        return None
    raw = snap.data.get("quantity")
    # only a stored number 1 deletes; a missing field, "1" or True is
    # rewritten at 0 instead
    if raw == 1 and not isinstance(raw, bool):
        await store.delete_document(collection, name)
        logger.debug("deleted %s", name)
        inc_mutation("decrement", "deleted")
        return None
    item = InventoryItem(name, (coerce_quantity(raw) or 1) - 1)
    await store.set_document(collection, name, item.to_document())
    logger.debug("decremented %s -> %d", name, item.quantity)
    inc_mutation("decrement", "decremented")
    return item


async def rename_or_requantify(
    store: DocumentStore,
    collection: str,
    old_name: str,
    new_name: str,
    new_quantity_text: Optional[str],
) -> Optional[InventoryItem]:
    """Set the quantity of ``old_name``, moving it to ``new_name`` if they differ.

    A rename writes the new document first and deletes the old one second.
    Unparsable quantity text counts as 0. A missing source is logged and
    otherwise ignored.
    """
    snap = await store.get_document(collection, old_name)
    if not snap.exists:
        logger.error("Item does not exist! (%s/%s)", collection, old_name)
        inc_mutation("update", "missing")
        return None
    item = InventoryItem(new_name, parse_int(new_quantity_text) or 0)
    if old_name != new_name:
        await store.set_document(collection, new_name, item.to_document())
        await store.delete_document(collection, old_name)
        logger.debug("renamed %s -> %s (%d)", old_name, new_name, item.quantity)
        inc_mutation("update", "renamed")
    else:
        await store.set_document(collection, old_name, item.to_document())
        logger.debug("requantified %s -> %d", old_name, item.quantity)
        inc_mutation("update", "requantified")
    return item
