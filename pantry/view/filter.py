"""Search filtering and row formatting for the item list."""

from __future__ import annotations

from typing import Iterable, List

from ..core.types import InventoryItem


def filter_items(items: Iterable[InventoryItem], query: str) -> List[InventoryItem]:
    """Case-insensitive substring match on item name, order preserved."""
    q = (query or "").lower()
    return [it for it in items if q in it.name.lower()]


def render_item(item: InventoryItem) -> str:
    return f"{item.display_name}  Quantity: {item.quantity}"
