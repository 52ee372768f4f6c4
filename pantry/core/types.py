"""Core type definitions for the pantry tracker.

Documents coming out of the store are schemaless; everything past the store
boundary works with the fixed two-field ``InventoryItem`` record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from .utils import capitalize_first, coerce_quantity


@dataclass(frozen=True)
class DocumentSnapshot:
    key: str
    data: Dict[str, Any] = field(default_factory=dict)
    exists: bool = True

    @classmethod
    def missing(cls, key: str) -> "DocumentSnapshot":
        return cls(key=key, data={}, exists=False)


@dataclass(frozen=True)
class InventoryItem:
    name: str
    quantity: int = 0

    @classmethod
    def from_document(cls, doc: DocumentSnapshot) -> "InventoryItem":
        return cls(name=doc.key, quantity=coerce_quantity(doc.data.get("quantity")))

    @property
    def display_name(self) -> str:
        return capitalize_first(self.name)

    def to_document(self) -> Dict[str, Any]:
        return {"quantity": self.quantity}


SnapshotCallback = Callable[[List[DocumentSnapshot]], None]
