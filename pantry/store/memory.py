"""In-process document store.

Used for tests and offline runs. Every write pushes the full collection to
the collection's subscribers before the write call returns. With ``path`` set
the whole store is mirrored to a JSON file after each write.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .base import DocumentStore, Subscription
from ..core.types import DocumentSnapshot, SnapshotCallback
from ..io.persistence import read_json, write_json

logger = logging.getLogger(__name__)


class MemoryDocumentStore(DocumentStore):
    def __init__(self, name: str = "memory", path: Optional[str | Path] = None):
        super().__init__(name)
        self.path = Path(path) if path is not None else None
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._subscribers: Dict[str, List[SnapshotCallback]] = {}
        if self.path is not None and self.path.exists():
            raw = read_json(self.path)
            if isinstance(raw, dict):
                self._collections = {
                    str(c): {str(k): dict(v) for k, v in docs.items()}
                    for c, docs in raw.items()
                    if isinstance(docs, dict)
                }
            logger.debug("loaded %d collections from %s", len(self._collections), self.path)

    def seed(self, collection: str, docs: Dict[str, Dict[str, Any]]):
        """Replace a collection's contents without notifying subscribers."""
        self._collections[collection] = copy.deepcopy(docs)

    def dump(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return copy.deepcopy(self._collections.get(collection, {}))

    async def get_document(self, collection: str, key: str) -> DocumentSnapshot:
        data = self._collections.get(collection, {}).get(key)
        if data is None:
            return DocumentSnapshot.missing(key)
        return DocumentSnapshot(key=key, data=copy.deepcopy(data))

    async def set_document(self, collection: str, key: str, data: Dict[str, Any]):
        self._collections.setdefault(collection, {})[key] = copy.deepcopy(data)
        self._changed(collection)

    async def delete_document(self, collection: str, key: str):
        docs = self._collections.get(collection, {})
        if key not in docs:
            return
        del docs[key]
        self._changed(collection)

    async def list_documents(self, collection: str) -> List[DocumentSnapshot]:
        return self._snapshot(collection)

    def subscribe_collection(
        self, collection: str, callback: SnapshotCallback
    ) -> Subscription:
        callbacks = self._subscribers.setdefault(collection, [])
        callbacks.append(callback)

        def _cancel():
            if callback in callbacks:
                callbacks.remove(callback)

        sub = Subscription(_cancel)
        callback(self._snapshot(collection))
        return sub

    def _snapshot(self, collection: str) -> List[DocumentSnapshot]:
        return [
            DocumentSnapshot(key=k, data=copy.deepcopy(v))
            for k, v in self._collections.get(collection, {}).items()
        ]

    def _changed(self, collection: str):
        if self.path is not None:
            write_json(self.path, self._collections)
        for cb in list(self._subscribers.get(collection, [])):
            cb(self._snapshot(collection))
