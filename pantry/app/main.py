"""App bootstrap: pick a store backend and wire the sync service to it."""

from __future__ import annotations

import logging

from ..core.config import Settings
from ..state.store import InventorySync
from ..store.base import DocumentStore
from ..store.firestore import FirestoreDocumentStore
from ..store.memory import MemoryDocumentStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> DocumentStore:
    if settings.backend == "memory":
        if not settings.data_file:
            logger.warning("memory backend has no data file; changes are lost on exit")
        return MemoryDocumentStore(path=settings.data_file)
    if settings.backend == "firestore":
        if not settings.project_id:
            raise ValueError("FIRESTORE_PROJECT_ID must be set for the firestore backend")
        return FirestoreDocumentStore.from_settings(settings)
    raise ValueError(f"unknown backend {settings.backend!r}")


def build_environment(settings: Settings) -> tuple[DocumentStore, InventorySync]:
    store = build_store(settings)
    return store, InventorySync(store, settings.collection)
