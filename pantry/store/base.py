"""Document store abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from ..core.types import DocumentSnapshot, SnapshotCallback


class Subscription:
    """Handle for a live collection subscription.

    ``unsubscribe`` releases the underlying feed; calling it again is a no-op.
    """

    def __init__(self, cancel: Optional[Callable[[], None]] = None):
        self._cancel = cancel
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        cancel, self._cancel = self._cancel, None
        if cancel is not None:
            cancel()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.unsubscribe()


class DocumentStore(ABC):
    name: str

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def get_document(self, collection: str, key: str) -> DocumentSnapshot: ...

    @abstractmethod
    async def set_document(
        self, collection: str, key: str, data: Dict[str, Any]
    ) -> None: ...

    @abstractmethod
    async def delete_document(self, collection: str, key: str) -> None: ...

    @abstractmethod
    async def list_documents(self, collection: str) -> List[DocumentSnapshot]: ...

    @abstractmethod
    def subscribe_collection(
        self, collection: str, callback: SnapshotCallback
    ) -> Subscription: ...
