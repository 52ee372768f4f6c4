"""Cloud Firestore adapter (REST v1).

Documents live at
``{base_url}/projects/{project}/databases/{database}/documents/{collection}/{key}``:

* GET returns the document, 404 means absent
* PATCH without an update mask replaces the whole document (creating it)
* DELETE removes it; deleting an absent document succeeds

The REST surface has no push channel, so ``subscribe_collection`` runs a
polling task that lists the collection every ``poll_interval_s`` seconds and
hands the full snapshot to the callback on the first poll and whenever the
contents differ from the last delivery.

HTTP calls are blocking ``requests`` calls pushed to a worker thread so the
event loop keeps running while a round-trip is in flight.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote, unquote

import requests

from .base import DocumentStore, Subscription
from ..core.config import Settings
from ..core.types import DocumentSnapshot, SnapshotCallback

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://firestore.googleapis.com/v1"


def encode_value(value: Any) -> Dict[str, Any]:
    """Wrap a plain Python value in a Firestore typed value."""
    if value is None:
        return {"nullValue": None}
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise TypeError(f"cannot encode {type(value).__name__} as a Firestore value")


def decode_value(value: Dict[str, Any]) -> Any:
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields") or {})
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values") or []]
    for k in ("stringValue", "timestampValue", "referenceValue", "bytesValue"):
        if k in value:
            return value[k]
    return None


def encode_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    return {str(k): encode_value(v) for k, v in data.items()}


def decode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: decode_value(v) for k, v in fields.items()}


def _log_poll_exit(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("%s stopped", task.get_name(), exc_info=exc)


class FirestoreDocumentStore(DocumentStore):
    def __init__(
        self,
        project_id: str,
        database: str = "(default)",
        name: str = "firestore",
        base_url: str = DEFAULT_BASE_URL,
        api_key: Optional[str] = None,
        id_token: Optional[str] = None,
        timeout: float = 5.0,
        poll_interval_s: float = 1.0,
        page_size: int = 300,
    ):
        super().__init__(name)
        if not project_id:
            raise ValueError("Firestore project id is required")
        self.project_id = project_id
        self.database = database
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.id_token = id_token
        self.timeout = timeout
        self.poll_interval_s = poll_interval_s
        self.page_size = page_size

    @classmethod
    def from_settings(cls, settings: Settings) -> "FirestoreDocumentStore":
        return cls(
            project_id=settings.project_id or "",
            database=settings.database,
            api_key=settings.api_key,
            id_token=settings.id_token,
            timeout=settings.timeout,
            poll_interval_s=settings.poll_interval_s,
        )

    @property
    def documents_url(self) -> str:
        return (
            f"{self.base_url}/projects/{self.project_id}"
            f"/databases/{self.database}/documents"
        )

    def _collection_url(self, collection: str) -> str:
        return f"{self.documents_url}/{quote(collection, safe='')}"

    def _document_url(self, collection: str, key: str) -> str:
        return f"{self._collection_url(collection)}/{quote(key, safe='')}"

    def _headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {"Accept": "application/json"}
        if self.id_token:
            headers["Authorization"] = f"Bearer {self.id_token}"
        return headers

    def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
        allow_404: bool = False,
    ) -> Optional[Dict[str, Any]]:
        params = dict(params or {})
        if self.api_key:
            params["key"] = self.api_key
        logger.debug("%s %s", method, url)
        resp = requests.request(
            method,
            url,
            headers=self._headers(),
            params=params or None,
            json=body,
            timeout=self.timeout,
        )
        if allow_404 and resp.status_code == 404:
            return None
        resp.raise_for_status()
        if not resp.content:
            return {}
        return resp.json()

    @staticmethod
    def _to_snapshot(doc: Dict[str, Any]) -> DocumentSnapshot:
        key = unquote(str(doc.get("name", "")).rsplit("/", 1)[-1])
        return DocumentSnapshot(key=key, data=decode_fields(doc.get("fields") or {}))

    async def get_document(self, collection: str, key: str) -> DocumentSnapshot:
        doc = await asyncio.to_thread(
            self._request, "GET", self._document_url(collection, key), allow_404=True
        )
        if doc is None:
            return DocumentSnapshot.missing(key)
        return DocumentSnapshot(key=key, data=decode_fields(doc.get("fields") or {}))

    async def set_document(self, collection: str, key: str, data: Dict[str, Any]):
        await asyncio.to_thread(
            self._request,
            "PATCH",
            self._document_url(collection, key),
            body={"fields": encode_fields(data)},
        )

    async def delete_document(self, collection: str, key: str):
        await asyncio.to_thread(
            self._request, "DELETE", self._document_url(collection, key)
        )

    def _list_all(self, collection: str) -> List[DocumentSnapshot]:
        out: List[DocumentSnapshot] = []
        token: Optional[str] = None
        while True:
            params: Dict[str, Any] = {"pageSize": self.page_size}
            if token:
                params["pageToken"] = token
            page = self._request("GET", self._collection_url(collection), params=params)
            page = page or {}
            out.extend(self._to_snapshot(d) for d in page.get("documents") or [])
            token = page.get("nextPageToken")
            if not token:
                return out

    async def list_documents(self, collection: str) -> List[DocumentSnapshot]:
        return await asyncio.to_thread(self._list_all, collection)

    def subscribe_collection(
        self, collection: str, callback: SnapshotCallback
    ) -> Subscription:
        """Start polling ``collection``. Must be called from a running event loop."""
        task = asyncio.get_running_loop().create_task(
            self._poll(collection, callback), name=f"firestore-poll-{collection}"
        )
        task.add_done_callback(_log_poll_exit)
        return Subscription(task.cancel)

    async def _poll(self, collection: str, callback: SnapshotCallback):
        last: Optional[List[Tuple[str, Dict[str, Any]]]] = None
        while True:
            try:
                docs = await self.list_documents(collection)
            except requests.RequestException as e:
                # keep the feed alive across transient failures
                logger.warning("polling %s failed: %s", collection, e)
            else:
                state = [(d.key, d.data) for d in docs]
                if state != last:
                    last = state
                    try:
                        callback(docs)
                    except Exception:
                        logger.exception("snapshot callback for %s failed", collection)
            await asyncio.sleep(self.poll_interval_s)
