"""Firestore REST client implementing the document store contract."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Sequence
from urllib.parse import quote

import httpx

from seedsync.errors import PermanentRemoteFailure, TransientRemoteFailure
from seedsync.store.base import SERVER_TIMESTAMP, Delete, DocumentRef, Upsert, Write
from seedsync.store.values import decode_fields, encode_fields

logger = logging.getLogger(__name__)

FIRESTORE_URL = "https://firestore.googleapis.com/v1"
DEFAULT_DATABASE = "(default)"

TRANSIENT_STATUSES = frozenset({"UNAVAILABLE", "DEADLINE_EXCEEDED", "RESOURCE_EXHAUSTED"})
HTTP_STATUS_NAMES = {
    400: "INVALID_ARGUMENT",
    401: "UNAUTHENTICATED",
    403: "PERMISSION_DENIED",
    404: "NOT_FOUND",
    409: "ABORTED",
    429: "RESOURCE_EXHAUSTED",
    500: "INTERNAL",
    503: "UNAVAILABLE",
    504: "DEADLINE_EXCEEDED",
}


class FirestoreClient:
    def __init__(
        self,
        project_id: str | None,
        *,
        database: str = DEFAULT_DATABASE,
        token: str | None = None,
        emulator_host: str | None = None,
        concurrency: int = 10,
        page_size: int = 300,
        session: httpx.AsyncClient | None = None,
    ) -> None:
        self.project_id = project_id
        self.database = database
        self.page_size = page_size
        base_url = f"http://{emulator_host}/v1" if emulator_host else FIRESTORE_URL
        if token is None and emulator_host:
            token = "owner"
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._session = session or httpx.AsyncClient(timeout=30.0, headers=headers)
        self._base_url = base_url
        self._semaphore = asyncio.Semaphore(concurrency)

    @classmethod
    def from_env(cls, **kwargs: Any) -> FirestoreClient:
        return cls(
            os.environ.get("FIRESTORE_PROJECT_ID") or os.environ.get("GOOGLE_CLOUD_PROJECT"),
            database=os.environ.get("FIRESTORE_DATABASE", DEFAULT_DATABASE),
            token=os.environ.get("FIRESTORE_TOKEN"),
            emulator_host=os.environ.get("FIRESTORE_EMULATOR_HOST"),
            concurrency=int(os.environ.get("FIRESTORE_CONCURRENCY", "10")),
            **kwargs,
        )

    @property
    def configured(self) -> bool:
        return bool(self.project_id)

    @property
    def root(self) -> str:
        return f"projects/{self.project_id}/databases/{self.database}/documents"

    def document_name(self, ref: DocumentRef) -> str:
        return f"{self.root}/{ref.collection}/{ref.doc_id}"

    async def close(self) -> None:
        await self._session.aclose()

    async def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        path = f"{self.root}/{quote(collection, safe='')}/{quote(doc_id, safe='')}"
        response = await self._request("GET", path, allow_missing=True)
        if response.status_code == 404:
            return None
        return decode_fields(response.json().get("fields", {}))

    async def list_document_ids(self, collection: str) -> set[str]:
        path = f"{self.root}/{quote(collection, safe='')}"
        ids: set[str] = set()
        page_token: str | None = None
        while True:
            params: dict[str, Any] = {"pageSize": self.page_size, "mask.fieldPaths": "__name__"}
            if page_token:
                params["pageToken"] = page_token
            payload = (await self._request("GET", path, params=params)).json()
            for document in payload.get("documents", []):
                ids.add(document["name"].rsplit("/", 1)[-1])
            page_token = payload.get("nextPageToken")
            if not page_token:
                break
        logger.debug("Listed %s ids in %s", len(ids), collection)
        return ids

    async def commit(self, writes: Sequence[Write]) -> None:
        body = {"writes": [self._encode_write(write) for write in writes]}
        await self._request("POST", f"{self.root}:commit", json=body)
        logger.debug("Committed %s writes", len(writes))

    def _encode_write(self, write: Write) -> dict[str, Any]:
        name = self.document_name(write.ref)
        if isinstance(write, Delete):
            return {"delete": name}
        fields = {key: value for key, value in write.data.items() if value is not SERVER_TIMESTAMP}
        stamped = [key for key, value in write.data.items() if value is SERVER_TIMESTAMP]
        encoded: dict[str, Any] = {"update": {"name": name, "fields": encode_fields(fields)}}
        if write.merge:
            encoded["updateMask"] = {"fieldPaths": sorted(fields)}
        if stamped:
            encoded["updateTransforms"] = [
                {"fieldPath": key, "setToServerValue": "REQUEST_TIME"} for key in stamped
            ]
        return encoded

    async def _request(
        self, method: str, path: str, *, allow_missing: bool = False, **kwargs: Any
    ) -> httpx.Response:
        url = f"{self._base_url}/{path}"
        async with self._semaphore:
            try:
                response = await self._session.request(method, url, **kwargs)
            except httpx.TransportError as exc:
                raise TransientRemoteFailure(None, f"network failure: {exc}") from exc
        if response.status_code == 404 and allow_missing:
            return response
        _raise_for_status(response)
        return response


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    try:
        error = response.json().get("error", {})
    except (ValueError, AttributeError):
        error = {}
    if not isinstance(error, dict):
        error = {}
    status = error.get("status") or HTTP_STATUS_NAMES.get(response.status_code)
    message = error.get("message") or response.text or response.reason_phrase
    cls = TransientRemoteFailure if status in TRANSIENT_STATUSES else PermanentRemoteFailure
    raise cls(status, message, code=response.status_code)
