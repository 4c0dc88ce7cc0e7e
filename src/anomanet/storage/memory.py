"""MemoryDocumentStore: process-local document store."""

from __future__ import annotations

import json
import threading

from anomanet.storage.protocol import Document, DocumentStore


class MemoryDocumentStore(DocumentStore):
    """In-memory store for tests and single-process development.

    Documents are round-tripped through JSON on the way in and out, so callers never
    share mutable state with the store and non-serializable payloads fail early.
    """

    def __init__(self) -> None:
        self._docs: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, path: str) -> Document | None:
        with self._lock:
            raw = self._docs.get(path)
        if raw is None:
            return None
        return json.loads(raw)

    def put(self, path: str, document: Document) -> None:
        raw = json.dumps(document, ensure_ascii=False)
        with self._lock:
            self._docs[path] = raw

    def delete(self, path: str) -> None:
        with self._lock:
            self._docs.pop(path, None)

    def list(self, prefix: str) -> list[str]:  # noqa: A003
        with self._lock:
            return sorted(k for k in self._docs if k.startswith(prefix))
