"""Redis-backed document store.

Enables multi-instance deployments where every API worker sees the same documents.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import redis

from anomanet.storage.protocol import Document, DocumentStore


@dataclass
class RedisDocumentStore(DocumentStore):
    """Documents stored as JSON strings under `{key_prefix}:{path}`."""

    redis_url: str
    key_prefix: str
    client: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.client is None:
            self.client = redis.Redis.from_url(self.redis_url, decode_responses=True)

    def _key(self, path: str) -> str:
        return f"{self.key_prefix}:{path}"

    def get(self, path: str) -> Document | None:
        raw = self.client.get(self._key(path))
        if raw is None:
            return None
        data = json.loads(raw)
        return data if isinstance(data, dict) else None

    def put(self, path: str, document: Document) -> None:
        self.client.set(self._key(path), json.dumps(document, ensure_ascii=False))

    def delete(self, path: str) -> None:
        self.client.delete(self._key(path))

    def list(self, prefix: str) -> list[str]:  # noqa: A003
        strip = len(self.key_prefix) + 1
        keys = self.client.scan_iter(match=f"{self._key(prefix)}*")
        return sorted(k[strip:] for k in keys)
