"""Document stores backing the ledgers."""

from __future__ import annotations

from anomanet.config import Settings
from anomanet.storage.filesystem import FilesystemDocumentStore
from anomanet.storage.memory import MemoryDocumentStore
from anomanet.storage.protocol import Document, DocumentStore
from anomanet.storage.redis_store import RedisDocumentStore


def create_store(settings: Settings) -> DocumentStore:
    """Build the store selected by `settings.storage_backend`."""

    if settings.storage_backend == "memory":
        return MemoryDocumentStore()
    if settings.storage_backend == "redis":
        return RedisDocumentStore(redis_url=settings.redis_url, key_prefix=settings.redis_key_prefix)
    return FilesystemDocumentStore(settings.storage_dir)


__all__ = [
    "Document",
    "DocumentStore",
    "FilesystemDocumentStore",
    "MemoryDocumentStore",
    "RedisDocumentStore",
    "create_store",
]
