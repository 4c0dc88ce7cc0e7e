"""Protocol definitions for pluggable document stores."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any

Document = dict[str, Any]


class DocumentStore(ABC):
    """Key-value store of JSON documents addressed by `/`-separated paths.

    Stores are synchronous; the `a*` twins run the sync call in a worker thread so
    request handlers can await them.
    """

    @abstractmethod
    def get(self, path: str) -> Document | None:
        """Return the document at `path`, or None when absent."""

    @abstractmethod
    def put(self, path: str, document: Document) -> None:
        """Overwrite the document at `path`."""

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove the document at `path`; absent paths are ignored."""

    @abstractmethod
    def list(self, prefix: str) -> list[str]:  # noqa: A003
        """Return all paths starting with `prefix`, sorted."""

    async def aget(self, path: str) -> Document | None:
        return await asyncio.to_thread(self.get, path)

    async def aput(self, path: str, document: Document) -> None:
        await asyncio.to_thread(self.put, path, document)

    async def adelete(self, path: str) -> None:
        await asyncio.to_thread(self.delete, path)

    async def alist(self, prefix: str) -> list[str]:
        return await asyncio.to_thread(self.list, prefix)
