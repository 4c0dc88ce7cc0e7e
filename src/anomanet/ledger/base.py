"""Shared read-modify-write plumbing for the ledgers."""

from __future__ import annotations

from datetime import datetime
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from anomanet.logging import get_logger
from anomanet.storage.protocol import DocumentStore
from anomanet.utils.clock import Clock, utc_now

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class DocumentLedger:
    """Base class for ledgers that own one document kind per user.

    Each mutating call loads the whole document, changes it in memory and writes it
    back. There is no version token: concurrent writers race and the last write wins.
    """

    def __init__(self, store: DocumentStore, *, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    async def _load(self, path: str, model: type[M]) -> M | None:
        """Load and validate a document. Invalid documents count as absent."""

        raw = await self._store.aget(path)
        if raw is None:
            return None
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                "Invalid %s document at %s treated as absent (%d errors)",
                model.__name__,
                path,
                e.error_count(),
            )
            return None

    async def _save(self, path: str, document: BaseModel) -> None:
        await self._store.aput(path, document.model_dump(mode="json"))
