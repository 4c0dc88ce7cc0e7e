"""Evidence ledger.

Owns each player's evidence inventory and the graph of discovered connections between
items. Connection eligibility is authored data: two items connect only if one of them
lists the other in its `connections`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping

from anomanet.errors import AnomaNetError, ConflictError, InvalidConnectionError, NotFoundError
from anomanet.ledger.base import DocumentLedger
from anomanet.logging import get_logger
from anomanet.models.evidence import (
    Evidence,
    EvidenceConnection,
    EvidenceConnectionReward,
    EvidenceInventory,
)
from anomanet.storage.paths import user_evidence_path

logger = get_logger(__name__)

RARITY_SCORES: dict[str, int] = {
    "common": 10,
    "uncommon": 15,
    "rare": 25,
    "legendary": 50,
}

# Keyed by the two evidence types, sorted and joined with " + ".
CONNECTION_INSIGHTS: dict[str, str] = {
    "access_key + data_fragment": "The access key decrypts the data fragment, revealing hidden information.",
    "chat_log + testimony": "The testimony corroborates details mentioned in the chat log.",
    "chat_log + chat_log": "These conversations reference the same events from different perspectives.",
    "coordinates + data_fragment": "The coordinates point to the source of this data fragment.",
    "testimony + testimony": "These testimonies contradict each other on key details.",
    "access_key + coordinates": "The access key grants entry to the location specified.",
    "data_fragment + tool": "The tool can process this data fragment to extract more information.",
}

ALREADY_CONNECTED = "These items are already connected."
NO_CONNECTION = "No clear connection between these items."


def generate_connection_insight(first: Evidence, second: Evidence) -> str:
    key = " + ".join(sorted([first.type, second.type]))
    template = CONNECTION_INSIGHTS.get(key)
    if template:
        return template
    a, b = sorted([first, second], key=lambda e: (e.type, e.id))
    return f"Connection discovered between {a.name} and {b.name}."


def calculate_connection_xp(first: Evidence, second: Evidence) -> int:
    score1 = RARITY_SCORES.get(first.rarity, RARITY_SCORES["common"])
    score2 = RARITY_SCORES.get(second.rarity, RARITY_SCORES["common"])
    return math.floor((score1 + score2) / 2)


@dataclass(frozen=True)
class ConnectionCheck:
    """Outcome of testing whether two items can be connected."""

    valid: bool
    insight: str
    connection: EvidenceConnection | None = None
    failure: type[AnomaNetError] | None = None

    def raise_for_failure(self) -> EvidenceConnection:
        if self.valid and self.connection is not None:
            return self.connection
        raise (self.failure or InvalidConnectionError)(self.insight)


def create_default_evidence_inventory(now: datetime) -> EvidenceInventory:
    return EvidenceInventory(last_updated=now)


class EvidenceLedger(DocumentLedger):
    """Async CRUD over `users/{user_id}/evidence.json`."""

    async def get_inventory(self, user_id: str) -> EvidenceInventory | None:
        return await self._load(user_evidence_path(user_id), EvidenceInventory)

    async def get_or_create_inventory(self, user_id: str) -> EvidenceInventory:
        existing = await self.get_inventory(user_id)
        if existing is not None:
            return existing

        inventory = create_default_evidence_inventory(self.now())
        await self.save_inventory(user_id, inventory)
        return inventory

    async def save_inventory(self, user_id: str, inventory: EvidenceInventory) -> None:
        inventory.last_updated = self.now()
        await self._save(user_evidence_path(user_id), inventory)

    async def get_all_evidence(self, user_id: str) -> list[Evidence]:
        return (await self.get_or_create_inventory(user_id)).items

    async def add_evidence(self, user_id: str, evidence: Evidence) -> Evidence:
        inventory = await self.get_or_create_inventory(user_id)
        if inventory.find(evidence.id) is not None:
            raise ConflictError(f"Evidence already in inventory: {evidence.id}")

        inventory.items.append(evidence)
        await self.save_inventory(user_id, inventory)
        logger.info("Added evidence %s", evidence.id)
        return evidence

    async def add_multiple_evidence(self, user_id: str, items: Iterable[Evidence]) -> list[Evidence]:
        """Add items, silently skipping ids already held. Returns what was added."""

        inventory = await self.get_or_create_inventory(user_id)
        added: list[Evidence] = []
        for evidence in items:
            if inventory.find(evidence.id) is None:
                inventory.items.append(evidence)
                added.append(evidence)

        await self.save_inventory(user_id, inventory)
        logger.info("Added %d evidence items", len(added))
        return added

    async def update_evidence(self, user_id: str, evidence_id: str, updates: Mapping[str, Any]) -> Evidence:
        inventory = await self.get_or_create_inventory(user_id)
        index = inventory.index_of(evidence_id)
        if index == -1:
            raise NotFoundError(f"Evidence not found: {evidence_id}")

        current = inventory.items[index].model_dump()
        updated = Evidence.model_validate({**current, **updates, "id": evidence_id})
        inventory.items[index] = updated
        await self.save_inventory(user_id, inventory)
        return updated

    async def remove_evidence(self, user_id: str, evidence_id: str) -> None:
        inventory = await self.get_or_create_inventory(user_id)
        index = inventory.index_of(evidence_id)
        if index == -1:
            raise NotFoundError(f"Evidence not found: {evidence_id}")

        del inventory.items[index]
        await self.save_inventory(user_id, inventory)

    async def get_evidence_by_id(self, user_id: str, evidence_id: str) -> Evidence | None:
        return (await self.get_or_create_inventory(user_id)).find(evidence_id)

    async def get_evidence_for_case(self, user_id: str, case_id: str) -> list[Evidence]:
        inventory = await self.get_or_create_inventory(user_id)
        return [e for e in inventory.items if case_id in e.case_relevance]

    async def get_unexamined_count(self, user_id: str) -> int:
        inventory = await self.get_or_create_inventory(user_id)
        return sum(1 for e in inventory.items if not e.examined)

    async def get_evidence_by_type(self, user_id: str) -> dict[str, list[Evidence]]:
        inventory = await self.get_or_create_inventory(user_id)
        grouped: dict[str, list[Evidence]] = {}
        for evidence in inventory.items:
            grouped.setdefault(evidence.type, []).append(evidence)
        return grouped

    async def examine_evidence(self, user_id: str, evidence_id: str) -> Evidence:
        """Mark an item examined. Re-examining keeps the first timestamp."""

        existing = await self.get_evidence_by_id(user_id, evidence_id)
        if existing is None:
            raise NotFoundError(f"Evidence not found: {evidence_id}")
        if existing.examined:
            return existing
        return await self.update_evidence(
            user_id, evidence_id, {"examined": True, "examined_at": self.now()}
        )

    async def get_connections(self, user_id: str) -> list[EvidenceConnection]:
        return (await self.get_or_create_inventory(user_id)).connections

    async def get_connections_for_case(self, user_id: str, case_id: str) -> list[EvidenceConnection]:
        connections = await self.get_connections(user_id)
        return [c for c in connections if c.reward is not None and c.reward.case_progress == case_id]

    async def add_connection(self, user_id: str, connection: EvidenceConnection) -> EvidenceConnection:
        inventory = await self.get_or_create_inventory(user_id)
        first, second = connection.evidence_ids
        if inventory.is_connected(first, second):
            raise ConflictError(f"Connection already exists: {first} <-> {second}")

        inventory.connections.append(connection)
        await self.save_inventory(user_id, inventory)
        return connection

    def _check(self, inventory: EvidenceInventory, first_id: str, second_id: str) -> ConnectionCheck:
        first = inventory.find(first_id)
        if first is None:
            return ConnectionCheck(False, f"Evidence not found: {first_id}", failure=NotFoundError)
        second = inventory.find(second_id)
        if second is None:
            return ConnectionCheck(False, f"Evidence not found: {second_id}", failure=NotFoundError)

        if inventory.is_connected(first_id, second_id):
            return ConnectionCheck(False, ALREADY_CONNECTED, failure=ConflictError)

        if not (first.can_connect_to(second_id) or second.can_connect_to(first_id)):
            return ConnectionCheck(False, NO_CONNECTION, failure=InvalidConnectionError)

        insight = generate_connection_insight(first, second)
        connection = EvidenceConnection(
            evidence_ids=(first_id, second_id),
            discovered_at=self.now(),
            insight=insight,
            reward=EvidenceConnectionReward(xp=calculate_connection_xp(first, second)),
        )
        return ConnectionCheck(True, insight, connection)

    async def check_connection(self, user_id: str, first_id: str, second_id: str) -> ConnectionCheck:
        inventory = await self.get_or_create_inventory(user_id)
        return self._check(inventory, first_id, second_id)

    async def connect_evidence(self, user_id: str, first_id: str, second_id: str) -> EvidenceConnection:
        """Discover and persist a connection, raising with the check's message on failure."""

        inventory = await self.get_or_create_inventory(user_id)
        connection = self._check(inventory, first_id, second_id).raise_for_failure()
        inventory.connections.append(connection)
        await self.save_inventory(user_id, inventory)
        logger.info("Connected evidence %s <-> %s", first_id, second_id)
        return connection
