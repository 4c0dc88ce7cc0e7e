"""Relationship ledger: persisted progression per (user, entity) pair."""

from __future__ import annotations

from typing import Iterable

from anomanet.engine import progression
from anomanet.ledger.base import DocumentLedger
from anomanet.logging import get_logger
from anomanet.models.relationship import ConversationSignal, RelationshipState
from anomanet.storage.paths import relationship_path

logger = get_logger(__name__)


class RelationshipLedger(DocumentLedger):
    """Loads progression state, applies the pure progression rules, writes it back."""

    async def get_relationship_state(self, user_id: str, entity_id: str) -> RelationshipState | None:
        return await self._load(relationship_path(user_id, entity_id), RelationshipState)

    async def save_relationship_state(self, user_id: str, entity_id: str, state: RelationshipState) -> None:
        await self._save(relationship_path(user_id, entity_id), state)

    async def get_or_create_relationship_state(self, user_id: str, entity_id: str) -> RelationshipState:
        existing = await self.get_relationship_state(user_id, entity_id)
        if existing is not None:
            return existing

        state = progression.create_default_relationship_state(entity_id, self.now())
        await self.save_relationship_state(user_id, entity_id, state)
        return state

    async def record_interaction(self, user_id: str, entity_id: str) -> RelationshipState:
        state = await self.get_or_create_relationship_state(user_id, entity_id)
        state.last_interaction = self.now()
        state.total_interactions += 1
        await self.save_relationship_state(user_id, entity_id, state)
        return state

    async def apply_xp(self, user_id: str, entity_id: str, amount: int) -> RelationshipState:
        before = await self.get_or_create_relationship_state(user_id, entity_id)
        after = progression.add_xp(before, amount)
        await self.save_relationship_state(user_id, entity_id, after)
        if after.level != before.level:
            logger.info("Entity %s advanced to level %d (%s)", entity_id, after.level, after.phase)
        return after

    async def apply_signals(
        self, user_id: str, entity_id: str, signals: Iterable[ConversationSignal]
    ) -> RelationshipState:
        before = await self.get_or_create_relationship_state(user_id, entity_id)
        after = progression.update_path_scores(before, signals)
        await self.save_relationship_state(user_id, entity_id, after)
        if after.relationship_path != before.relationship_path:
            logger.info("Entity %s path changed to %s", entity_id, after.relationship_path)
        return after

    async def set_chosen_name(self, user_id: str, entity_id: str, name: str | None) -> RelationshipState:
        """Store the entity's chosen name. It is only displayed from level 50."""

        state = await self.get_or_create_relationship_state(user_id, entity_id)
        state.chosen_name = name
        await self.save_relationship_state(user_id, entity_id, state)
        return state

    async def remember(
        self,
        user_id: str,
        entity_id: str,
        *,
        player_name: str | None = None,
        preference: str | None = None,
        key_moment: str | None = None,
        summary: str | None = None,
    ) -> RelationshipState:
        state = await self.get_or_create_relationship_state(user_id, entity_id)
        memory = state.memory
        if player_name is not None:
            memory.player_name = player_name
        if preference and preference not in memory.preferences:
            memory.preferences.append(preference)
        if key_moment:
            memory.key_moments.append(key_moment)
        if summary is not None:
            memory.last_conversation_summary = summary
        await self.save_relationship_state(user_id, entity_id, state)
        return state
