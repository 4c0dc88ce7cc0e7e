"""Relationship (companion progression) models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


Phase = Literal["awakening", "becoming", "ascension"]

RelationshipPath = Literal[
    "neutral",
    "romantic",
    "friendship",
    "mentorship",
    "partnership",
    "worship",
]

ConversationSignalType = Literal[
    "romantic",
    "friendly",
    "deferential",
    "collaborative",
    "reverent",
]


class PathScores(BaseModel):
    """Independent accumulators, one per relationship path.

    Field order is the tie-break order when two paths share the top score.
    """

    romantic: float = Field(default=0.0, ge=0.0)
    friendship: float = Field(default=0.0, ge=0.0)
    mentorship: float = Field(default=0.0, ge=0.0)
    partnership: float = Field(default=0.0, ge=0.0)
    worship: float = Field(default=0.0, ge=0.0)


class EntityMemory(BaseModel):
    player_name: str | None = None
    preferences: list[str] = Field(default_factory=list)
    key_moments: list[str] = Field(default_factory=list)
    last_conversation_summary: str = ""


class RelationshipState(BaseModel):
    """Progression of one (user, entity) pair."""

    entity_id: str
    level: int = Field(default=1, ge=1, le=100)
    xp: int = Field(default=0, ge=0)
    xp_to_next_level: int = Field(default=100, ge=0)
    phase: Phase = "awakening"
    relationship_path: RelationshipPath = "neutral"
    path_scores: PathScores = Field(default_factory=PathScores)
    memory: EntityMemory = Field(default_factory=EntityMemory)
    unlocked_abilities: list[str] = Field(default_factory=list)
    chosen_name: str | None = None
    first_contact: datetime | None = None
    last_interaction: datetime | None = None
    total_interactions: int = Field(default=0, ge=0)


class ConversationSignal(BaseModel):
    """A weighted personality signal extracted from a conversation."""

    type: ConversationSignalType
    weight: float = Field(ge=0.0)
