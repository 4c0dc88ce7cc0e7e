"""Evidence models.

Evidence items are collectible clues. Their `content` is authored up front but stays hidden
from the player until the item has been examined.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from anomanet.utils.clock import utc_now


EvidenceType = Literal[
    "chat_log",
    "data_fragment",
    "testimony",
    "access_key",
    "tool",
    "coordinates",
]

EvidenceRarity = Literal["common", "uncommon", "rare", "legendary"]

EvidenceSource = Literal[
    "signal",
    "case_reward",
    "case_accept",
    "exploration",
    "npc",
    "tutorial",
]


class EvidenceMetadata(BaseModel):
    """Type-specific metadata; unknown keys are kept as-is."""

    model_config = ConfigDict(extra="allow")

    participants: list[str] | None = None  # chat_log
    witness: str | None = None  # testimony
    unlocks: str | None = None  # access_key
    command: str | None = None  # tool
    target: str | None = None  # coordinates
    corruption_level: float | None = Field(default=None, ge=0.0, le=1.0)  # data_fragment


class Evidence(BaseModel):
    """A single clue in a player's inventory."""

    id: str
    name: str
    description: str
    type: EvidenceType
    rarity: EvidenceRarity
    content: str | None = None
    case_relevance: list[str] = Field(default_factory=list)
    acquired_at: datetime = Field(default_factory=utc_now)
    acquired_from: EvidenceSource | None = None
    examined: bool = False
    examined_at: datetime | None = None
    connections: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    metadata: EvidenceMetadata = Field(default_factory=EvidenceMetadata)

    @model_validator(mode="after")
    def _unexamined_has_no_timestamp(self) -> "Evidence":
        if not self.examined:
            self.examined_at = None
        return self

    @property
    def visible_content(self) -> str | None:
        """Content as the player may see it: nothing until examined."""

        return self.content if self.examined else None

    def can_connect_to(self, other_id: str) -> bool:
        return other_id in self.connections

    def public_view(self) -> dict[str, Any]:
        """JSON payload safe to show the player."""

        payload = self.model_dump(mode="json")
        if not self.examined:
            payload.pop("content", None)
        return payload


class EvidenceConnectionReward(BaseModel):
    """Reward attached to a discovered connection."""

    xp: int | None = Field(default=None, ge=0)
    new_evidence: str | None = None
    case_progress: str | None = None
    unlock: str | None = None


class EvidenceConnection(BaseModel):
    """A discovered link between two evidence items.

    The pair is stored in discovery order but compared without regard to order.
    """

    evidence_ids: tuple[str, str]
    discovered_at: datetime = Field(default_factory=utc_now)
    insight: str
    reward: EvidenceConnectionReward | None = None

    def links(self, first_id: str, second_id: str) -> bool:
        a, b = self.evidence_ids
        return (a, b) == (first_id, second_id) or (a, b) == (second_id, first_id)


class EvidenceInventory(BaseModel):
    """Per-user container of evidence items and discovered connections."""

    items: list[Evidence] = Field(default_factory=list)
    connections: list[EvidenceConnection] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=utc_now)

    def find(self, evidence_id: str) -> Evidence | None:
        for item in self.items:
            if item.id == evidence_id:
                return item
        return None

    def index_of(self, evidence_id: str) -> int:
        for i, item in enumerate(self.items):
            if item.id == evidence_id:
                return i
        return -1

    def is_connected(self, first_id: str, second_id: str) -> bool:
        return any(c.links(first_id, second_id) for c in self.connections)
