"""Case models.

A case lives in the global pool while `available`; accepting it copies the record into
the player's active list, and resolving or abandoning it moves that copy to history.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from anomanet.models.evidence import EvidenceType
from anomanet.utils.clock import utc_now


CaseType = Literal[
    "missing_person",
    "information_brokering",
    "infiltration",
    "exposure",
    "recovery",
    "anomaly",
]

CaseRarity = Literal["common", "uncommon", "rare", "legendary"]

# `failed` is reserved: no transition produces it yet.
CaseStatus = Literal[
    "available",
    "accepted",
    "in_progress",
    "solved",
    "partial",
    "failed",
    "abandoned",
    "cold",
]

CaseOutcome = Literal["solved", "partial", "cold", "twist"]

CaseSource = Literal["anonymous_tip", "system_alert", "npc_request"]

OUTCOME_STATUS: dict[str, CaseStatus] = {
    "solved": "solved",
    "partial": "partial",
    "cold": "cold",
    "twist": "solved",
}


class RequiredEvidence(BaseModel):
    """One evidence requirement of a case."""

    type: EvidenceType
    count: int = Field(ge=0)
    specific: list[str] | None = None
    hint: str | None = None


class CaseRewards(BaseModel):
    """Base rewards, scaled by outcome on resolution."""

    xp: int = Field(default=0, ge=0)
    fragments: int = Field(default=0, ge=0)
    entity_xp: int = Field(default=0, ge=0)
    bonus_evidence: list[str] | None = None
    unlocks: list[str] | None = None


class Case(BaseModel):
    """A structured investigation task."""

    id: str
    title: str
    description: str
    briefing: str
    type: CaseType
    rarity: CaseRarity
    status: CaseStatus = "available"
    required_evidence: list[RequiredEvidence] = Field(default_factory=list)
    rewards: CaseRewards = Field(default_factory=CaseRewards)
    posted_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime | None = None
    accepted_at: datetime | None = None
    solved_at: datetime | None = None
    client_id: str | None = None
    outcome: CaseOutcome | None = None
    twist_revealed: bool | None = None
    theory: str | None = None
    source: CaseSource


class UserCaseState(BaseModel):
    """A player's active cases and resolved history (most recent first)."""

    active: list[Case] = Field(default_factory=list)
    history: list[Case] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=utc_now)

    def active_index(self, case_id: str) -> int:
        for i, c in enumerate(self.active):
            if c.id == case_id:
                return i
        return -1
