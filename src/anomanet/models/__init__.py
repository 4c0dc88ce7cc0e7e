"""Pydantic models used across the project."""

from __future__ import annotations

from anomanet.models.case import (
    Case,
    CaseOutcome,
    CaseRewards,
    CaseStatus,
    RequiredEvidence,
    UserCaseState,
)
from anomanet.models.channel import Channel, ChannelState, QueryWindow
from anomanet.models.evidence import (
    Evidence,
    EvidenceConnection,
    EvidenceConnectionReward,
    EvidenceInventory,
    EvidenceMetadata,
    EvidenceType,
)
from anomanet.models.relationship import (
    ConversationSignal,
    EntityMemory,
    PathScores,
    RelationshipState,
)

__all__ = [
    "Case",
    "CaseOutcome",
    "CaseRewards",
    "CaseStatus",
    "Channel",
    "ChannelState",
    "ConversationSignal",
    "EntityMemory",
    "Evidence",
    "EvidenceConnection",
    "EvidenceConnectionReward",
    "EvidenceInventory",
    "EvidenceMetadata",
    "EvidenceType",
    "PathScores",
    "QueryWindow",
    "RelationshipState",
    "RequiredEvidence",
    "UserCaseState",
]
