"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from anomanet.models.case import Case, CaseOutcome, CaseRewards
from anomanet.models.channel import Channel, QueryWindow
from anomanet.models.evidence import Evidence, EvidenceConnection
from anomanet.models.relationship import ConversationSignal, RelationshipState


class SolveRequest(BaseModel):
    theory: str | None = None


class EvidenceCreate(Evidence):
    """An evidence item to add; the id is generated from the type when omitted."""

    id: str | None = None  # type: ignore[assignment]


class ConnectRequest(BaseModel):
    first_id: str
    second_id: str


class SignalsRequest(BaseModel):
    signals: list[ConversationSignal] = Field(min_length=1)


class AcceptResponse(BaseModel):
    case: Case
    evidence_granted: list[str]


class EvidenceListResponse(BaseModel):
    items: list[dict[str, Any]]
    by_type: dict[str, list[str]]
    unexamined_count: int
    total: int


class ExamineResponse(BaseModel):
    evidence: Evidence
    formatted_content: str


class ConnectResponse(BaseModel):
    connected: bool
    insight: str
    connection: EvidenceConnection | None = None


class InsufficientEvidence(BaseModel):
    kind: Literal["insufficient_evidence"] = "insufficient_evidence"
    completeness: float
    hints: list[str]
    message: str = "Insufficient evidence to solve this case."


class TheoryRequired(BaseModel):
    kind: Literal["theory_required"] = "theory_required"
    completeness: float
    case: Case


class Resolved(BaseModel):
    kind: Literal["resolved"] = "resolved"
    outcome: CaseOutcome
    description: str
    rewards: CaseRewards
    formatted_rewards: str
    completeness: float
    hints: list[str] = Field(default_factory=list)
    case: Case
    unlocked_channels: list[str] = Field(default_factory=list)
    notifications: list[str] = Field(default_factory=list)


SolveResponse = Annotated[
    Union[InsufficientEvidence, TheoryRequired, Resolved],
    Field(discriminator="kind"),
]


class ProgressionResponse(BaseModel):
    state: RelationshipState
    display_name: str
    mode: str


class InteractionResponse(BaseModel):
    state: RelationshipState
    unlocked_channels: list[str]
    notifications: list[str]


class ChannelListResponse(BaseModel):
    channels: list[Channel]
    query_windows: list[QueryWindow]
    unlock_hints: dict[str, list[str]]


class UnlockResponse(BaseModel):
    unlocked: list[str]
    notifications: list[str]


class DiscoverResponse(BaseModel):
    channel_id: str
    notification: str
