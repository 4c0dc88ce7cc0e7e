"""Workflows that span several ledgers.

The ledgers each own one document kind. Accepting a case also grants evidence, and
solving one also feeds the companion relationship and the channel unlocks; those
cross-document flows live here so the HTTP layer and the CLI share them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from anomanet.config import Settings
from anomanet.content.starter import create_starter_evidence, seed_available_cases, starter_evidence_for_case
from anomanet.engine import resolution
from anomanet.engine.unlocks import check_and_unlock_channels
from anomanet.errors import NotFoundError
from anomanet.ledger.cases import CaseLedger
from anomanet.ledger.channels import ChannelLedger
from anomanet.ledger.evidence import EvidenceLedger
from anomanet.ledger.relationships import RelationshipLedger
from anomanet.logging import get_logger, request_context
from anomanet.models.case import Case
from anomanet.models.evidence import Evidence
from anomanet.models.relationship import RelationshipState
from anomanet.storage.protocol import DocumentStore
from anomanet.utils.clock import Clock, utc_now

logger = get_logger(__name__)

SolveKind = Literal["insufficient_evidence", "theory_required", "resolved"]


@dataclass(frozen=True)
class SolveAttempt:
    """What happened when a player tried to close a case."""

    kind: SolveKind
    case: Case
    completeness: float
    hints: list[str] = field(default_factory=list)
    result: resolution.ResolutionResult | None = None
    relationship: RelationshipState | None = None
    unlocked_channels: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Game:
    """The four ledgers over one store, plus the companion entity they share."""

    evidence: EvidenceLedger
    cases: CaseLedger
    relationships: RelationshipLedger
    channels: ChannelLedger
    entity_id: str

    @classmethod
    def create(cls, store: DocumentStore, settings: Settings, *, clock: Clock = utc_now) -> "Game":
        return cls(
            evidence=EvidenceLedger(store, clock=clock),
            cases=CaseLedger(store, clock=clock, max_active_cases=settings.max_active_cases),
            relationships=RelationshipLedger(store, clock=clock),
            channels=ChannelLedger(store, clock=clock),
            entity_id=settings.anonymous_entity_id,
        )

    async def seed(self, user_id: str | None = None) -> list[Case]:
        """Seed the case pool; with a user, also hand them the whole starter evidence pool."""

        seeded = await seed_available_cases(self.cases)
        if user_id is not None:
            await self.evidence.add_multiple_evidence(user_id, create_starter_evidence(self.cases.now()))
        return seeded

    async def available_cases(self) -> list[Case]:
        """The case pool, seeded on first read."""

        cases = await self.cases.get_available_cases()
        if not cases:
            await seed_available_cases(self.cases)
            cases = await self.cases.get_available_cases()
        return cases

    async def find_case(self, user_id: str, case_id: str) -> Case:
        """Active copy first, then the pool."""

        case = await self.cases.get_active_case(user_id, case_id)
        if case is None:
            case = await self.cases.get_available_case(case_id)
        if case is None:
            raise NotFoundError(f"Case not found: {case_id}")
        return case

    async def accept_case(self, user_id: str, case_id: str) -> tuple[Case, list[Evidence]]:
        """Accept a case and grant the starter evidence relevant to it."""

        with request_context(case_id=case_id):
            accepted = await self.cases.accept_case(user_id, case_id)
            granted = starter_evidence_for_case(case_id, self.cases.now())
            added: list[Evidence] = []
            if granted:
                added = await self.evidence.add_multiple_evidence(user_id, granted)
        return accepted, added

    async def user_cases(self, user_id: str) -> tuple[list[Case], list[Case]]:
        """Active cases and history, after letting any expired case go cold."""

        went_cold = await self.cases.check_all_case_expirations(user_id)
        if went_cold:
            logger.info("Cases went cold: %s", ", ".join(went_cold))
        return await self.cases.get_user_cases(user_id)

    async def solve_case(self, user_id: str, case_id: str, theory: str | None) -> SolveAttempt:
        """Close a case once the player has a theory.

        Expiry is checked first, so a case past its deadline can only resolve cold.
        """

        with request_context(case_id=case_id):
            return await self._solve(user_id, case_id, theory)

    async def _solve(self, user_id: str, case_id: str, theory: str | None) -> SolveAttempt:
        case = await self.cases.check_case_expiration(user_id, case_id)
        if case is None:
            raise NotFoundError(f"Active case not found: {case_id}")

        items = await self.evidence.get_all_evidence(user_id)
        completeness = resolution.calculate_evidence_completeness(case, items)

        if not theory:
            if completeness < resolution.PARTIAL_THRESHOLD:
                return SolveAttempt(
                    kind="insufficient_evidence",
                    case=case,
                    completeness=completeness,
                    hints=resolution.get_missing_evidence_hints(case, items),
                )
            return SolveAttempt(kind="theory_required", case=case, completeness=completeness)

        connections = await self.evidence.get_connections(user_id)
        result = resolution.resolve_case(case, items, connections, theory)
        closed = await self.cases.complete_case(user_id, case_id, result.outcome, theory)

        relationship = await self.relationships.apply_xp(user_id, self.entity_id, result.rewards.entity_xp)
        unlocked = await check_and_unlock_channels(
            user_id,
            channels=self.channels,
            relationships=self.relationships,
            cases=self.cases,
            entity_id=self.entity_id,
        )
        return SolveAttempt(
            kind="resolved",
            case=closed,
            completeness=completeness,
            hints=result.missing_hints,
            result=result,
            relationship=relationship,
            unlocked_channels=unlocked,
        )
