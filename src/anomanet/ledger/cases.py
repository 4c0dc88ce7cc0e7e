"""Case ledger: the global pool of available cases and each player's case state."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from anomanet.errors import ConflictError, NotFoundError
from anomanet.ledger.base import DocumentLedger
from anomanet.logging import get_logger
from anomanet.models.case import OUTCOME_STATUS, Case, CaseOutcome, UserCaseState
from anomanet.storage.paths import (
    AVAILABLE_CASES_PREFIX,
    available_case_path,
    user_case_state_path,
)
from anomanet.storage.protocol import DocumentStore
from anomanet.utils.clock import Clock, as_utc, utc_now

logger = get_logger(__name__)

MAX_ACTIVE_CASES = 3


def create_default_user_case_state(now: datetime) -> UserCaseState:
    return UserCaseState(last_updated=now)


class CaseLedger(DocumentLedger):
    """Async operations over the case pool and `users/{user_id}/cases.json`."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        clock: Clock = utc_now,
        max_active_cases: int = MAX_ACTIVE_CASES,
    ) -> None:
        super().__init__(store, clock=clock)
        self.max_active_cases = max_active_cases

    # Pool

    async def get_available_cases(self) -> list[Case]:
        """All valid pool cases, newest first."""

        cases: list[Case] = []
        for path in await self._store.alist(AVAILABLE_CASES_PREFIX):
            case = await self._load(path, Case)
            if case is not None:
                cases.append(case)
        cases.sort(key=lambda c: as_utc(c.posted_at), reverse=True)
        return cases

    async def get_available_case(self, case_id: str) -> Case | None:
        return await self._load(available_case_path(case_id), Case)

    async def save_available_case(self, case: Case) -> None:
        await self._save(available_case_path(case.id), case)

    async def remove_available_case(self, case_id: str) -> None:
        await self._store.adelete(available_case_path(case_id))

    # Per-user state

    async def get_user_case_state(self, user_id: str) -> UserCaseState | None:
        return await self._load(user_case_state_path(user_id), UserCaseState)

    async def get_or_create_user_case_state(self, user_id: str) -> UserCaseState:
        existing = await self.get_user_case_state(user_id)
        if existing is not None:
            return existing

        state = create_default_user_case_state(self.now())
        await self.save_user_case_state(user_id, state)
        return state

    async def save_user_case_state(self, user_id: str, state: UserCaseState) -> None:
        state.last_updated = self.now()
        await self._save(user_case_state_path(user_id), state)

    async def get_user_cases(self, user_id: str) -> tuple[list[Case], list[Case]]:
        """Return `(active, history)`."""

        state = await self.get_or_create_user_case_state(user_id)
        return state.active, state.history

    async def get_active_case(self, user_id: str, case_id: str) -> Case | None:
        state = await self.get_or_create_user_case_state(user_id)
        index = state.active_index(case_id)
        return state.active[index] if index != -1 else None

    async def accept_case(self, user_id: str, case_id: str) -> Case:
        """Copy a pool case into the player's active list.

        Raises:
            NotFoundError: The case is not in the pool.
            ConflictError: Already accepted or completed, or the active list is full.
        """

        available = await self.get_available_case(case_id)
        if available is None:
            raise NotFoundError(f"Case not found: {case_id}")

        state = await self.get_or_create_user_case_state(user_id)
        if state.active_index(case_id) != -1:
            raise ConflictError(f"Case already accepted: {case_id}")
        if any(c.id == case_id for c in state.history):
            raise ConflictError(f"Case already completed: {case_id}")
        if len(state.active) >= self.max_active_cases:
            raise ConflictError(
                f"Maximum active cases ({self.max_active_cases}) reached. "
                "Abandon or solve a case first."
            )

        accepted = available.model_copy(
            deep=True,
            update={"status": "accepted", "accepted_at": self.now()},
        )
        state.active.append(accepted)
        await self.save_user_case_state(user_id, state)
        logger.info("Accepted case %s", case_id)
        return accepted

    async def update_user_case(self, user_id: str, case_id: str, updates: Mapping[str, Any]) -> Case:
        state = await self.get_or_create_user_case_state(user_id)
        index = state.active_index(case_id)
        if index == -1:
            raise NotFoundError(f"Active case not found: {case_id}")

        current = state.active[index].model_dump()
        updated = Case.model_validate({**current, **updates, "id": case_id})
        state.active[index] = updated
        await self.save_user_case_state(user_id, state)
        return updated

    async def _close(self, user_id: str, case_id: str, updates: Mapping[str, Any]) -> Case:
        """Move an active case to the front of history with `updates` applied."""

        state = await self.get_or_create_user_case_state(user_id)
        index = state.active_index(case_id)
        if index == -1:
            raise NotFoundError(f"Active case not found: {case_id}")

        current = state.active.pop(index).model_dump()
        closed = Case.model_validate({**current, **updates, "solved_at": self.now()})
        state.history.insert(0, closed)
        await self.save_user_case_state(user_id, state)
        return closed

    async def complete_case(self, user_id: str, case_id: str, outcome: CaseOutcome, theory: str) -> Case:
        """Resolve an active case. A twist is stored as status `solved` with outcome `twist`."""

        closed = await self._close(
            user_id,
            case_id,
            {"status": OUTCOME_STATUS[outcome], "outcome": outcome, "theory": theory},
        )
        logger.info("Completed case %s with outcome %s", case_id, outcome)
        return closed

    async def abandon_case(self, user_id: str, case_id: str) -> Case:
        closed = await self._close(user_id, case_id, {"status": "abandoned"})
        logger.info("Abandoned case %s", case_id)
        return closed

    async def check_case_expiration(self, user_id: str, case_id: str) -> Case | None:
        """Turn an expired active case cold. None when the case is not active."""

        case = await self.get_active_case(user_id, case_id)
        if case is None:
            return None
        if case.expires_at is None:
            return case

        if as_utc(self.now()) > as_utc(case.expires_at) and case.status != "cold":
            return await self.update_user_case(user_id, case_id, {"status": "cold"})
        return case

    async def check_all_case_expirations(self, user_id: str) -> list[str]:
        """Check every active case; return the ids that went cold on this call."""

        state = await self.get_or_create_user_case_state(user_id)
        went_cold: list[str] = []
        for case in list(state.active):
            if case.expires_at is None or case.status == "cold":
                continue
            updated = await self.check_case_expiration(user_id, case.id)
            if updated is not None and updated.status == "cold":
                went_cold.append(case.id)
        return went_cold

    async def completion_counts(self, user_id: str) -> tuple[int, int]:
        """Return `(completed, solved)` over the player's history.

        Completed counts every case resolved with an outcome (abandoned ones excluded);
        solved counts status `solved`, which includes twists.
        """

        state = await self.get_or_create_user_case_state(user_id)
        completed = sum(1 for c in state.history if c.outcome is not None)
        solved = sum(1 for c in state.history if c.status == "solved")
        return completed, solved
