"""Shared fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from anomanet.config import Settings
from anomanet.ledger import CaseLedger, ChannelLedger, EvidenceLedger, RelationshipLedger
from anomanet.models import Case, CaseRewards, Evidence, RequiredEvidence
from anomanet.storage import MemoryDocumentStore

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(storage_backend="memory", storage_dir=tmp_path, log_level="WARNING")


@pytest.fixture
def evidence_ledger(store: MemoryDocumentStore, clock: FakeClock) -> EvidenceLedger:
    return EvidenceLedger(store, clock=clock)


@pytest.fixture
def case_ledger(store: MemoryDocumentStore, clock: FakeClock) -> CaseLedger:
    return CaseLedger(store, clock=clock)


@pytest.fixture
def relationship_ledger(store: MemoryDocumentStore, clock: FakeClock) -> RelationshipLedger:
    return RelationshipLedger(store, clock=clock)


@pytest.fixture
def channel_ledger(store: MemoryDocumentStore, clock: FakeClock) -> ChannelLedger:
    return ChannelLedger(store, clock=clock)


def make_evidence(evidence_id: str, type: str = "data_fragment", **overrides) -> Evidence:  # noqa: A002
    data = {
        "id": evidence_id,
        "name": f"Item {evidence_id}",
        "description": "test item",
        "type": type,
        "rarity": "common",
        "content": f"content of {evidence_id}",
        "acquired_at": T0,
    }
    data.update(overrides)
    return Evidence.model_validate(data)


def make_case(case_id: str = "case-test", requirements: dict[str, int] | None = None, **overrides) -> Case:
    required = [
        RequiredEvidence(type=t, count=n)  # type: ignore[arg-type]
        for t, n in (requirements if requirements is not None else {"data_fragment": 2, "testimony": 1}).items()
    ]
    data = {
        "id": case_id,
        "title": "Test case",
        "description": "desc",
        "briefing": "brief",
        "type": "recovery",
        "rarity": "common",
        "required_evidence": required,
        "rewards": CaseRewards(xp=100, fragments=50, entity_xp=30),
        "posted_at": T0,
        "source": "system_alert",
    }
    data.update(overrides)
    return Case.model_validate(data)
