"""Tests for starter content."""

from __future__ import annotations

import pytest

from anomanet.content.starter import (
    create_starter_cases,
    create_starter_evidence,
    seed_available_cases,
    starter_evidence_for_case,
)
from anomanet.engine.resolution import calculate_evidence_completeness

from conftest import T0


def test_starter_pool_shape() -> None:
    cases = create_starter_cases(T0)

    assert [c.id for c in cases] == [
        "tutorial-welcome",
        "case-silent-user",
        "case-data-leak",
        "case-lost-creds",
        "case-broker-intro",
        "case-locked-out",
    ]
    assert all(c.status == "available" and c.posted_at == T0 for c in cases)


def test_starter_evidence_ids_are_unique_and_links_resolve() -> None:
    evidence = create_starter_evidence(T0)
    ids = [e.id for e in evidence]

    assert len(ids) == len(set(ids)) == 11
    for item in evidence:
        assert set(item.connections) <= set(ids)
        assert not item.examined


@pytest.mark.parametrize("case", create_starter_cases(T0), ids=lambda c: c.id)
def test_every_starter_case_is_solvable_from_its_grant(case) -> None:  # type: ignore[no-untyped-def]
    granted = starter_evidence_for_case(case.id, T0)

    assert granted
    assert all(e.acquired_from == "case_accept" for e in granted)
    assert calculate_evidence_completeness(case, granted) == 1.0


@pytest.mark.asyncio
async def test_seed_writes_the_pool(case_ledger) -> None:
    seeded = await seed_available_cases(case_ledger)

    pool = await case_ledger.get_available_cases()
    assert sorted(c.id for c in pool) == sorted(c.id for c in seeded)
