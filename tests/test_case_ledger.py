"""Tests for the case ledger."""

from __future__ import annotations

from datetime import timedelta

import pytest

from anomanet.errors import ConflictError, NotFoundError
from anomanet.ledger.cases import CaseLedger
from anomanet.storage.paths import available_case_path

from conftest import T0, make_case

USER = "user-1"


async def _pool(ledger: CaseLedger, *case_ids: str, **overrides) -> None:
    for case_id in case_ids:
        await ledger.save_available_case(make_case(case_id, **overrides))


@pytest.mark.asyncio
async def test_available_cases_newest_first_and_invalid_skipped(case_ledger, store) -> None:
    await case_ledger.save_available_case(make_case("old", posted_at=T0))
    await case_ledger.save_available_case(make_case("new", posted_at=T0 + timedelta(days=1)))
    store.put(available_case_path("broken"), {"id": "broken"})

    cases = await case_ledger.get_available_cases()

    assert [c.id for c in cases] == ["new", "old"]

    await case_ledger.remove_available_case("old")
    assert await case_ledger.get_available_case("old") is None


@pytest.mark.asyncio
async def test_accept_copies_case_with_status_and_timestamp(case_ledger) -> None:
    await _pool(case_ledger, "c1")

    accepted = await case_ledger.accept_case(USER, "c1")

    assert accepted.status == "accepted"
    assert accepted.accepted_at == T0
    active, history = await case_ledger.get_user_cases(USER)
    assert [c.id for c in active] == ["c1"] and history == []
    assert (await case_ledger.get_available_case("c1")).status == "available"


@pytest.mark.asyncio
async def test_accept_rejections(case_ledger) -> None:
    await _pool(case_ledger, "c1", "c2")

    with pytest.raises(NotFoundError, match="Case not found: nope"):
        await case_ledger.accept_case(USER, "nope")

    await case_ledger.accept_case(USER, "c1")
    with pytest.raises(ConflictError, match="already accepted"):
        await case_ledger.accept_case(USER, "c1")

    await case_ledger.complete_case(USER, "c1", "partial", "theory")
    with pytest.raises(ConflictError, match="already completed"):
        await case_ledger.accept_case(USER, "c1")


@pytest.mark.asyncio
async def test_fourth_active_case_is_rejected(case_ledger) -> None:
    await _pool(case_ledger, "c1", "c2", "c3", "c4")
    for case_id in ("c1", "c2", "c3"):
        await case_ledger.accept_case(USER, case_id)

    with pytest.raises(ConflictError, match=r"\(3\)"):
        await case_ledger.accept_case(USER, "c4")


@pytest.mark.asyncio
async def test_capacity_is_configurable(store, clock) -> None:
    ledger = CaseLedger(store, clock=clock, max_active_cases=1)
    await _pool(ledger, "c1", "c2")
    await ledger.accept_case(USER, "c1")

    with pytest.raises(ConflictError, match=r"Maximum active cases \(1\) reached"):
        await ledger.accept_case(USER, "c2")


@pytest.mark.asyncio
async def test_complete_moves_case_to_front_of_history(case_ledger, clock) -> None:
    await _pool(case_ledger, "c1", "c2")
    await case_ledger.accept_case(USER, "c1")
    await case_ledger.accept_case(USER, "c2")

    clock.advance(hours=1)
    await case_ledger.complete_case(USER, "c1", "partial", "first")
    twist = await case_ledger.complete_case(USER, "c2", "twist", "second")

    assert twist.status == "solved"
    assert twist.outcome == "twist"
    assert twist.theory == "second"
    assert twist.solved_at == T0 + timedelta(hours=1)

    active, history = await case_ledger.get_user_cases(USER)
    assert active == []
    assert [c.id for c in history] == ["c2", "c1"]
    assert history[1].status == "partial"


@pytest.mark.asyncio
async def test_abandon_and_unknown_active_case(case_ledger) -> None:
    await _pool(case_ledger, "c1")
    await case_ledger.accept_case(USER, "c1")

    abandoned = await case_ledger.abandon_case(USER, "c1")
    assert abandoned.status == "abandoned"
    assert abandoned.outcome is None

    with pytest.raises(NotFoundError, match="Active case not found: c1"):
        await case_ledger.abandon_case(USER, "c1")
    with pytest.raises(NotFoundError):
        await case_ledger.complete_case(USER, "c1", "solved", "x")


@pytest.mark.asyncio
async def test_update_user_case(case_ledger) -> None:
    await _pool(case_ledger, "c1")
    await case_ledger.accept_case(USER, "c1")

    updated = await case_ledger.update_user_case(USER, "c1", {"status": "in_progress"})

    assert updated.status == "in_progress"
    assert (await case_ledger.get_active_case(USER, "c1")).status == "in_progress"


@pytest.mark.asyncio
async def test_expiration_turns_case_cold(case_ledger, clock) -> None:
    await _pool(case_ledger, "c1", expires_at=T0 + timedelta(hours=2))
    await _pool(case_ledger, "c2")
    await case_ledger.accept_case(USER, "c1")
    await case_ledger.accept_case(USER, "c2")

    assert (await case_ledger.check_case_expiration(USER, "c1")).status == "accepted"
    assert await case_ledger.check_all_case_expirations(USER) == []

    clock.advance(hours=3)
    assert await case_ledger.check_all_case_expirations(USER) == ["c1"]
    assert (await case_ledger.get_active_case(USER, "c1")).status == "cold"
    assert (await case_ledger.get_active_case(USER, "c2")).status == "accepted"
    assert await case_ledger.check_all_case_expirations(USER) == []
    assert await case_ledger.check_case_expiration(USER, "missing") is None


@pytest.mark.asyncio
async def test_completion_counts(case_ledger) -> None:
    await _pool(case_ledger, "c1", "c2", "c3")
    for case_id in ("c1", "c2", "c3"):
        await case_ledger.accept_case(USER, case_id)

    await case_ledger.complete_case(USER, "c1", "twist", "t")
    await case_ledger.complete_case(USER, "c2", "cold", "t")
    await case_ledger.abandon_case(USER, "c3")

    assert await case_ledger.completion_counts(USER) == (2, 1)
