"""Tests for the cross-ledger workflows."""

from __future__ import annotations

from datetime import timedelta

import pytest

from anomanet.errors import NotFoundError
from anomanet.game import Game

from conftest import T0, make_case, make_evidence

USER = "user-1"


@pytest.fixture
def game(store, settings, clock) -> Game:
    return Game.create(store, settings, clock=clock)


async def _accept_with_full_evidence(game: Game, **case_overrides) -> None:
    await game.cases.save_available_case(make_case("c1", **case_overrides))
    await game.accept_case(USER, "c1")
    await game.evidence.add_multiple_evidence(
        USER,
        [make_evidence("d1"), make_evidence("d2"), make_evidence("t1", type="testimony")],
    )


@pytest.mark.asyncio
async def test_solve_before_deadline(game: Game, clock) -> None:
    await _accept_with_full_evidence(game, expires_at=T0 + timedelta(hours=1))
    clock.advance(minutes=30)

    attempt = await game.solve_case(USER, "c1", "my theory")

    assert attempt.result is not None
    assert attempt.result.outcome == "solved"


@pytest.mark.asyncio
async def test_expired_case_resolves_cold_even_with_full_evidence(game: Game, clock) -> None:
    await _accept_with_full_evidence(game, expires_at=T0 + timedelta(hours=1))
    clock.advance(days=2)

    attempt = await game.solve_case(USER, "c1", "my theory")

    assert attempt.kind == "resolved"
    assert attempt.completeness == 1.0
    assert attempt.result is not None
    assert attempt.result.outcome == "cold"
    assert attempt.case.status == "cold"
    assert attempt.case.theory == "my theory"


@pytest.mark.asyncio
async def test_listing_user_cases_lets_expired_cases_go_cold(game: Game, clock) -> None:
    await _accept_with_full_evidence(game, expires_at=T0 + timedelta(hours=1))

    active, _ = await game.user_cases(USER)
    assert active[0].status == "accepted"

    clock.advance(hours=2)
    active, history = await game.user_cases(USER)

    assert [c.status for c in active] == ["cold"]
    assert history == []


@pytest.mark.asyncio
async def test_solve_unknown_case(game: Game) -> None:
    with pytest.raises(NotFoundError, match="Active case not found: nope"):
        await game.solve_case(USER, "nope", "theory")
