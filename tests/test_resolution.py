"""Tests for case resolution."""

from __future__ import annotations

import pytest

from anomanet.engine import resolution
from anomanet.models import CaseRewards, EvidenceConnection, EvidenceConnectionReward, RequiredEvidence

from conftest import T0, make_case, make_evidence


def _progress_connection(case_id: str) -> EvidenceConnection:
    return EvidenceConnection(
        evidence_ids=("a", "b"),
        discovered_at=T0,
        insight="linked",
        reward=EvidenceConnectionReward(case_progress=case_id),
    )


def test_completeness_is_one_without_requirements() -> None:
    case = make_case(requirements={})
    assert resolution.calculate_evidence_completeness(case, []) == 1.0


def test_completeness_never_over_credits_a_requirement() -> None:
    case = make_case(requirements={"data_fragment": 2, "testimony": 1})
    evidence = [make_evidence(f"d{i}") for i in range(5)]

    completeness = resolution.calculate_evidence_completeness(case, evidence)

    assert completeness == pytest.approx(2 / 3)


def test_specific_allowlist_filters_matches() -> None:
    case = make_case(
        required_evidence=[RequiredEvidence(type="data_fragment", count=1, specific=["wanted"])],
    )

    assert resolution.calculate_evidence_completeness(case, [make_evidence("other")]) == 0.0
    assert resolution.calculate_evidence_completeness(case, [make_evidence("wanted")]) == 1.0


def test_missing_hints_use_hint_or_type_fallback() -> None:
    case = make_case(
        required_evidence=[
            RequiredEvidence(type="data_fragment", count=2, hint="corrupted logs"),
            RequiredEvidence(type="testimony", count=1),
        ],
    )

    hints = resolution.get_missing_evidence_hints(case, [make_evidence("d1")])

    assert hints == ["Need 1 more corrupted logs", "Need 1 more testimony evidence"]


@pytest.mark.parametrize(
    ("held", "expected"),
    [
        (0, "cold"),
        (1, "cold"),
        (5, "partial"),
        (8, "partial"),
        (9, "solved"),
        (10, "solved"),
    ],
)
def test_outcome_bands(held: int, expected: str) -> None:
    case = make_case(requirements={"data_fragment": 10})
    evidence = [make_evidence(f"d{i}") for i in range(held)]

    assert resolution.calculate_outcome(case, evidence, []) == expected


def test_cold_status_prevents_fresh_solve() -> None:
    case = make_case(requirements={"data_fragment": 1}, status="cold")
    assert resolution.calculate_outcome(case, [make_evidence("d1")], []) == "cold"


def test_twist_requires_complete_evidence_and_matching_connection() -> None:
    case = make_case(requirements={"data_fragment": 2})
    full = [make_evidence("d1"), make_evidence("d2")]
    partial = full[:1]
    matching = [_progress_connection(case.id)]
    other = [_progress_connection("some-other-case")]

    assert resolution.calculate_outcome(case, full, matching) == "twist"
    assert resolution.calculate_outcome(case, partial, matching) != "twist"
    assert resolution.calculate_outcome(case, full, other) == "solved"
    assert resolution.calculate_outcome(case, full, []) == "solved"


def test_twist_beats_cold_status() -> None:
    case = make_case(requirements={"data_fragment": 1}, status="cold")
    evidence = [make_evidence("d1")]

    assert resolution.calculate_outcome(case, evidence, [_progress_connection(case.id)]) == "twist"


@pytest.mark.parametrize(
    ("outcome", "xp", "fragments", "entity_xp"),
    [
        ("solved", 101, 33, 7),
        ("partial", 60, 19, 4),
        ("cold", 30, 9, 2),
        ("twist", 151, 49, 10),
    ],
)
def test_rewards_scale_and_floor_per_field(outcome: str, xp: int, fragments: int, entity_xp: int) -> None:
    case = make_case(
        rewards=CaseRewards(xp=101, fragments=33, entity_xp=7, bonus_evidence=["bonus"], unlocks=["#signals"])
    )

    rewards = resolution.calculate_rewards(case, outcome)  # type: ignore[arg-type]

    assert (rewards.xp, rewards.fragments, rewards.entity_xp) == (xp, fragments, entity_xp)


def test_bonus_evidence_only_for_twist_and_unlocks_for_solved_or_twist() -> None:
    case = make_case(rewards=CaseRewards(xp=10, bonus_evidence=["bonus"], unlocks=["#signals"]))

    twist = resolution.calculate_rewards(case, "twist")
    solved = resolution.calculate_rewards(case, "solved")
    partial = resolution.calculate_rewards(case, "partial")

    assert twist.bonus_evidence == ["bonus"] and twist.unlocks == ["#signals"]
    assert solved.bonus_evidence is None and solved.unlocks == ["#signals"]
    assert partial.bonus_evidence is None and partial.unlocks is None


def test_format_rewards_lines() -> None:
    text = resolution.format_rewards(CaseRewards(xp=100, fragments=50, entity_xp=30, unlocks=["#signals"]))

    assert text.splitlines() == ["+100 XP", "+50 Fragments", "+30 Entity XP", "Unlocked: #signals"]


def test_resolve_case_with_one_fragment_goes_cold_with_hints() -> None:
    case = make_case(requirements={"data_fragment": 2, "testimony": 1})

    result = resolution.resolve_case(case, [make_evidence("d1")], [], "my theory")

    assert result.completeness == pytest.approx(1 / 3)
    assert result.outcome == "cold"
    assert len(result.missing_hints) == 2
    assert result.formatted_rewards == ""
    assert result.description == resolution.INSUFFICIENT_EVIDENCE_DESCRIPTION
    assert not result.conclusive


def test_resolve_case_with_full_evidence_is_solved_at_base_rewards() -> None:
    case = make_case(requirements={"data_fragment": 2, "testimony": 1})
    evidence = [make_evidence("d1"), make_evidence("d2"), make_evidence("t1", type="testimony")]

    result = resolution.resolve_case(case, evidence, [], "my theory")

    assert result.completeness == 1.0
    assert result.outcome == "solved"
    assert result.rewards.xp == case.rewards.xp
    assert result.rewards.fragments == case.rewards.fragments
    assert result.rewards.entity_xp == case.rewards.entity_xp
    assert result.description == resolution.OUTCOME_DESCRIPTIONS["solved"]
    assert result.conclusive


def test_theory_text_does_not_change_the_result() -> None:
    case = make_case(requirements={"data_fragment": 2})
    evidence = [make_evidence("d1")]

    assert resolution.resolve_case(case, evidence, [], "a") == resolution.resolve_case(case, evidence, [], "b")
