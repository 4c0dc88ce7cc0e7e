"""Case resolution: evidence completeness, outcome grading and rewards.

Everything here is a pure function of a case snapshot, the player's evidence and the
discovered connections. The submitted theory is flavour text and is never scored.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from anomanet.models.case import Case, CaseOutcome, CaseRewards, RequiredEvidence
from anomanet.models.evidence import Evidence, EvidenceConnection


OUTCOME_MULTIPLIERS: dict[str, float] = {
    "solved": 1.0,
    "partial": 0.6,
    "cold": 0.3,
    "twist": 1.5,
}

SOLVED_THRESHOLD = 0.9
PARTIAL_THRESHOLD = 0.5

OUTCOME_DESCRIPTIONS: dict[str, str] = {
    "solved": "Case solved! Your investigation was thorough and your theory correct.",
    "partial": (
        "Case partially solved. You were on the right track, "
        "but some details remain unclear."
    ),
    "cold": (
        "Case gone cold. Insufficient evidence to reach a conclusion, "
        "but the case file has been archived."
    ),
    "twist": "TWIST REVEALED! Your investigation uncovered a deeper truth that changes everything.",
}

INSUFFICIENT_EVIDENCE_DESCRIPTION = "Insufficient evidence to resolve this case."


@dataclass(frozen=True)
class ResolutionResult:
    """Everything a caller needs to present and persist a resolution."""

    outcome: CaseOutcome
    rewards: CaseRewards
    description: str
    formatted_rewards: str
    completeness: float
    missing_hints: list[str] = field(default_factory=list)

    @property
    def conclusive(self) -> bool:
        """False when the case short-circuited for lack of evidence."""

        return not self.missing_hints


def _matching_count(requirement: RequiredEvidence, evidence: Sequence[Evidence]) -> int:
    matches = [e for e in evidence if e.type == requirement.type]
    if requirement.specific:
        allowed = set(requirement.specific)
        matches = [e for e in matches if e.id in allowed]
    return len(matches)


def calculate_evidence_completeness(case: Case, evidence: Sequence[Evidence]) -> float:
    """Return the share of required evidence the player holds, in [0, 1].

    Extra items of a type never count beyond that requirement's count.
    """

    total_required = 0
    total_satisfied = 0
    for req in case.required_evidence:
        total_required += req.count
        total_satisfied += min(_matching_count(req, evidence), req.count)

    if total_required == 0:
        return 1.0
    return total_satisfied / total_required


def get_missing_evidence_hints(case: Case, evidence: Sequence[Evidence]) -> list[str]:
    """One hint per unsatisfied requirement."""

    hints: list[str] = []
    for req in case.required_evidence:
        count = _matching_count(req, evidence)
        if count >= req.count:
            continue
        label = req.hint or f"{req.type} evidence"
        hints.append(f"Need {req.count - count} more {label}")
    return hints


def check_twist_conditions(
    case: Case,
    evidence: Sequence[Evidence],
    connections: Sequence[EvidenceConnection],
) -> bool:
    """A twist needs complete evidence and a connection that advances this case."""

    if calculate_evidence_completeness(case, evidence) < 1:
        return False
    return any(c.reward is not None and c.reward.case_progress == case.id for c in connections)


def calculate_outcome(
    case: Case,
    evidence: Sequence[Evidence],
    connections: Sequence[EvidenceConnection],
) -> CaseOutcome:
    completeness = calculate_evidence_completeness(case, evidence)

    if completeness >= 1 and check_twist_conditions(case, evidence, connections):
        return "twist"

    # An expired case cannot be freshly solved.
    if case.status == "cold":
        return "cold"

    if completeness >= SOLVED_THRESHOLD:
        return "solved"
    if completeness >= PARTIAL_THRESHOLD:
        return "partial"
    return "cold"


def calculate_rewards(case: Case, outcome: CaseOutcome) -> CaseRewards:
    """Scale base rewards by the outcome multiplier, flooring each field."""

    multiplier = OUTCOME_MULTIPLIERS[outcome]
    base = case.rewards
    return CaseRewards(
        xp=math.floor(base.xp * multiplier),
        fragments=math.floor(base.fragments * multiplier),
        entity_xp=math.floor(base.entity_xp * multiplier),
        bonus_evidence=list(base.bonus_evidence) if outcome == "twist" and base.bonus_evidence else None,
        unlocks=list(base.unlocks) if outcome in ("solved", "twist") and base.unlocks else None,
    )


def get_outcome_description(outcome: CaseOutcome) -> str:
    return OUTCOME_DESCRIPTIONS[outcome]


def format_rewards(rewards: CaseRewards) -> str:
    lines = [
        f"+{rewards.xp} XP",
        f"+{rewards.fragments} Fragments",
        f"+{rewards.entity_xp} Entity XP",
    ]
    if rewards.bonus_evidence:
        lines.append(f"Bonus Evidence: {', '.join(rewards.bonus_evidence)}")
    if rewards.unlocks:
        lines.append(f"Unlocked: {', '.join(rewards.unlocks)}")
    return "\n".join(lines)


def resolve_case(
    case: Case,
    evidence: Sequence[Evidence],
    connections: Sequence[EvidenceConnection],
    theory: str,
) -> ResolutionResult:
    """Grade a case submission.

    Below the partial threshold the case goes cold immediately and the result carries
    hints about what is still missing instead of a reward summary.
    """

    del theory  # accepted verbatim, not evaluated
    completeness = calculate_evidence_completeness(case, evidence)

    if completeness < PARTIAL_THRESHOLD:
        return ResolutionResult(
            outcome="cold",
            rewards=calculate_rewards(case, "cold"),
            description=INSUFFICIENT_EVIDENCE_DESCRIPTION,
            formatted_rewards="",
            completeness=completeness,
            missing_hints=get_missing_evidence_hints(case, evidence),
        )

    outcome = calculate_outcome(case, evidence, connections)
    rewards = calculate_rewards(case, outcome)
    return ResolutionResult(
        outcome=outcome,
        rewards=rewards,
        description=get_outcome_description(outcome),
        formatted_rewards=format_rewards(rewards),
        completeness=completeness,
    )
