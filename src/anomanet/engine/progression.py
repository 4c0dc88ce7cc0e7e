"""Companion progression: leveling curve, phases and relationship paths."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from anomanet.models.relationship import (
    ConversationSignal,
    Phase,
    RelationshipPath,
    RelationshipState,
)

MIN_LEVEL = 1
MAX_LEVEL = 100

PATH_THRESHOLD = 50

DEFAULT_DISPLAY_NAME = "Anonymous"
CHOSEN_NAME_MIN_LEVEL = 50

SIGNAL_TO_PATH: dict[str, str] = {
    "romantic": "romantic",
    "friendly": "friendship",
    "deferential": "mentorship",
    "collaborative": "partnership",
    "reverent": "worship",
}

# Tie-break order for equal top scores: earliest wins.
PATH_ORDER: tuple[str, ...] = ("romantic", "friendship", "mentorship", "partnership", "worship")


def _clamp_level(level: int) -> int:
    return max(MIN_LEVEL, min(MAX_LEVEL, level))


def calculate_xp_for_level(level: int) -> int:
    """XP needed to advance from `level` to the next one (not cumulative)."""

    level = _clamp_level(level)
    if level <= 30:
        return 100 + (level - 1) * 50
    if level <= 60:
        return 500 + (level - 31) * 100
    return 2000 + (level - 61) * 200


def get_phase_for_level(level: int) -> Phase:
    if level <= 30:
        return "awakening"
    if level <= 60:
        return "becoming"
    return "ascension"


def create_default_relationship_state(entity_id: str, now: datetime | None = None) -> RelationshipState:
    return RelationshipState(
        entity_id=entity_id,
        level=MIN_LEVEL,
        xp=0,
        xp_to_next_level=calculate_xp_for_level(MIN_LEVEL),
        phase=get_phase_for_level(MIN_LEVEL),
        first_contact=now,
    )


def add_xp(state: RelationshipState, amount: int) -> RelationshipState:
    """Return a new state with `amount` XP applied.

    One grant may cross several thresholds. At the level cap the surplus is discarded
    and both `xp` and `xp_to_next_level` are pinned to 0.
    """

    if amount < 0:
        raise ValueError(f"XP amount must be non-negative, got {amount}")

    xp = state.xp + amount
    level = state.level
    xp_to_next = state.xp_to_next_level

    while level < MAX_LEVEL and xp >= xp_to_next:
        xp -= xp_to_next
        level += 1
        xp_to_next = calculate_xp_for_level(level)

    if level >= MAX_LEVEL:
        level = MAX_LEVEL
        xp = 0
        xp_to_next = 0

    return state.model_copy(
        update={
            "xp": xp,
            "level": level,
            "xp_to_next_level": xp_to_next,
            "phase": get_phase_for_level(level),
        }
    )


def dominant_path(scores: dict[str, float]) -> RelationshipPath:
    """Highest-scoring path strictly above the threshold, else neutral."""

    best: RelationshipPath = "neutral"
    best_score: float = PATH_THRESHOLD
    for path in PATH_ORDER:
        if scores[path] > best_score:
            best = path  # type: ignore[assignment]
            best_score = scores[path]
    return best


def update_path_scores(state: RelationshipState, signals: Iterable[ConversationSignal]) -> RelationshipState:
    scores = state.path_scores.model_dump()
    for signal in signals:
        scores[SIGNAL_TO_PATH[signal.type]] += signal.weight

    return state.model_copy(
        update={
            "path_scores": state.path_scores.model_copy(update=scores),
            "relationship_path": dominant_path(scores),
        }
    )


def get_mode_for_level(level: int) -> str:
    """Rank badge shown next to the entity's nick."""

    if level >= 61:
        return "@"
    if level >= 31:
        return "+"
    return ""


def get_display_name(state: RelationshipState) -> str:
    if state.level >= CHOSEN_NAME_MIN_LEVEL and state.chosen_name:
        return state.chosen_name
    return DEFAULT_DISPLAY_NAME
