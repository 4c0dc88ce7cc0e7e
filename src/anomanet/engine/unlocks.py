"""Channel unlock conditions and triggers.

Each lockable channel maps to a list of conditions evaluated with OR semantics. Unlocking
is monotonic: channels that are already open are never re-evaluated or relocked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Literal, Mapping, Sequence

from pydantic import BaseModel

from anomanet.logging import get_logger
from anomanet.models.channel import ChannelState
from anomanet.models.relationship import RelationshipState

if TYPE_CHECKING:
    from anomanet.ledger.cases import CaseLedger
    from anomanet.ledger.channels import ChannelLedger
    from anomanet.ledger.relationships import RelationshipLedger

logger = get_logger(__name__)

UnlockConditionType = Literal["level", "case_complete", "case_solved", "relationship", "discovery"]


class UnlockCondition(BaseModel):
    type: UnlockConditionType
    value: int | str
    description: str | None = None


@dataclass(frozen=True)
class UnlockContext:
    """Snapshot of the measurable counters conditions are checked against."""

    level: int
    cases_completed: int
    cases_solved: int
    relationship_path: str
    total_interactions: int


UNLOCK_CONDITIONS: dict[str, list[UnlockCondition]] = {
    "signals": [
        UnlockCondition(type="level", value=5, description="Reach level 5"),
        UnlockCondition(type="case_complete", value=1, description="Complete your first case"),
    ],
    "archives": [
        UnlockCondition(type="level", value=10, description="Reach level 10"),
        UnlockCondition(type="case_solved", value=1, description="Solve your first case"),
    ],
    "private": [
        UnlockCondition(type="level", value=15, description="Reach level 15"),
        UnlockCondition(
            type="relationship",
            value="milestone_1",
            description="Reach a relationship milestone",
        ),
    ],
}

RELATIONSHIP_MILESTONES: dict[str, Callable[[RelationshipState], bool]] = {
    "milestone_1": lambda s: s.total_interactions >= 50,
    "milestone_2": lambda s: s.total_interactions >= 100,
    "intimate": lambda s: (
        s.relationship_path != "neutral" and max(s.path_scores.model_dump().values()) >= 50
    ),
}


def evaluate_condition(
    condition: UnlockCondition,
    context: UnlockContext,
    relationship_state: RelationshipState | None = None,
) -> bool:
    if condition.type == "level":
        return context.level >= int(condition.value)
    if condition.type == "case_complete":
        return context.cases_completed >= int(condition.value)
    if condition.type == "case_solved":
        return context.cases_solved >= int(condition.value)
    if condition.type == "relationship":
        if relationship_state is None:
            return False
        milestone = RELATIONSHIP_MILESTONES.get(str(condition.value))
        return milestone(relationship_state) if milestone else False
    # Discovery is only ever triggered explicitly, never by scanning.
    return False


def get_unlockable_channels(
    channel_state: ChannelState,
    context: UnlockContext,
    relationship_state: RelationshipState | None = None,
    conditions: Mapping[str, Sequence[UnlockCondition]] = UNLOCK_CONDITIONS,
) -> list[str]:
    """Ids of locked channels whose conditions are now satisfied."""

    unlockable: list[str] = []
    for channel in channel_state.channels:
        if not channel.locked:
            continue
        channel_conditions = conditions.get(channel.id)
        if not channel_conditions:
            continue
        if any(evaluate_condition(c, context, relationship_state) for c in channel_conditions):
            unlockable.append(channel.id)
    return unlockable


def get_unlock_hints(channel_id: str) -> list[str]:
    return [c.description for c in UNLOCK_CONDITIONS.get(channel_id, []) if c.description]


def create_unlock_notification(channel_id: str) -> str:
    return f"*** New channel unlocked: #{channel_id}"


def create_discovery_notification(channel_id: str) -> str:
    return f"*** CHANNEL REVEALED: #{channel_id}"


async def build_unlock_context(
    user_id: str,
    *,
    relationships: RelationshipLedger,
    cases: CaseLedger,
    entity_id: str,
) -> tuple[UnlockContext, RelationshipState]:
    """Gather the counters for `user_id` and the relationship state they came from."""

    relationship = await relationships.get_or_create_relationship_state(user_id, entity_id)
    completed, solved = await cases.completion_counts(user_id)
    context = UnlockContext(
        level=relationship.level,
        cases_completed=completed,
        cases_solved=solved,
        relationship_path=relationship.relationship_path,
        total_interactions=relationship.total_interactions,
    )
    return context, relationship


async def check_and_unlock_channels(
    user_id: str,
    *,
    channels: ChannelLedger,
    relationships: RelationshipLedger,
    cases: CaseLedger,
    entity_id: str,
) -> list[str]:
    """Unlock every channel whose conditions now hold; return the ids unlocked."""

    state = await channels.get_or_create_channel_state(user_id)
    context, relationship = await build_unlock_context(
        user_id, relationships=relationships, cases=cases, entity_id=entity_id
    )
    unlockable = get_unlockable_channels(state, context, relationship)
    if not unlockable:
        return []

    now = channels.now()
    for channel in state.channels:
        if channel.id in unlockable:
            channel.locked = False
            channel.unlocked_at = now
    await channels.save_channel_state(user_id, state)
    logger.info("Unlocked channels %s", ", ".join(unlockable))
    return unlockable


async def discover_and_unlock_channel(user_id: str, channel_id: str, *, channels: ChannelLedger) -> bool:
    """Reveal and unlock a hidden channel. False when the channel does not exist."""

    state = await channels.get_or_create_channel_state(user_id)
    if not any(c.id == channel_id for c in state.channels):
        return False
    await channels.discover_channel(user_id, channel_id)
    return True
