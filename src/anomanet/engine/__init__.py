"""Pure game rules: case resolution, companion progression and channel unlocks."""

from __future__ import annotations

from anomanet.engine.progression import add_xp, calculate_xp_for_level, get_phase_for_level
from anomanet.engine.resolution import ResolutionResult, resolve_case
from anomanet.engine.unlocks import UNLOCK_CONDITIONS, UnlockContext, get_unlockable_channels

__all__ = [
    "ResolutionResult",
    "UNLOCK_CONDITIONS",
    "UnlockContext",
    "add_xp",
    "calculate_xp_for_level",
    "get_phase_for_level",
    "get_unlockable_channels",
    "resolve_case",
]
