"""Document paths. Everything per-user lives under `users/{user_id}/`."""

from __future__ import annotations

AVAILABLE_CASES_PREFIX = "cases/available/"


def user_evidence_path(user_id: str) -> str:
    return f"users/{user_id}/evidence.json"


def user_case_state_path(user_id: str) -> str:
    return f"users/{user_id}/cases.json"


def user_channel_state_path(user_id: str) -> str:
    return f"users/{user_id}/channels.json"


def relationship_path(user_id: str, entity_id: str) -> str:
    return f"users/{user_id}/relationships/{entity_id}.json"


def available_case_path(case_id: str) -> str:
    return f"{AVAILABLE_CASES_PREFIX}{case_id}.json"
