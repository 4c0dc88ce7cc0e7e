"""Authored game content."""

from __future__ import annotations

from anomanet.content.starter import (
    create_starter_cases,
    create_starter_evidence,
    seed_available_cases,
    starter_evidence_for_case,
)

__all__ = [
    "create_starter_cases",
    "create_starter_evidence",
    "seed_available_cases",
    "starter_evidence_for_case",
]
