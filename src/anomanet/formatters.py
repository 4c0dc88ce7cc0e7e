"""Type-specific rendering of evidence content for display."""

from __future__ import annotations

import random
from typing import Callable

from anomanet.models.evidence import Evidence

CORRUPTION_CHARS = ("█", "▓", "▒", "░", "▄", "▀", "■")
DEFAULT_CORRUPTION_LEVEL = 0.3

UNEXAMINED_PLACEHOLDER = "[Not yet examined]"


def apply_corruption(text: str, level: float, rng: random.Random | None = None) -> str:
    """Replace characters with block glyphs with probability `level`. Spaces and newlines survive."""

    rng = rng or random.Random()
    out: list[str] = []
    for char in text:
        if char in (" ", "\n"):
            out.append(char)
        elif rng.random() < level:
            out.append(rng.choice(CORRUPTION_CHARS))
        else:
            out.append(char)
    return "".join(out)


def _format_chat_log(evidence: Evidence, rng: random.Random | None) -> str:
    if not evidence.content:
        return "[Empty chat log]"
    return "\n".join([f"--- CHAT LOG: {evidence.name} ---", evidence.content, "--- END LOG ---"])


def _format_data_fragment(evidence: Evidence, rng: random.Random | None) -> str:
    if not evidence.content:
        return "[Corrupted - no data recovered]"

    level = evidence.metadata.corruption_level
    if level is None:
        level = DEFAULT_CORRUPTION_LEVEL
    corrupted = apply_corruption(evidence.content, level, rng)
    return "\n".join([f"--- DATA FRAGMENT: {evidence.name} ---", corrupted, "--- END FRAGMENT ---"])


def _format_testimony(evidence: Evidence, rng: random.Random | None) -> str:
    if not evidence.content:
        return "[No testimony recorded]"

    witness = evidence.metadata.witness or "Unknown"
    return "\n".join(
        ["--- TESTIMONY ---", f"Witness: {witness}", "", f'"{evidence.content}"', "--- END TESTIMONY ---"]
    )


def _format_access_key(evidence: Evidence, rng: random.Random | None) -> str:
    if not evidence.content:
        return "[Invalid access key]"

    unlocks = evidence.metadata.unlocks or "Unknown"
    return "\n".join(["--- ACCESS KEY ---", f"Key: {evidence.content}", f"Unlocks: {unlocks}", "--- END KEY ---"])


def _format_tool(evidence: Evidence, rng: random.Random | None) -> str:
    lines = [f"--- TOOL: {evidence.name} ---", evidence.content or evidence.description]
    if evidence.metadata.command:
        lines.extend(["", f"Command: {evidence.metadata.command}"])
    lines.append("--- END TOOL ---")
    return "\n".join(lines)


def _format_coordinates(evidence: Evidence, rng: random.Random | None) -> str:
    if not evidence.content:
        return "[Invalid coordinates]"

    target = evidence.metadata.target or evidence.content
    return "\n".join(
        ["--- COORDINATES ---", f"Location: {target}", "", evidence.content, "--- END COORDINATES ---"]
    )


FORMATTERS: dict[str, Callable[[Evidence, random.Random | None], str]] = {
    "chat_log": _format_chat_log,
    "data_fragment": _format_data_fragment,
    "testimony": _format_testimony,
    "access_key": _format_access_key,
    "tool": _format_tool,
    "coordinates": _format_coordinates,
}


def format_evidence_content(evidence: Evidence, rng: random.Random | None = None) -> str:
    """Render an examined item. Unexamined items never reveal their content."""

    if not evidence.examined:
        return UNEXAMINED_PLACEHOLDER

    formatter = FORMATTERS.get(evidence.type)
    if formatter is None:
        return evidence.content or "[No content]"
    return formatter(evidence, rng)
