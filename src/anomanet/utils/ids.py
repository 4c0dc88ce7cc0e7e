"""ID utilities."""

from __future__ import annotations

import secrets


def generate_evidence_id(evidence_type: str) -> str:
    """Return a unique evidence id prefixed from its type.

    The first underscore becomes a dash and the prefix keeps four characters, so
    `data_fragment` yields `data-3fa91c` and `chat_log` yields `chat-0b2e7d`.
    """

    prefix = evidence_type.replace("_", "-", 1)[:4]
    return f"{prefix}-{secrets.token_hex(3)}"
