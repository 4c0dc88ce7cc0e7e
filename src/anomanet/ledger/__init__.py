"""Per-user game state persisted through a document store."""

from __future__ import annotations

from anomanet.ledger.cases import CaseLedger
from anomanet.ledger.channels import ChannelLedger
from anomanet.ledger.evidence import ConnectionCheck, EvidenceLedger
from anomanet.ledger.relationships import RelationshipLedger

__all__ = [
    "CaseLedger",
    "ChannelLedger",
    "ConnectionCheck",
    "EvidenceLedger",
    "RelationshipLedger",
]
