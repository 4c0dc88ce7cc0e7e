"""Error taxonomy for engine and ledger failures.

Every failure carries a human-readable message. The HTTP layer maps each class to a
4xx status through `status_code`; anything outside this hierarchy is a 500.
"""

from __future__ import annotations


class AnomaNetError(Exception):
    """Base class for expected game-rule failures."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(AnomaNetError):
    """A case, evidence item, channel or active case is absent."""

    status_code = 404


class ConflictError(AnomaNetError):
    """The operation collides with existing state (duplicates, capacity)."""

    status_code = 409


class InvalidConnectionError(AnomaNetError):
    """Two evidence items have no authored link between them."""

    status_code = 422


class MissingParameterError(AnomaNetError):
    """A request omitted a required parameter."""

    status_code = 400
