# Overview: Typed error taxonomy shared by services and routes.

"""
Ledger error taxonomy.

Services raise these; routes translate them with ``to_dict()`` and
``status_code``. Anything else that escapes a route is logged and reported
as an opaque ``Internal`` failure.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for errors the API reports to callers."""

    kind = "Internal"
    status_code = 500

    def __init__(self, message: str, *, field: str | None = None, index: int | None = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.index = index

    def to_dict(self) -> dict:
        body = {"error": self.message, "kind": self.kind}
        if self.field is not None:
            body["field"] = self.field
        if self.index is not None:
            body["index"] = self.index
        return body


class ValidationError(LedgerError):
    """400-level input problem (missing field, wrong type, invariant violation)."""

    kind = "Validation"
    status_code = 400


class ConflictError(ValidationError):
    """409-level uniqueness conflict (e.g., phone already registered)."""

    status_code = 409


class NotFoundError(LedgerError):
    """Referenced record is missing or belongs to another store."""

    kind = "NotFound"
    status_code = 404


class UnauthorizedError(LedgerError):
    """No valid identity, or the identity has no store."""

    kind = "Unauthorized"
    status_code = 401


class InternalError(LedgerError):
    """Storage-layer failure surfaced as an opaque error."""

    kind = "Internal"
    status_code = 500
