"""Error taxonomy shared by services and the operation dispatcher.

Services raise these; only :func:`shopdesk.rpc.dispatch` turns them into envelopes.
"""

from __future__ import annotations

from typing import Optional


class ShopdeskError(Exception):
    code = "InternalError"

    def __init__(self, message: str, *, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_envelope(self) -> dict:
        envelope = {"success": False, "error": self.code, "message": self.message}
        if self.details:
            envelope["details"] = self.details
        return envelope


class ValidationError(ShopdeskError):
    code = "ValidationError"


class NotFound(ShopdeskError):
    code = "NotFound"


class Conflict(ShopdeskError):
    code = "Conflict"


class InvalidAdjustment(ShopdeskError):
    code = "InvalidAdjustment"


class ScopeRequired(ShopdeskError):
    code = "ScopeRequired"


class Unauthorized(ShopdeskError):
    code = "Unauthorized"


class StoreError(ShopdeskError):
    code = "StoreError"


def missing_fields_error(missing) -> ValidationError:
    return ValidationError(
        "Missing required fields: {}".format(", ".join(missing)),
        details={"missing": list(missing)},
    )


__all__ = [
    "Conflict",
    "InvalidAdjustment",
    "NotFound",
    "ScopeRequired",
    "ShopdeskError",
    "StoreError",
    "Unauthorized",
    "ValidationError",
    "missing_fields_error",
]
