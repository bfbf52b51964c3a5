# Overview: Typed failures surfaced by the service layer.

"""
Error taxonomy shared by services, routes and the CLI.

Every service failure is a StoreError carrying a human-readable message and a
JSON-safe `details` dict. Routes translate the subclasses to HTTP statuses via
`http_status`.
"""

from __future__ import annotations


# PolicyViolationError kinds
CASHLESS_NOT_SUPPORTED = "CASHLESS_NOT_SUPPORTED"
REGISTER_REQUIRED = "REGISTER_REQUIRED"
MARKUP_EXCEEDED = "MARKUP_EXCEEDED"
CASH_LIMIT_EXCEEDED = "CASH_LIMIT_EXCEEDED"
EQUIPMENT_NOT_SELLABLE = "EQUIPMENT_NOT_SELLABLE"

# ConflictError kinds
ALREADY_SOLD = "ALREADY_SOLD"


class StoreError(Exception):
    """Base class for business failures."""
    http_status = 400
    kind: str | None = None

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> dict:
        return {
            "error": str(self),
            "kind": self.kind,
            "details": self.details,
        }


class ValidationError(StoreError):
    """400-level input problem (malformed request)."""
    kind = "VALIDATION"


class NotFoundError(StoreError):
    """Referenced entity does not exist."""
    http_status = 404
    kind = "NOT_FOUND"

    def __init__(self, entity_kind: str, entity_id, message: str | None = None):
        super().__init__(
            message or f"{entity_kind} {entity_id} not found",
            details={"entity": entity_kind, "id": entity_id},
        )
        self.entity_kind = entity_kind
        self.entity_id = entity_id


class PolicyViolationError(StoreError):
    """Request is well-formed but breaks a business rule."""
    http_status = 422

    def __init__(self, kind: str, message: str, **details):
        super().__init__(message, details=details)
        self.kind = kind


class ConflictError(StoreError):
    """Request conflicts with current state (e.g. equipment already sold)."""
    http_status = 409

    def __init__(self, kind: str, message: str, **details):
        super().__init__(message, details=details)
        self.kind = kind
