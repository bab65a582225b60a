"""Error taxonomy for the ordering workflow.

Every error is raised synchronously where it is detected and propagated to
the caller unchanged; none of them is retried. ``code`` is the stable,
machine-readable name the HTTP layer reports.
"""

from collections.abc import Iterable
from enum import Enum


class MerchFlowError(Exception):
    """Base class for all domain errors."""

    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class NotFound(MerchFlowError):
    """A referenced Order, Product or User does not exist."""

    code = "not_found"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = str(entity_id)


def _value(status) -> str:
    return status.value if isinstance(status, Enum) else str(status)


class InvalidStateTransition(MerchFlowError):
    """An operation was attempted from a status that does not allow it."""

    code = "invalid_state_transition"

    def __init__(self, operation: str, current_status, allowed: Iterable):
        self.operation = operation
        self.current_status = _value(current_status)
        self.allowed = sorted(_value(s) for s in allowed)
        allowed_text = ", ".join(self.allowed) if self.allowed else "none"
        super().__init__(
            f"Cannot {operation} order in {self.current_status} status (allowed from: {allowed_text})"
        )


class EmptyOrder(MerchFlowError):
    code = "empty_order"

    def __init__(self):
        super().__init__("Order must contain at least one item")


class ReferencedEntityMissing(MerchFlowError):
    """A reference on an order could not be resolved."""

    code = "referenced_entity_missing"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"Referenced {entity} {entity_id} is missing")
        self.entity = entity
        self.entity_id = str(entity_id)


class UnknownUser(MerchFlowError):
    code = "unknown_user"

    def __init__(self, username):
        super().__init__(f"User not found: {username}")
        self.username = username


class ValidationFailed(MerchFlowError):
    code = "validation_failed"

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


class Conflict(MerchFlowError):
    code = "conflict"


class DuplicateSku(Conflict):
    def __init__(self, sku: str):
        super().__init__(f"Product with SKU {sku} already exists")
        self.sku = sku


class DuplicateUsername(Conflict):
    def __init__(self, username: str):
        super().__init__(f"User {username} already exists")
        self.username = username


def require_text(field: str, value) -> str:
    """Return ``value`` stripped, or raise ValidationFailed when it is blank."""
    if value is None or not str(value).strip():
        raise ValidationFailed(field, "must not be blank")
    return str(value).strip()
