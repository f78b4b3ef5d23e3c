"""Immutability enforcement for append-only records using SQLAlchemy events."""

import logging
from datetime import UTC, datetime

from sqlalchemy import event, inspect

from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Booking columns that may still change after creation: the admin-owned
# status and the externally populated payment fields.
BOOKING_MUTABLE_COLUMNS = frozenset(
    {"status", "payment_status", "payment_method", "payment_reference", "updated_at"}
)

_registered = False


class ImmutabilityViolationError(ValidationError):
    """Raised when attempting to modify an immutable record."""

    def __init__(self, model_name: str, operation: str, record_id: str):
        self.model_name = model_name
        self.operation = operation
        self.record_id = record_id
        super().__init__(
            f"Immutability violation: Cannot {operation} {model_name} record {record_id}."
        )


def _log_immutability_violation(model_name: str, operation: str, record_id: str) -> None:
    logger.error(
        f"IMMUTABILITY_VIOLATION: Attempted to {operation} {model_name} "
        f"record_id={record_id} at {datetime.now(UTC).isoformat()}"
    )


def _reject(model_name: str, operation: str, target) -> None:
    _log_immutability_violation(model_name, operation, str(target.id))
    raise ImmutabilityViolationError(model_name, operation, str(target.id))


def changed_columns(target) -> set[str]:
    """Names of mapped column attributes with pending changes on an instance."""
    state = inspect(target)
    return {
        attr.key
        for attr in state.mapper.column_attrs
        if state.attrs[attr.key].history.has_changes()
    }


def register_immutability_enforcement() -> None:
    """Register SQLAlchemy event listeners for immutability enforcement.

    Idempotent; called at application start-up and by the test fixtures.
    """
    global _registered
    if _registered:
        return

    from app.models.admin import AuditLog
    from app.models.booking import Booking
    from app.models.review import Review

    # ============ Review: create-only ============

    @event.listens_for(Review, "before_update")
    def prevent_review_update(mapper, connection, target):
        _reject("Review", "UPDATE", target)

    @event.listens_for(Review, "before_delete")
    def prevent_review_delete(mapper, connection, target):
        _reject("Review", "DELETE", target)

    # ============ AuditLog: append-only ============

    @event.listens_for(AuditLog, "before_update")
    def prevent_audit_update(mapper, connection, target):
        _reject("AuditLog", "UPDATE", target)

    @event.listens_for(AuditLog, "before_delete")
    def prevent_audit_delete(mapper, connection, target):
        _reject("AuditLog", "DELETE", target)

    # ============ Booking: only status and payment fields move ============

    @event.listens_for(Booking, "before_update")
    def prevent_booking_field_update(mapper, connection, target):
        frozen = changed_columns(target) - BOOKING_MUTABLE_COLUMNS
        if frozen:
            _reject("Booking", f"UPDATE {', '.join(sorted(frozen))} of", target)

    @event.listens_for(Booking, "before_delete")
    def prevent_booking_delete(mapper, connection, target):
        _reject("Booking", "DELETE", target)

    _registered = True
    logger.info("Immutability enforcement registered for reviews, bookings and audit logs")
