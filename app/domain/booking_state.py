"""Booking state machine."""

from app.core.exceptions import InvalidTransitionError, ValidationError

BOOKING_STATUSES = ("pending", "confirmed", "rejected", "cancelled")
PAYMENT_STATUSES = ("pending", "completed", "failed")

BOOKING_TRANSITIONS = {
    "pending": {"confirmed", "rejected"},
    "confirmed": set(),
    "rejected": set(),
    "cancelled": set(),
}

# Targets an admin may request through the status endpoint.
ADMIN_TARGETS = frozenset({"confirmed", "rejected"})


def can_transition(current: str, target: str) -> bool:
    return target in BOOKING_TRANSITIONS.get(current, set())


def assert_booking_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)


def assert_admin_target(target: str) -> None:
    if target not in ADMIN_TARGETS:
        raise ValidationError.for_field(
            "status",
            f"Booking status can only be set to one of: {', '.join(sorted(ADMIN_TARGETS))}",
        )
