"""Booking state machine tests."""

import pytest

from app.core.exceptions import InvalidTransitionError, ValidationError
from app.domain.booking_state import (
    BOOKING_STATUSES,
    assert_admin_target,
    assert_booking_transition,
    can_transition,
)


@pytest.mark.parametrize("target", ["confirmed", "rejected"])
def test_pending_moves_to_decision(target):
    assert can_transition("pending", target)
    assert_booking_transition("pending", target)


@pytest.mark.parametrize("current", ["confirmed", "rejected", "cancelled"])
@pytest.mark.parametrize("target", BOOKING_STATUSES)
def test_decided_bookings_are_terminal(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidTransitionError) as exc_info:
        assert_booking_transition(current, target)
    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == f"Invalid booking transition: {current} → {target}"


def test_pending_cannot_stay_pending():
    assert not can_transition("pending", "pending")


def test_unknown_status_has_no_transitions():
    assert not can_transition("archived", "confirmed")


@pytest.mark.parametrize("target", ["pending", "cancelled", "CONFIRMED", ""])
def test_admin_targets(target):
    with pytest.raises(ValidationError) as exc_info:
        assert_admin_target(target)
    assert exc_info.value.errors[0]["field"] == "status"
