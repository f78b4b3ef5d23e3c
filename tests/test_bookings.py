"""Booking lifecycle tests."""

from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from app.core.permissions import ActingUser
from app.models.admin import AuditLog
from app.models.booking import Booking
from app.schemas.booking import BookingCreate
from app.services.audit_service import audit_service
from app.services.booking_service import booking_service
from tests.factories import future_date, make_package


async def book(db, actor, package, **overrides):
    data = BookingCreate(package_id=package.id, travel_date=overrides.pop("travel_date", future_date()), **overrides)
    return await booking_service.create_booking(db, actor, data)


async def stored_status(db, booking_id) -> str:
    return await db.scalar(select(Booking.status).where(Booking.id == booking_id))


class TestCreateBooking:
    """Creating bookings."""

    async def test_new_booking_is_pending(self, db, user, package):
        booking = await book(db, user, package)

        assert booking.status == "pending"
        assert booking.payment_status == "pending"
        assert booking.user_id == user.id
        assert booking.total_amount == package.price
        assert booking.package.title == "Bali Escape"

    async def test_client_supplied_status_is_ignored(self, db, user, package):
        booking = await book(db, user, package, status="confirmed")

        assert booking.status == "pending"

    async def test_payment_fields_are_stored(self, db, user, package):
        booking = await book(db, user, package, payment_method="card", payment_reference="pi_123")

        assert booking.payment_method == "card"
        assert booking.payment_reference == "pi_123"
        assert booking.payment_status == "pending"

    async def test_requires_sign_in(self, db, package):
        with pytest.raises(AuthenticationError):
            await book(db, None, package)

    async def test_unknown_package(self, db, user):
        missing = make_package()
        missing.id = uuid4()

        with pytest.raises(ValidationError) as exc_info:
            await book(db, user, missing)

        assert exc_info.value.errors[0]["field"] == "package_id"

    async def test_past_travel_date(self, db, user, package):
        with pytest.raises(ValidationError) as exc_info:
            await book(db, user, package, travel_date=future_date(-7))

        assert exc_info.value.errors[0]["field"] == "travel_date"


class TestSetBookingStatus:
    """Admin accepts or rejects pending bookings."""

    @pytest.mark.parametrize(
        ("is_admin", "pending", "expected"),
        [
            (True, True, None),
            (True, False, InvalidTransitionError),
            (False, True, AuthorizationError),
            (False, False, AuthorizationError),
        ],
    )
    async def test_admin_and_pending_combinations(
        self, db, user, admin, package, is_admin, pending, expected
    ):
        booking = await book(db, user, package)
        if not pending:
            await booking_service.set_booking_status(db, admin, booking.id, "rejected")
        before = await stored_status(db, booking.id)
        actor = admin if is_admin else user

        if expected is None:
            updated = await booking_service.set_booking_status(db, actor, booking.id, "confirmed")
            assert updated.status == "confirmed"
        else:
            with pytest.raises(expected):
                await booking_service.set_booking_status(db, actor, booking.id, "confirmed")
            assert await stored_status(db, booking.id) == before

    async def test_reject(self, db, user, admin, package):
        booking = await book(db, user, package)

        updated = await booking_service.set_booking_status(db, admin, booking.id, "rejected")

        assert updated.status == "rejected"

    async def test_invalid_transition_is_409(self, db, user, admin, package):
        booking = await book(db, user, package)
        await booking_service.set_booking_status(db, admin, booking.id, "confirmed")

        with pytest.raises(InvalidTransitionError) as exc_info:
            await booking_service.set_booking_status(db, admin, booking.id, "rejected")

        assert exc_info.value.status_code == 409
        assert exc_info.value.current == "confirmed"

    async def test_second_admin_loses_the_race(self, db, user, admin, package):
        second_admin = ActingUser(id=uuid4(), is_admin=True)
        booking = await book(db, user, package)

        await booking_service.set_booking_status(db, admin, booking.id, "confirmed")
        with pytest.raises(InvalidTransitionError):
            await booking_service.set_booking_status(db, second_admin, booking.id, "rejected")

        assert await stored_status(db, booking.id) == "confirmed"

    @pytest.mark.parametrize("target", ["pending", "cancelled", "completed", ""])
    async def test_only_confirm_or_reject(self, db, user, admin, package, target):
        booking = await book(db, user, package)

        with pytest.raises(ValidationError):
            await booking_service.set_booking_status(db, admin, booking.id, target)

        assert await stored_status(db, booking.id) == "pending"

    async def test_unknown_booking(self, db, admin):
        with pytest.raises(NotFoundError):
            await booking_service.set_booking_status(db, admin, uuid4(), "confirmed")

    async def test_anonymous(self, db, user, package):
        booking = await book(db, user, package)

        with pytest.raises(AuthenticationError):
            await booking_service.set_booking_status(db, None, booking.id, "confirmed")

    async def test_status_change_is_audited(self, db, user, admin, package):
        booking = await book(db, user, package)
        await booking_service.set_booking_status(db, admin, booking.id, "confirmed")

        log = (await db.execute(select(AuditLog))).scalar_one()

        assert log.action == "booking_status_change"
        assert log.user_id == admin.id
        assert log.resource_id == booking.id
        assert log.old_values == {"status": "pending"}
        assert log.new_values == {"status": "confirmed"}

    async def test_payment_fields_untouched(self, db, user, admin, package):
        booking = await book(db, user, package, payment_method="card")

        updated = await booking_service.set_booking_status(db, admin, booking.id, "confirmed")

        assert updated.payment_status == "pending"
        assert updated.payment_method == "card"


class TestListBookings:
    """Admin dashboard and "my bookings"."""

    async def test_bali_escape_scenario(self, db, user, admin, package):
        booking = await book(db, user, package)

        bookings, pending = await booking_service.list_bookings(db, admin, scope="all")
        assert [b.id for b in bookings] == [booking.id]
        assert pending == 1

        await booking_service.set_booking_status(db, admin, booking.id, "confirmed")

        mine, _ = await booking_service.list_bookings(db, user, scope="mine")
        assert mine[0].status == "confirmed"
        assert mine[0].package.title == "Bali Escape"

        _, pending = await booking_service.list_bookings(db, admin, scope="all")
        assert pending == 0

        with pytest.raises(InvalidTransitionError):
            await booking_service.set_booking_status(db, admin, booking.id, "rejected")

    async def test_all_scope_is_admin_only(self, db, user):
        with pytest.raises(AuthorizationError):
            await booking_service.list_bookings(db, user, scope="all")

    async def test_mine_requires_sign_in(self, db):
        with pytest.raises(AuthenticationError):
            await booking_service.list_bookings(db, None, scope="mine")

    async def test_mine_only_lists_own_by_travel_date(self, db, user, other_user, package):
        soon = await book(db, user, package, travel_date=future_date(10))
        later = await book(db, user, package, travel_date=future_date(90))
        await book(db, other_user, package)

        mine, pending = await booking_service.list_bookings(db, user, scope="mine")

        assert [b.id for b in mine] == [later.id, soon.id]
        assert pending == 2

    async def test_all_includes_booker(self, db, user, other_user, admin, package):
        await book(db, user, package)
        await book(db, other_user, package, travel_date=future_date() + timedelta(days=1))

        bookings, _ = await booking_service.list_bookings(db, admin, scope="all")

        assert {b.user.email for b in bookings} == {"asha@example.com", "ben@example.com"}


class TestGetBooking:
    """Single booking access."""

    async def test_owner_and_admin_can_read(self, db, user, admin, package):
        booking = await book(db, user, package)

        assert (await booking_service.get_booking(db, user, booking.id)).id == booking.id
        assert (await booking_service.get_booking(db, admin, booking.id)).id == booking.id

    async def test_other_user_is_forbidden(self, db, user, other_user, package):
        booking = await book(db, user, package)

        with pytest.raises(AuthorizationError):
            await booking_service.get_booking(db, other_user, booking.id)

    async def test_unknown_booking(self, db, user):
        with pytest.raises(NotFoundError):
            await booking_service.get_booking(db, user, uuid4())


class TestStoreFailures:
    """Database failures surface as StoreError and leave nothing applied."""

    async def test_failed_status_change_is_not_applied(self, db, user, admin, package, monkeypatch):
        booking = await book(db, user, package)
        booking_id = booking.id
        await db.commit()

        async def failing_flush(*args, **kwargs):
            raise OperationalError("INSERT INTO audit_logs", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db, "flush", failing_flush)

        with pytest.raises(StoreError) as exc_info:
            await booking_service.set_booking_status(db, admin, booking_id, "confirmed")

        assert exc_info.value.status_code == 503
        assert "disk I/O error" in exc_info.value.detail

        await db.rollback()
        assert await stored_status(db, booking_id) == "pending"
        assert await db.scalar(select(func.count()).select_from(AuditLog)) == 0

    async def test_failed_create_leaves_no_booking(self, db, user, package, monkeypatch):
        async def failing_flush(*args, **kwargs):
            raise OperationalError("INSERT INTO bookings", {}, Exception("database is locked"))

        monkeypatch.setattr(db, "flush", failing_flush)

        with pytest.raises(StoreError):
            await book(db, user, package)

        await db.rollback()
        assert await db.scalar(select(func.count()).select_from(Booking)) == 0

    async def test_audit_listing_failure(self, db, admin, monkeypatch):
        async def failing_scalar(*args, **kwargs):
            raise OperationalError("SELECT count(*) FROM audit_logs", {}, Exception("no such table"))

        monkeypatch.setattr(db, "scalar", failing_scalar)

        with pytest.raises(StoreError) as exc_info:
            await audit_service.list_logs(db, admin)

        assert exc_info.value.status_code == 503

    async def test_unknown_payment_status_violates_check(self, db, user, package):
        db.add(
            Booking(
                user_id=user.id,
                package_id=package.id,
                travel_date=future_date(),
                status="pending",
                payment_status="refunded",
                total_amount=package.price,
            )
        )

        with pytest.raises(IntegrityError):
            await db.flush()
