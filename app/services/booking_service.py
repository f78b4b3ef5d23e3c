"""Booking lifecycle service."""

import logging
from datetime import UTC, datetime
from typing import Literal
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.core.permissions import ActingUser, Permission, require_actor, require_permission
from app.domain.booking_state import assert_admin_target, assert_booking_transition
from app.models.booking import Booking
from app.models.package import Package
from app.schemas.booking import BookingCreate
from app.services.audit_service import audit_service
from app.services.store import store_errors

logger = logging.getLogger(__name__)

BookingScope = Literal["all", "mine"]


def _with_details(query):
    return query.options(selectinload(Booking.package), selectinload(Booking.user))


class BookingService:
    """Create bookings and move them through pending -> confirmed/rejected."""

    async def _load(self, db: AsyncSession, booking_id: UUID) -> Booking | None:
        result = await db.execute(
            _with_details(select(Booking))
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create_booking(
        self,
        db: AsyncSession,
        actor: ActingUser | None,
        data: BookingCreate,
    ) -> Booking:
        """Create a pending booking for the acting user.

        Any status sent by the caller is ignored. The total is the package
        price at booking time.
        """
        user = require_actor(actor, "book a package").require(Permission.CREATE_BOOKING)

        if data.travel_date < datetime.now(UTC).date():
            raise ValidationError.for_field("travel_date", "Travel date cannot be in the past")

        async with store_errors("create booking"):
            package = await db.get(Package, data.package_id)
            if package is None:
                raise ValidationError.for_field(
                    "package_id", f"Package '{data.package_id}' does not exist"
                )

            booking = Booking(
                user_id=user.id,
                package_id=package.id,
                travel_date=data.travel_date,
                status="pending",
                payment_status="pending",
                payment_method=data.payment_method,
                payment_reference=data.payment_reference,
                total_amount=package.price,
            )
            db.add(booking)
            await db.flush()
            booking = await self._load(db, booking.id)

        logger.info(
            f"Booking {booking.id} created by user {user.id} "
            f"for package {package.id} on {booking.travel_date}"
        )
        return booking

    async def set_booking_status(
        self,
        db: AsyncSession,
        actor: ActingUser | None,
        booking_id: UUID,
        target: str,
    ) -> Booking:
        """Accept or reject a pending booking.

        The change is a single UPDATE guarded on the pending status; when two
        admins race on the same booking only the first one wins and the other
        gets InvalidTransitionError.
        """
        admin = require_permission(actor, Permission.SET_BOOKING_STATUS)
        assert_admin_target(target)

        async with store_errors("update booking status"):
            result = await db.execute(
                update(Booking)
                .where(Booking.id == booking_id, Booking.status == "pending")
                .values(status=target)
                .execution_options(synchronize_session=False)
            )
            if not result.rowcount:
                current = await db.scalar(select(Booking.status).where(Booking.id == booking_id))
                if current is None:
                    raise NotFoundError("Booking", str(booking_id))
                assert_booking_transition(current, target)

            audit_service.log_admin_action(
                db,
                admin,
                action="booking_status_change",
                resource_type="booking",
                resource_id=booking_id,
                old_values={"status": "pending"},
                new_values={"status": target},
            )
            await db.flush()
            booking = await self._load(db, booking_id)

        logger.info(f"Booking {booking_id} {target} by admin {admin.id}")
        return booking

    async def list_bookings(
        self,
        db: AsyncSession,
        actor: ActingUser | None,
        scope: BookingScope = "mine",
    ) -> tuple[list[Booking], int]:
        """Bookings visible to the actor and how many of them are pending.

        ``scope="all"`` is the admin dashboard: every booking, newest first.
        ``scope="mine"`` is the actor's own bookings by travel date, latest
        trip first.
        """
        if scope == "all":
            require_permission(actor, Permission.VIEW_ALL_BOOKINGS)
            query = _with_details(select(Booking)).order_by(Booking.created_at.desc())
            pending_query = select(func.count()).select_from(Booking)
        elif scope == "mine":
            user = require_actor(actor, "view bookings").require(Permission.VIEW_OWN_BOOKINGS)
            query = (
                _with_details(select(Booking))
                .where(Booking.user_id == user.id)
                .order_by(Booking.travel_date.desc(), Booking.created_at.desc())
            )
            pending_query = (
                select(func.count()).select_from(Booking).where(Booking.user_id == user.id)
            )
        else:
            raise ValidationError.for_field("scope", f"Unknown booking scope: {scope}")

        async with store_errors("list bookings"):
            result = await db.execute(query)
            pending = await db.scalar(pending_query.where(Booking.status == "pending")) or 0
        return list(result.scalars().all()), pending

    async def get_booking(
        self,
        db: AsyncSession,
        actor: ActingUser | None,
        booking_id: UUID,
    ) -> Booking:
        user = require_actor(actor, "view bookings")
        async with store_errors("load booking"):
            booking = await self._load(db, booking_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        if booking.user_id != user.id and not user.can(Permission.VIEW_ALL_BOOKINGS):
            raise AuthorizationError("You don't have permission to access this booking")
        return booking


booking_service = BookingService()
