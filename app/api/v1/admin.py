"""Admin panel endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_optional_actor
from app.core.permissions import ActingUser
from app.models.booking import Booking
from app.schemas.admin import AuditLogListResponse, AuditLogResponse
from app.schemas.booking import BookingDetailResponse, BookingListResponse, BookingStatusUpdate
from app.services.audit_service import audit_service
from app.services.booking_service import booking_service

router = APIRouter()


# ============ BOOKINGS ============


@router.get("/bookings", response_model=BookingListResponse)
async def list_all_bookings(
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingListResponse:
    """Get every booking, newest first, with the pending count."""
    bookings, pending = await booking_service.list_bookings(db, actor, scope="all")
    return BookingListResponse(
        bookings=[BookingDetailResponse.model_validate(b) for b in bookings],
        total=len(bookings),
        pending=pending,
    )


@router.post("/bookings/{booking_id}/status", response_model=BookingDetailResponse)
async def set_booking_status(
    booking_id: UUID,
    update: BookingStatusUpdate,
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Confirm or reject a pending booking."""
    return await booking_service.set_booking_status(db, actor, booking_id, update.status)


# ============ AUDIT LOGS ============


@router.get("/audit-logs", response_model=AuditLogListResponse)
async def get_audit_logs(
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1, le=200),
) -> AuditLogListResponse:
    """Get the admin audit trail, newest first."""
    logs, total = await audit_service.list_logs(db, actor, page=page, page_size=page_size)
    return AuditLogListResponse(
        logs=[AuditLogResponse.model_validate(log) for log in logs],
        total=total,
        page=page,
        page_size=page_size,
    )
