"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_optional_actor
from app.core.middleware import booking_limiter
from app.core.permissions import ActingUser
from app.models.booking import Booking
from app.schemas.booking import BookingCreate, BookingDetailResponse, BookingListResponse
from app.services.booking_service import booking_service

router = APIRouter()


@router.post("", response_model=BookingDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[None, Depends(booking_limiter)],
) -> Booking:
    """Book a package. New bookings are always pending."""
    return await booking_service.create_booking(db, actor, booking_data)


@router.get("", response_model=BookingListResponse)
async def list_my_bookings(
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingListResponse:
    """Get the current user's bookings, latest travel date first."""
    bookings, pending = await booking_service.list_bookings(db, actor, scope="mine")
    return BookingListResponse(
        bookings=[BookingDetailResponse.model_validate(b) for b in bookings],
        total=len(bookings),
        pending=pending,
    )


@router.get("/{booking_id}", response_model=BookingDetailResponse)
async def get_booking(
    booking_id: UUID,
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Get booking details."""
    return await booking_service.get_booking(db, actor, booking_id)
