"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.package import PackageSummary
from app.schemas.profile import ProfileSummary


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    package_id: UUID
    travel_date: date
    payment_method: str | None = Field(None, max_length=50)
    payment_reference: str | None = Field(None, max_length=100)
    # Accepted for compatibility with older clients; always ignored.
    status: str | None = None


class BookingStatusUpdate(BaseModel):
    """Schema for an admin accepting or rejecting a booking."""

    status: Literal["confirmed", "rejected"]


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    package_id: UUID
    travel_date: date

    # Status
    status: str
    payment_status: str
    payment_method: str | None
    payment_reference: str | None
    total_amount: Decimal

    # Timestamps
    created_at: datetime
    updated_at: datetime


class BookingDetailResponse(BookingResponse):
    """Booking with the package and booker it refers to."""

    package: PackageSummary
    user: ProfileSummary


class BookingListResponse(BaseModel):
    """Schema for booking list with the pending count."""

    bookings: list[BookingDetailResponse]
    total: int
    pending: int
