"""Profile-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ProfileSummary(BaseModel):
    """Name and email shown next to bookings and reviews."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str | None
    email: str | None


class ProfileResponse(ProfileSummary):
    """Schema for the current user's profile."""

    is_admin: bool
    created_at: datetime
