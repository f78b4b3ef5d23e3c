"""Package-related Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PackageWrite(BaseModel):
    """Schema for creating or overwriting a package.

    Types only; content rules live in ``validate_package_fields`` so a
    failing request reports every offending field at once.
    """

    title: str = Field(default="", max_length=200)
    location: str = Field(default="", max_length=200)
    description: str = Field(default="", max_length=10000)
    price: Decimal | str | None = None
    duration: str = Field(default="", max_length=100)
    image_url: str | None = None


class PackageResponse(BaseModel):
    """Schema for package response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    location: str
    description: str
    price: Decimal
    duration: str
    image_url: str | None
    created_at: datetime
    updated_at: datetime


class PackageSummary(BaseModel):
    """Subset of package fields embedded in bookings and reviews."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    location: str
    price: Decimal
    image_url: str | None
