"""Review-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from app.schemas.profile import ProfileSummary


class ReviewCreate(BaseModel):
    """Schema for creating a review.

    Range and emptiness checks happen in the review service. The rating is
    strict so JSON booleans and numeric strings are refused.
    """

    rating: StrictInt
    comment: str = Field(default="", max_length=2000)


class ReviewResponse(BaseModel):
    """Schema for review response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    package_id: UUID
    rating: int
    comment: str
    created_at: datetime

    # Reviewer info (for display)
    user: ProfileSummary | None = None


class ReviewedPackage(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str


class UserReviewResponse(ReviewResponse):
    """A review listed on its author's dashboard."""

    package: ReviewedPackage


class ReviewSummary(BaseModel):
    """Schema for review summary statistics."""

    total_reviews: int
    average_rating: float
    stars: int
    rating_breakdown: dict[int, int]  # {1: count, 2: count, ...}
