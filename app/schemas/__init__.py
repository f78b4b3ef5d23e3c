"""Pydantic schemas for API validation."""

from app.schemas.admin import AuditLogListResponse, AuditLogResponse
from app.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
)
from app.schemas.favorite import FavoriteIdsResponse, FavoriteState
from app.schemas.package import PackageResponse, PackageSummary, PackageWrite
from app.schemas.profile import ProfileResponse, ProfileSummary
from app.schemas.review import (
    ReviewCreate,
    ReviewResponse,
    ReviewSummary,
    UserReviewResponse,
)

__all__ = [
    # Admin
    "AuditLogListResponse",
    "AuditLogResponse",
    # Booking
    "BookingCreate",
    "BookingDetailResponse",
    "BookingListResponse",
    "BookingResponse",
    "BookingStatusUpdate",
    # Favorite
    "FavoriteIdsResponse",
    "FavoriteState",
    # Package
    "PackageResponse",
    "PackageSummary",
    "PackageWrite",
    # Profile
    "ProfileResponse",
    "ProfileSummary",
    # Review
    "ReviewCreate",
    "ReviewResponse",
    "ReviewSummary",
    "UserReviewResponse",
]
