"""Package catalog endpoints, with per-package reviews and favorites."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_optional_actor
from app.config import settings
from app.core.middleware import favorite_limiter, review_limiter
from app.core.permissions import ActingUser
from app.models.package import Package
from app.models.review import Review
from app.schemas.favorite import FavoriteState
from app.schemas.package import PackageResponse, PackageWrite
from app.schemas.review import ReviewCreate, ReviewResponse, ReviewSummary
from app.services.favorite_service import favorite_service
from app.services.package_service import package_service
from app.services.review_service import review_service

router = APIRouter()


# ============ CATALOG ============


@router.get("", response_model=list[PackageResponse])
async def list_packages(
    db: Annotated[AsyncSession, Depends(get_db)],
    search: str | None = Query(default=None, max_length=200),
    limit: int | None = Query(default=None, ge=1, le=100),
) -> list[Package]:
    """List packages, newest first."""
    return await package_service.list_packages(db, search=search, limit=limit)


@router.get("/featured", response_model=list[PackageResponse])
async def list_featured_packages(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[Package]:
    """Get the newest packages for the home page."""
    return await package_service.list_packages(db, limit=settings.featured_package_count)


@router.get("/{package_id}", response_model=PackageResponse)
async def get_package(
    package_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Package:
    """Get package details."""
    return await package_service.get_package(db, package_id)


@router.post("", response_model=PackageResponse, status_code=status.HTTP_201_CREATED)
async def create_package(
    package_data: PackageWrite,
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Package:
    """Create a package (admin only)."""
    return await package_service.create_package(db, actor, package_data.model_dump())


@router.put("/{package_id}", response_model=PackageResponse)
async def update_package(
    package_id: UUID,
    package_data: PackageWrite,
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Package:
    """Overwrite a package (admin only)."""
    return await package_service.update_package(db, actor, package_id, package_data.model_dump())


@router.delete("/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_package(
    package_id: UUID,
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a package that has no bookings or reviews (admin only)."""
    await package_service.delete_package(db, actor, package_id)


# ============ REVIEWS ============


@router.get("/{package_id}/reviews", response_model=list[ReviewResponse])
async def list_package_reviews(
    package_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int | None = Query(default=None, ge=1, le=100),
) -> list[Review]:
    """Get reviews for a package, newest first."""
    await package_service.get_package(db, package_id)
    return await review_service.list_package_reviews(db, package_id, limit=limit)


@router.get("/{package_id}/reviews/summary", response_model=ReviewSummary)
async def get_review_summary(
    package_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReviewSummary:
    """Get average rating and rating breakdown for a package."""
    await package_service.get_package(db, package_id)
    return await review_service.review_summary(db, package_id)


@router.post(
    "/{package_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_review(
    package_id: UUID,
    review_data: ReviewCreate,
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[None, Depends(review_limiter)],
) -> Review:
    """Submit a review for a package."""
    return await review_service.submit_review(
        db, actor, package_id, review_data.rating, review_data.comment
    )


# ============ FAVORITES ============


@router.get("/{package_id}/favorite", response_model=FavoriteState)
async def get_favorite_state(
    package_id: UUID,
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FavoriteState:
    """Whether the current user has favorited the package."""
    present = await favorite_service.is_favorite(db, actor, package_id)
    return FavoriteState(package_id=package_id, present=present)


@router.post("/{package_id}/favorite/toggle", response_model=FavoriteState)
async def toggle_favorite(
    package_id: UUID,
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[None, Depends(favorite_limiter)],
) -> FavoriteState:
    """Add or remove the package from the current user's favorites."""
    return await favorite_service.toggle_favorite(db, actor, package_id)
