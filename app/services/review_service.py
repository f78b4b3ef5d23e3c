"""Review submission and rating statistics."""

import logging
import math
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import NotFoundError
from app.core.permissions import ActingUser, Permission, require_actor
from app.models.package import Package
from app.models.review import Review
from app.schemas.review import ReviewSummary
from app.services.store import store_errors
from app.utils.validators import MAX_RATING, MIN_RATING, normalize_comment, validate_rating

logger = logging.getLogger(__name__)


def star_rating(average: float) -> int:
    """Whole stars for an average rating, rounding halves up (4.5 -> 5)."""
    return math.floor(average + 0.5)


class ReviewService:
    """Append-only reviews and the statistics derived from them."""

    async def submit_review(
        self,
        db: AsyncSession,
        actor: ActingUser | None,
        package_id: UUID,
        rating: int,
        comment: str,
    ) -> Review:
        """Append a review for a package.

        Args:
            db: Database session
            actor: Reviewing user
            package_id: Package being reviewed
            rating: Whole number from 1 to 5, never clamped
            comment: Free text, stored trimmed

        Returns:
            The stored review with its author loaded

        Raises:
            AuthenticationError: No signed-in user
            ValidationError: Empty comment or rating out of range
            NotFoundError: Unknown package
        """
        user = require_actor(actor, "write a review").require(Permission.WRITE_REVIEW)
        text = normalize_comment(comment)
        rating = validate_rating(rating)

        async with store_errors("submit review"):
            if await db.get(Package, package_id) is None:
                raise NotFoundError("Package", str(package_id))

            review = Review(user_id=user.id, package_id=package_id, rating=rating, comment=text)
            db.add(review)
            await db.flush()

            result = await db.execute(
                select(Review)
                .options(selectinload(Review.user))
                .where(Review.id == review.id)
                .execution_options(populate_existing=True)
            )
            review = result.scalar_one()

        logger.info(f"Review {review.id} ({rating}/5) submitted by user {user.id} for package {package_id}")
        return review

    async def average_rating(self, db: AsyncSession, package_id: UUID) -> float:
        """Mean rating of a package, 0.0 when it has no reviews."""
        async with store_errors("load ratings"):
            average = await db.scalar(
                select(func.avg(Review.rating)).where(Review.package_id == package_id)
            )
        return float(average) if average is not None else 0.0

    async def review_summary(self, db: AsyncSession, package_id: UUID) -> ReviewSummary:
        async with store_errors("load ratings"):
            result = await db.execute(
                select(Review.rating, func.count())
                .where(Review.package_id == package_id)
                .group_by(Review.rating)
            )
            counts = dict(result.all())

        breakdown = {stars: counts.get(stars, 0) for stars in range(MIN_RATING, MAX_RATING + 1)}
        total = sum(breakdown.values())
        average = sum(stars * n for stars, n in breakdown.items()) / total if total else 0.0

        return ReviewSummary(
            total_reviews=total,
            average_rating=round(average, 2),
            stars=star_rating(average),
            rating_breakdown=breakdown,
        )

    async def list_package_reviews(
        self,
        db: AsyncSession,
        package_id: UUID,
        limit: int | None = None,
    ) -> list[Review]:
        """Reviews of a package, newest first, with reviewer names."""
        query = (
            select(Review)
            .options(selectinload(Review.user))
            .where(Review.package_id == package_id)
            .order_by(Review.created_at.desc())
        )
        if limit:
            query = query.limit(limit)
        async with store_errors("list reviews"):
            result = await db.execute(query)
        return list(result.scalars().all())

    async def list_user_reviews(self, db: AsyncSession, actor: ActingUser | None) -> list[Review]:
        user = require_actor(actor, "view your reviews")
        async with store_errors("list reviews"):
            result = await db.execute(
                select(Review)
                .options(selectinload(Review.user), selectinload(Review.package))
                .where(Review.user_id == user.id)
                .order_by(Review.created_at.desc())
            )
        return list(result.scalars().all())


review_service = ReviewService()
