"""Review endpoints for the current user."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_optional_actor
from app.core.permissions import ActingUser
from app.models.review import Review
from app.schemas.review import UserReviewResponse
from app.services.review_service import review_service

router = APIRouter()


@router.get("/mine", response_model=list[UserReviewResponse])
async def list_my_reviews(
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[Review]:
    """Get reviews written by the current user."""
    return await review_service.list_user_reviews(db, actor)
