"""Favorite listing endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_optional_actor
from app.core.permissions import ActingUser
from app.models.package import Package
from app.schemas.favorite import FavoriteIdsResponse
from app.schemas.package import PackageResponse
from app.services.favorite_service import favorite_service

router = APIRouter()


@router.get("", response_model=list[PackageResponse])
async def list_favorite_packages(
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[Package]:
    """Get the current user's favorited packages."""
    return await favorite_service.list_favorite_packages(db, actor)


@router.get("/ids", response_model=FavoriteIdsResponse)
async def list_favorite_ids(
    actor: Annotated[ActingUser | None, Depends(get_optional_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FavoriteIdsResponse:
    package_ids = await favorite_service.list_favorite_package_ids(db, actor)
    return FavoriteIdsResponse(package_ids=package_ids)
