"""Favorite-related Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel


class FavoriteState(BaseModel):
    """Presence of a favorite after a toggle or lookup."""

    package_id: UUID
    present: bool


class FavoriteIdsResponse(BaseModel):
    """Package ids the current user has favorited."""

    package_ids: list[UUID]
