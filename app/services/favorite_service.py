"""Favorite toggle service."""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.core.permissions import ActingUser, Permission, require_actor
from app.models.favorite import Favorite
from app.models.package import Package
from app.schemas.favorite import FavoriteState
from app.services.store import store_errors

logger = logging.getLogger(__name__)


class FavoriteService:
    """Presence-based favorites, at most one per (user, package)."""

    async def toggle_favorite(
        self,
        db: AsyncSession,
        actor: ActingUser | None,
        package_id: UUID,
    ) -> FavoriteState:
        """Flip the actor's favorite on a package.

        The presence check is the delete itself: if a row was removed the
        favorite is now absent, otherwise one is inserted. A concurrent
        insert of the same pair trips the unique constraint and is reported
        as present, so no duplicate row can appear.
        """
        user = require_actor(actor, "add favorites").require(Permission.MANAGE_FAVORITES)

        async with store_errors("update favorites"):
            removed = await db.execute(
                delete(Favorite).where(
                    Favorite.user_id == user.id,
                    Favorite.package_id == package_id,
                )
            )
            if removed.rowcount:
                logger.info(f"User {user.id} removed package {package_id} from favorites")
                return FavoriteState(package_id=package_id, present=False)

            if await db.get(Package, package_id) is None:
                raise NotFoundError("Package", str(package_id))

            try:
                async with db.begin_nested():
                    db.add(Favorite(user_id=user.id, package_id=package_id))
            except IntegrityError:
                logger.info(f"Favorite ({user.id}, {package_id}) already inserted concurrently")
                return FavoriteState(package_id=package_id, present=True)

        logger.info(f"User {user.id} added package {package_id} to favorites")
        return FavoriteState(package_id=package_id, present=True)

    async def is_favorite(
        self,
        db: AsyncSession,
        actor: ActingUser | None,
        package_id: UUID,
    ) -> bool:
        """Whether the actor has favorited the package; False when anonymous."""
        if actor is None:
            return False
        async with store_errors("load favorites"):
            found = await db.scalar(
                select(Favorite.id).where(
                    Favorite.user_id == actor.id,
                    Favorite.package_id == package_id,
                )
            )
        return found is not None

    async def list_favorite_package_ids(
        self,
        db: AsyncSession,
        actor: ActingUser | None,
    ) -> list[UUID]:
        user = require_actor(actor, "view favorites")
        async with store_errors("load favorites"):
            result = await db.execute(
                select(Favorite.package_id)
                .where(Favorite.user_id == user.id)
                .order_by(Favorite.created_at.desc())
            )
        return list(result.scalars().all())

    async def list_favorite_packages(
        self,
        db: AsyncSession,
        actor: ActingUser | None,
    ) -> list[Package]:
        """The actor's favorited packages, most recently favorited first."""
        user = require_actor(actor, "view favorites")
        async with store_errors("load favorites"):
            result = await db.execute(
                select(Package)
                .join(Favorite, Favorite.package_id == Package.id)
                .where(Favorite.user_id == user.id)
                .order_by(Favorite.created_at.desc())
            )
        return list(result.scalars().all())


favorite_service = FavoriteService()
