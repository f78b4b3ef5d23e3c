"""Package catalog service: public reads and admin-only writes."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, PackageInUseError
from app.core.permissions import ActingUser, Permission, require_permission
from app.models.booking import Booking
from app.models.favorite import Favorite
from app.models.package import Package
from app.models.review import Review
from app.services.audit_service import audit_service
from app.services.store import store_errors
from app.utils.validators import validate_package_fields

logger = logging.getLogger(__name__)

# Every field an admin edits; updates overwrite all of them.
MUTABLE_FIELDS = ("title", "location", "description", "price", "duration", "image_url")


def package_snapshot(package: Package) -> dict[str, Any]:
    """JSON-safe copy of the mutable fields, for the audit trail."""
    values = {name: getattr(package, name) for name in MUTABLE_FIELDS}
    values["price"] = str(values["price"])
    return values


class PackageService:
    """Catalog reads for everyone, create/update/delete for admins."""

    async def list_packages(
        self,
        db: AsyncSession,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[Package]:
        """Newest-first packages, optionally filtered by a search term.

        The term matches title, location or description, case-insensitively.
        """
        query = select(Package)
        term = (search or "").strip()
        if term:
            query = query.where(
                or_(
                    Package.title.icontains(term, autoescape=True),
                    Package.location.icontains(term, autoescape=True),
                    Package.description.icontains(term, autoescape=True),
                )
            )
        query = query.order_by(Package.created_at.desc())
        if limit:
            query = query.limit(limit)

        async with store_errors("list packages"):
            result = await db.execute(query)
        return list(result.scalars().all())

    async def get_package(self, db: AsyncSession, package_id: UUID) -> Package:
        async with store_errors("load package"):
            package = await db.get(Package, package_id)
        if not package:
            raise NotFoundError("Package", str(package_id))
        return package

    async def create_package(
        self,
        db: AsyncSession,
        actor: ActingUser | None,
        fields: dict[str, Any],
    ) -> Package:
        """Create a package after validating every field."""
        admin = require_permission(actor, Permission.MANAGE_PACKAGES)
        cleaned = validate_package_fields(fields)

        package = Package(**cleaned)
        async with store_errors("create package"):
            db.add(package)
            await db.flush()
            audit_service.log_admin_action(
                db,
                admin,
                action="package_create",
                resource_type="package",
                resource_id=package.id,
                new_values=package_snapshot(package),
            )
            await db.flush()

        logger.info(f"Package {package.id} created by admin {admin.id}")
        return package

    async def update_package(
        self,
        db: AsyncSession,
        actor: ActingUser | None,
        package_id: UUID,
        fields: dict[str, Any],
    ) -> Package:
        """Overwrite every mutable field of an existing package."""
        admin = require_permission(actor, Permission.MANAGE_PACKAGES)
        cleaned = validate_package_fields(fields)
        package = await self.get_package(db, package_id)

        old_values = package_snapshot(package)
        for name in MUTABLE_FIELDS:
            setattr(package, name, cleaned[name])

        async with store_errors("update package"):
            audit_service.log_admin_action(
                db,
                admin,
                action="package_update",
                resource_type="package",
                resource_id=package.id,
                old_values=old_values,
                new_values=package_snapshot(package),
            )
            await db.flush()
            await db.refresh(package)

        logger.info(f"Package {package.id} updated by admin {admin.id}")
        return package

    async def delete_package(
        self,
        db: AsyncSession,
        actor: ActingUser | None,
        package_id: UUID,
    ) -> None:
        """Delete a package.

        Favorites go with it. Bookings and reviews are never removed, so a
        package that still has either is refused with PackageInUseError.
        """
        admin = require_permission(actor, Permission.MANAGE_PACKAGES)
        package = await self.get_package(db, package_id)

        async with store_errors("delete package"):
            bookings = await db.scalar(
                select(func.count()).select_from(Booking).where(Booking.package_id == package_id)
            ) or 0
            reviews = await db.scalar(
                select(func.count()).select_from(Review).where(Review.package_id == package_id)
            ) or 0
        if bookings or reviews:
            raise PackageInUseError(str(package_id), bookings, reviews)

        old_values = package_snapshot(package)
        async with store_errors("delete package"):
            removed = await db.execute(delete(Favorite).where(Favorite.package_id == package_id))
            await db.delete(package)
            audit_service.log_admin_action(
                db,
                admin,
                action="package_delete",
                resource_type="package",
                resource_id=package_id,
                old_values=old_values,
                new_values={"favorites_removed": removed.rowcount},
            )
            await db.flush()

        logger.info(
            f"Package {package_id} deleted by admin {admin.id} "
            f"({removed.rowcount} favorite(s) removed)"
        )


package_service = PackageService()
