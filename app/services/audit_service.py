"""Admin audit trail service."""

from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.permissions import ActingUser, Permission, require_permission
from app.models.admin import AuditLog
from app.services.store import store_errors


class AuditService:
    """Service for append-only admin audit logging."""

    # Admin actions that are recorded
    ADMIN_ACTIONS = {
        "package_create",
        "package_update",
        "package_delete",
        "booking_status_change",
    }

    def log_admin_action(
        self,
        db: AsyncSession,
        actor: ActingUser,
        action: str,
        resource_type: str,
        resource_id: UUID,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Record an admin action in the caller's transaction.

        Args:
            db: Database session
            actor: Admin performing the action
            action: Action name (e.g., "package_update")
            resource_type: Resource type (e.g., "package", "booking")
            resource_id: Resource ID
            old_values: Previous state
            new_values: New state

        Returns:
            Created audit log entry
        """
        if action not in self.ADMIN_ACTIONS:
            raise ValueError(f"Unknown audit action: {action}")
        audit = AuditLog(
            user_id=actor.id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            old_values=old_values,
            new_values=new_values,
        )
        db.add(audit)
        return audit

    async def list_logs(
        self,
        db: AsyncSession,
        actor: ActingUser | None,
        page: int = 1,
        page_size: int = 50,
    ) -> tuple[list[AuditLog], int]:
        """Newest-first page of audit entries and the total count."""
        require_permission(actor, Permission.VIEW_AUDIT_LOGS)

        offset = (page - 1) * page_size
        async with store_errors("load audit logs"):
            total = await db.scalar(select(func.count()).select_from(AuditLog)) or 0
            result = await db.execute(
                select(AuditLog)
                .order_by(AuditLog.created_at.desc())
                .offset(offset)
                .limit(page_size)
            )
        return list(result.scalars().all()), total


audit_service = AuditService()
