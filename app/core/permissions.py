"""Role-based access control and the acting-user capability."""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from app.core.exceptions import AuthenticationError, AuthorizationError


class UserRole(str, Enum):
    """User roles in the system."""

    USER = "user"
    ADMIN = "admin"


class Permission(str, Enum):
    """System permissions."""

    # Catalog
    VIEW_PACKAGES = "view_packages"
    MANAGE_PACKAGES = "manage_packages"

    # User relations
    MANAGE_FAVORITES = "manage_favorites"
    CREATE_BOOKING = "create_booking"
    VIEW_OWN_BOOKINGS = "view_own_bookings"
    WRITE_REVIEW = "write_review"

    # Admin
    VIEW_ALL_BOOKINGS = "view_all_bookings"
    SET_BOOKING_STATUS = "set_booking_status"
    VIEW_AUDIT_LOGS = "view_audit_logs"


# Role to permissions mapping
ROLE_PERMISSIONS: dict[UserRole, set[Permission]] = {
    UserRole.USER: {
        Permission.VIEW_PACKAGES,
        Permission.MANAGE_FAVORITES,
        Permission.CREATE_BOOKING,
        Permission.VIEW_OWN_BOOKINGS,
        Permission.WRITE_REVIEW,
    },
    UserRole.ADMIN: {
        # Admins have all permissions
        perm for perm in Permission
    },
}


def has_permission(role: UserRole, permission: Permission) -> bool:
    """Check if a role has a specific permission."""
    return permission in ROLE_PERMISSIONS.get(role, set())


@dataclass(frozen=True)
class ActingUser:
    """The authenticated caller of a service operation.

    Passed explicitly into every operation; authorization is decided from
    this value alone.
    """

    id: UUID
    is_admin: bool = False

    @property
    def role(self) -> UserRole:
        return UserRole.ADMIN if self.is_admin else UserRole.USER

    def can(self, permission: Permission) -> bool:
        return has_permission(self.role, permission)

    def require(self, permission: Permission) -> "ActingUser":
        """Return self, or raise AuthorizationError when the permission is missing."""
        if not self.can(permission):
            raise AuthorizationError(
                f"Permission '{permission.value}' is required for this action"
            )
        return self


def require_actor(actor: ActingUser | None, action: str = "perform this action") -> ActingUser:
    """Return the actor, or raise AuthenticationError when there is no session."""
    if actor is None:
        raise AuthenticationError(f"You need to be signed in to {action}")
    return actor


def require_permission(actor: ActingUser | None, permission: Permission) -> ActingUser:
    """Authenticate then authorize in one step."""
    return require_actor(actor).require(permission)
