"""Core utilities and security modules."""

from app.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    PackageInUseError,
    RateLimitExceeded,
    StoreError,
    ValidationError,
)
from app.core.permissions import ActingUser, Permission, UserRole, require_actor
from app.core.security import create_access_token, verify_token

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "InvalidTransitionError",
    "NotFoundError",
    "PackageInUseError",
    "RateLimitExceeded",
    "StoreError",
    "ValidationError",
    "ActingUser",
    "Permission",
    "UserRole",
    "require_actor",
    "create_access_token",
    "verify_token",
]
