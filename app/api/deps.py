"""API dependencies for authentication and common operations."""

import logging
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError
from app.core.permissions import ActingUser
from app.core.security import claims_display_name, verify_token
from app.database import get_db
from app.models.profile import Profile

logger = logging.getLogger(__name__)

# Missing credentials are not an error here; services decide who may act.
security = HTTPBearer(auto_error=False)


async def ensure_profile(db: AsyncSession, payload: dict[str, Any]) -> Profile:
    """Load the token's profile, creating a non-admin one on first sight."""
    try:
        user_id = UUID(str(payload["sub"]))
    except ValueError:
        raise AuthenticationError("Invalid token subject")

    profile = await db.get(Profile, user_id)
    if profile is not None:
        return profile

    try:
        async with db.begin_nested():
            profile = Profile(
                id=user_id,
                name=claims_display_name(payload),
                email=payload.get("email"),
                is_admin=False,
            )
            db.add(profile)
    except IntegrityError:
        # A concurrent first request created it
        profile = await db.get(Profile, user_id)
        if profile is None:
            raise
        return profile

    logger.info(f"Created profile for user {user_id}")
    return profile


async def get_optional_profile(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Profile | None:
    """Profile of the bearer, or None for anonymous requests.

    A token that is present but invalid is rejected rather than ignored.
    """
    if not credentials:
        return None

    payload = verify_token(credentials.credentials)
    profile = await ensure_profile(db, payload)
    request.state.user_id = profile.id
    return profile


async def get_current_profile(
    profile: Annotated[Profile | None, Depends(get_optional_profile)],
) -> Profile:
    """Get the current authenticated user's profile."""
    if profile is None:
        raise AuthenticationError()
    return profile


async def get_optional_actor(
    profile: Annotated[Profile | None, Depends(get_optional_profile)],
) -> ActingUser | None:
    """Acting-user capability for the request, None when anonymous."""
    if profile is None:
        return None
    return ActingUser(id=profile.id, is_admin=profile.is_admin)
