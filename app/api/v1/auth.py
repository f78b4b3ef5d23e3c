"""Authentication endpoints.

Sign-up and sign-in happen at the identity provider; this API only
verifies its bearer tokens.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_current_profile
from app.models.profile import Profile
from app.schemas.profile import ProfileResponse

router = APIRouter()


@router.get("/me", response_model=ProfileResponse)
async def get_me(
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> Profile:
    """Get the current user's profile."""
    return profile
