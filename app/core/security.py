"""Verification of identity-provider access tokens."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from app.config import settings
from app.core.exceptions import AuthenticationError


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token.

    Production tokens come from the identity provider; this is for local
    tooling and tests, and produces the same claim layout.
    """
    to_encode = data.copy()
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    if settings.jwt_audience:
        to_encode.setdefault("aud", settings.jwt_audience)
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode an access token."""
    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {str(e)}")
    if not payload.get("sub"):
        raise AuthenticationError("Invalid token payload")
    return payload


def claims_display_name(payload: dict[str, Any]) -> str | None:
    """Pick a display name from the token's user metadata, if any."""
    metadata = payload.get("user_metadata") or {}
    for key in ("name", "full_name"):
        value = metadata.get(key)
        if value:
            return str(value)
    return None
