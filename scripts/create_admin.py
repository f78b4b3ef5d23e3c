#!/usr/bin/env python3
"""Grant or revoke the admin flag on a profile.

Profiles are created on a user's first authenticated request, so the user
must have signed in once before they can be promoted.
"""

import asyncio
import sys

from sqlalchemy import select

from app.core.security import create_access_token
from app.database import get_db_context
from app.models.profile import Profile


async def set_admin(email: str, is_admin: bool = True, with_token: bool = False) -> int:
    """Set the admin flag for the profile with the given email."""
    async with get_db_context() as session:
        result = await session.execute(select(Profile).where(Profile.email == email))
        profile = result.scalar_one_or_none()

        if not profile:
            print(f"No profile found for {email}; sign in once to create it")
            return 1

        profile.is_admin = is_admin
        print(f"{'Granted' if is_admin else 'Revoked'} admin for {email} ({profile.id})")

        if with_token:
            token = create_access_token({"sub": str(profile.id), "email": profile.email})
            print(f"Access token: {token}")
    return 0


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Grant or revoke admin access")
    parser.add_argument("email", help="Email of an existing profile")
    parser.add_argument("--revoke", action="store_true", help="Remove admin access instead")
    parser.add_argument("--token", action="store_true", help="Print a short-lived access token")

    args = parser.parse_args()

    sys.exit(asyncio.run(set_admin(args.email, is_admin=not args.revoke, with_token=args.token)))
