"""Favorite toggle tests."""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from app.core.exceptions import AuthenticationError, NotFoundError
from app.models.favorite import Favorite
from app.services.favorite_service import favorite_service


async def count_favorites(db) -> int:
    return await db.scalar(select(func.count()).select_from(Favorite))


class TestToggleFavorite:
    """Presence flips on every call and never duplicates."""

    async def test_first_toggle_adds(self, db, user, package):
        state = await favorite_service.toggle_favorite(db, user, package.id)

        assert state.present is True
        assert state.package_id == package.id
        assert await count_favorites(db) == 1

    async def test_second_toggle_removes(self, db, user, package):
        await favorite_service.toggle_favorite(db, user, package.id)
        state = await favorite_service.toggle_favorite(db, user, package.id)

        assert state.present is False
        assert await count_favorites(db) == 0

    async def test_toggle_is_an_involution(self, db, user, package):
        before = await favorite_service.is_favorite(db, user, package.id)
        await favorite_service.toggle_favorite(db, user, package.id)
        await favorite_service.toggle_favorite(db, user, package.id)

        assert await favorite_service.is_favorite(db, user, package.id) == before

    async def test_at_most_one_row_per_pair(self, db, user, package):
        for _ in range(5):
            await favorite_service.toggle_favorite(db, user, package.id)

        assert await count_favorites(db) == 1

    async def test_favorites_are_per_user(self, db, user, other_user, package):
        await favorite_service.toggle_favorite(db, user, package.id)

        assert await favorite_service.is_favorite(db, user, package.id) is True
        assert await favorite_service.is_favorite(db, other_user, package.id) is False

    async def test_anonymous_is_rejected_without_mutation(self, db, package):
        with pytest.raises(AuthenticationError) as exc_info:
            await favorite_service.toggle_favorite(db, None, package.id)

        assert exc_info.value.status_code == 401
        assert await count_favorites(db) == 0

    async def test_unknown_package(self, db, user):
        with pytest.raises(NotFoundError):
            await favorite_service.toggle_favorite(db, user, uuid4())

        assert await count_favorites(db) == 0


class TestFavoriteReads:
    """Listing favorites for hearts and the dashboard."""

    async def test_anonymous_is_never_a_favorite(self, db, package):
        assert await favorite_service.is_favorite(db, None, package.id) is False

    async def test_list_ids_and_packages(self, db, user, package):
        await favorite_service.toggle_favorite(db, user, package.id)

        ids = await favorite_service.list_favorite_package_ids(db, user)
        packages = await favorite_service.list_favorite_packages(db, user)

        assert ids == [package.id]
        assert [p.title for p in packages] == ["Bali Escape"]

    async def test_list_requires_sign_in(self, db):
        with pytest.raises(AuthenticationError):
            await favorite_service.list_favorite_package_ids(db, None)
