"""Shared fixtures: an in-memory SQLite database, seeded profiles and packages."""

from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.immutability import register_immutability_enforcement
from app.core.permissions import ActingUser
from app.database import Base, get_db
from app.models.package import Package
from app.models.profile import Profile
from tests.factories import make_package

register_immutability_enforcement()


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def user_profile(session_factory) -> Profile:
    async with session_factory() as session:
        profile = Profile(id=uuid4(), name="Asha Traveler", email="asha@example.com")
        session.add(profile)
        await session.commit()
    return profile


@pytest.fixture
async def other_profile(session_factory) -> Profile:
    async with session_factory() as session:
        profile = Profile(id=uuid4(), name="Ben Wanderer", email="ben@example.com")
        session.add(profile)
        await session.commit()
    return profile


@pytest.fixture
async def admin_profile(session_factory) -> Profile:
    async with session_factory() as session:
        profile = Profile(id=uuid4(), name="Ops Admin", email="admin@example.com", is_admin=True)
        session.add(profile)
        await session.commit()
    return profile


@pytest.fixture
def user(user_profile) -> ActingUser:
    return ActingUser(id=user_profile.id)


@pytest.fixture
def other_user(other_profile) -> ActingUser:
    return ActingUser(id=other_profile.id)


@pytest.fixture
def admin(admin_profile) -> ActingUser:
    return ActingUser(id=admin_profile.id, is_admin=True)


@pytest.fixture
async def package(session_factory) -> Package:
    async with session_factory() as session:
        package = make_package()
        session.add(package)
        await session.commit()
    return package


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    from app.main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
