"""Pytest configuration and fixtures for KitchenOps tests.

Each test gets a fresh in-memory SQLite database (aiosqlite) with every
table created from the models, plus a property with one admin and one
staff member.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401  (register tables on Base.metadata)
from app.auth.jwt import create_access_token
from app.database import Base, get_db
from app.main import app
from app.models.public.property import MembershipRole, Property, PropertyMembership
from app.models.public.user import User


# ── Test Database Setup ──────────────────────────────────────────

@pytest_asyncio.fixture
async def test_engine():
    """In-memory database shared by every connection of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Test client with the database dependency pointed at `db_session`."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ── Test Data Fixtures ───────────────────────────────────────────

@pytest_asyncio.fixture
async def test_property(db_session: AsyncSession) -> Property:
    prop = Property(name="Test Kitchen")
    db_session.add(prop)
    await db_session.flush()
    return prop


@pytest_asyncio.fixture
async def other_property(db_session: AsyncSession) -> Property:
    prop = Property(name="Other Kitchen")
    db_session.add(prop)
    await db_session.flush()
    return prop


async def _member(
    db: AsyncSession, prop: Property, email: str, name: str | None, role: MembershipRole,
) -> User:
    user = User(email=email, name=name, is_active=True)
    db.add(user)
    await db.flush()
    db.add(PropertyMembership(property_id=prop.id, user_id=user.id, role=role, is_active=True))
    await db.flush()
    return user


@pytest_asyncio.fixture
async def test_admin(db_session: AsyncSession, test_property: Property) -> User:
    return await _member(
        db_session, test_property, "chef@example.com", "Head Chef", MembershipRole.PROPERTY_ADMIN,
    )


@pytest_asyncio.fixture
async def test_staff(db_session: AsyncSession, test_property: Property) -> User:
    # No name: labels fall back to the email
    return await _member(
        db_session, test_property, "cook@example.com", None, MembershipRole.STAFF,
    )


@pytest.fixture
def admin_headers(test_admin: User, test_property: Property) -> dict:
    token = create_access_token(user_id=test_admin.id, property_id=test_property.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def staff_headers(test_staff: User, test_property: Property) -> dict:
    token = create_access_token(user_id=test_staff.id, property_id=test_property.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def outsider_headers(test_staff: User, other_property: Property) -> dict:
    """Valid session for a property the user does not belong to."""
    token = create_access_token(user_id=test_staff.id, property_id=other_property.id)
    return {"Authorization": f"Bearer {token}"}


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "api: API endpoint tests")
    config.addinivalue_line("markers", "integration: Integration tests")
