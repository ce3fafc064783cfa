"""
Test configuration and shared fixtures.
Uses an in-memory SQLite database; every test runs inside one session
that is rolled back afterwards.
"""
from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ["RATE_LIMIT_ENABLED"] = "false"

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from datetime import date, timedelta  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.security import create_access_token, hash_password  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import enable_sqlite_foreign_keys, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.activity import Activity, ActivityStatus  # noqa: E402
from app.models.user import User, UserRole  # noqa: E402

# ── Test database ─────────────────────────────────────────────────────────────
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(test_engine)

TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

TEST_PASSWORD = "Password1"

ActivityFactory = Callable[..., Awaitable[Activity]]


@pytest_asyncio.fixture(scope="session", loop_scope="session", autouse=True)
async def create_tables() -> AsyncGenerator[None, None]:
    """Create all tables once per test session."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def password_hash() -> str:
    """bcrypt is slow on purpose; hash the shared test password once."""
    return hash_password(TEST_PASSWORD)


@pytest_asyncio.fixture(loop_scope="session")
async def db() -> AsyncGenerator[AsyncSession, None]:
    """Provide a test database session that rolls back after each test."""
    async with TestSessionLocal() as session:
        try:
            yield session
            await session.rollback()
        finally:
            await session.close()


@pytest_asyncio.fixture(loop_scope="session")
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP test client with the test DB injected."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ── Users ─────────────────────────────────────────────────────────────────────

async def make_user(
    db: AsyncSession,
    *,
    email: str,
    hashed_password: str,
    name: str = "",
    role: str = UserRole.USER,
) -> User:
    user = User(email=email, name=name, hashed_password=hashed_password, role=role)
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(str(user.id), user.role)}"}


@pytest_asyncio.fixture(loop_scope="session")
async def volunteer(db: AsyncSession, password_hash: str) -> User:
    return await make_user(
        db, email="volunteer@example.com", hashed_password=password_hash, name="Vera Volunteer"
    )


@pytest_asyncio.fixture(loop_scope="session")
async def organizer(db: AsyncSession, password_hash: str) -> User:
    return await make_user(
        db, email="organizer@example.com", hashed_password=password_hash, name="Olga Organizer"
    )


@pytest_asyncio.fixture(loop_scope="session")
async def admin(db: AsyncSession, password_hash: str) -> User:
    return await make_user(
        db,
        email="admin@example.com",
        hashed_password=password_hash,
        name="Ada Admin",
        role=UserRole.ADMIN,
    )


@pytest.fixture
def volunteer_headers(volunteer: User) -> dict[str, str]:
    return bearer(volunteer)


@pytest.fixture
def organizer_headers(organizer: User) -> dict[str, str]:
    return bearer(organizer)


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return bearer(admin)


# ── Activities ────────────────────────────────────────────────────────────────

def activity_payload(**overrides: Any) -> dict[str, Any]:
    """A valid create-activity body dated one week from today."""
    payload: dict[str, Any] = {
        "title": "Beach Cleanup",
        "description": "Help us clean the beach and sort the collected waste.",
        "category": "environment",
        "date": (date.today() + timedelta(days=7)).isoformat(),
        "time": "09:30",
        "location": "North Beach",
        "max_applicants": 10,
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture(loop_scope="session")
async def make_activity(db: AsyncSession, organizer: User) -> ActivityFactory:
    """Insert activities straight into the session, approved unless told otherwise."""

    async def _make(**overrides: Any) -> Activity:
        fields: dict[str, Any] = {
            "title": "Beach Cleanup",
            "description": "Help us clean the beach and sort the collected waste.",
            "category": "environment",
            "date": date.today() + timedelta(days=7),
            "time": "09:30",
            "location": "North Beach",
            "max_applicants": 10,
            "current_applicants": 0,
            "status": ActivityStatus.APPROVED,
            "organizer_id": organizer.id,
            "organizer_name": organizer.name,
            "organizer_email": organizer.email,
        }
        fields.update(overrides)
        activity = Activity(**fields)
        db.add(activity)
        await db.flush()
        await db.refresh(activity)
        return activity

    return _make
