"""
Shared test fixtures for Palyrenet API tests.

Provides database session management, test clients, and user fixtures.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.auth.jwt import create_access_token
from app.auth.password import hash_password
from app.config import settings
from app.database import Base, get_db
from app.main import app
from app.middleware.rate_limit import reset_limiter

# Import models so they're registered with Base.metadata before table creation
from app.models.user import User, UserRoleName

# Test database URL (in-memory SQLite unless overridden)
TEST_DATABASE_URL = settings.test_database_url

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
    echo=False,
)


# pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN
@event.listens_for(test_engine.sync_engine, "connect")
def _sqlite_on_connect(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@event.listens_for(test_engine.sync_engine, "begin")
def _sqlite_on_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


# --- Rate Limiter Reset Fixture ---


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Reset rate limiter before each test to ensure test isolation."""
    reset_limiter()
    yield


# --- Database Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create tables before each test function, drop after.
    Provides isolated database state per test.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client configured for testing.
    Overrides database dependency with test session.
    """

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True,
    ) as client:
        yield client

    app.dependency_overrides.clear()


# --- Authentication Helper Fixtures ---


@pytest.fixture
def auth_headers():
    """Factory fixture for creating bearer token headers."""

    def _auth_headers(user: dict[str, Any]) -> dict[str, str]:
        return {"Authorization": f"Bearer {user['token']}"}

    return _auth_headers


@pytest.fixture
def valid_registration_data() -> dict[str, str]:
    """Valid user registration payload."""
    return {
        "username": "newuser",
        "email": "newuser@example.com",
        "password": "SecurePassword123",
        "full_name": "New User",
        "university": "Birzeit University",
    }


# --- User Fixtures ---


async def _create_user(
    db_session: AsyncSession,
    username: str,
    email: str,
    password: str,
    role: UserRoleName = UserRoleName.STUDENT,
    **fields: Any,
) -> dict[str, Any]:
    """Helper to create a user in the database and issue a token for them."""
    user = User(
        username=username,
        email=email.lower(),
        password_hash=hash_password(password),
        full_name=username.title(),
        role=role.value,
        **fields,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)

    return {
        "user_id": str(user.id),
        "username": user.username,
        "email": user.email,
        "password": password,
        "role": user.role,
        "token": create_access_token(str(user.id), user.role),
    }


@pytest.fixture
def create_user(db_session: AsyncSession):
    """Factory fixture for creating extra users inside a test."""

    async def _factory(username: str, role: UserRoleName = UserRoleName.STUDENT, **fields: Any):
        return await _create_user(
            db_session,
            username=username,
            email=f"{username}@example.com",
            password="ExtraPassword123",
            role=role,
            **fields,
        )

    return _factory


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> dict[str, Any]:
    """Create a standard student account with a valid access token."""
    return await _create_user(
        db_session,
        username="testuser",
        email="test@example.com",
        password="TestPassword123",
        university="Birzeit University",
    )


@pytest_asyncio.fixture
async def test_admin(db_session: AsyncSession) -> dict[str, Any]:
    """Create an admin user."""
    return await _create_user(
        db_session,
        username="adminuser",
        email="admin@example.com",
        password="AdminPassword123",
        role=UserRoleName.ADMIN,
    )


@pytest_asyncio.fixture
async def second_user(db_session: AsyncSession) -> dict[str, Any]:
    """Create a second user for testing ownership/authorization scenarios."""
    return await _create_user(
        db_session,
        username="seconduser",
        email="second@example.com",
        password="SecondPassword123",
        role=UserRoleName.RESEARCHER,
    )


# --- Utility Fixtures ---


@pytest.fixture
def frozen_time():
    """
    Fixture for time-based testing using freezegun.

    Usage:
        with frozen_time("2026-02-01 12:00:00"):
            # time is frozen
    """
    from freezegun import freeze_time

    return freeze_time
