"""Shared pytest fixtures and configuration.

This module provides common fixtures used across all test types.
"""

import uuid
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.api.main import app
from cleanconnect.api.middleware.auth import auth_middleware
from cleanconnect.api.middleware.rate_limiter import auth_rate_limiter
from cleanconnect.config import Settings, get_settings
from cleanconnect.models.user import UserDB
from cleanconnect.services.database import DatabaseManager, initialize_database, shutdown_database
from cleanconnect.services.passwords import hash_password
from cleanconnect.services.tokens import TokenService

TEST_PASSWORD = "password123"

_UNSET_ENV = (
    "SMTP_HOST",
    "ASSISTANT_CONFIG_FILE",
    "ASSISTANT_BASE_URL",
    "ASSISTANT_API_KEY",
    "ALLOW_ADMIN_SEEDING",
)


@pytest.fixture(autouse=True)
def test_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Settings:
    """Point every test at its own SQLite file and fast password hashing."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/cleanconnect_test.db")
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("FRONTEND_URL", "http://frontend.test")
    for name in _UNSET_ENV:
        monkeypatch.delenv(name, raising=False)

    get_settings.cache_clear()
    auth_middleware.reset()
    auth_rate_limiter.reset()
    # Tests register many accounts from one client address
    monkeypatch.setattr(auth_rate_limiter, "burst_size", 1000)

    yield get_settings()

    app.dependency_overrides.clear()
    get_settings.cache_clear()
    auth_middleware.reset()


@pytest.fixture
async def db_manager(test_settings: Settings) -> AsyncGenerator[DatabaseManager, None]:
    """Initialize the global database manager with fresh tables."""
    manager = initialize_database()
    await manager.create_tables()

    yield manager

    await shutdown_database()


@pytest.fixture
async def async_db_session(db_manager: DatabaseManager) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session for testing."""
    async with db_manager.session() as session:
        yield session


@pytest.fixture
async def client(db_manager: DatabaseManager) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def register(client: AsyncClient):
    """Register an account through the API and return the response body."""

    async def _register(email: str, role: str = "client", **fields) -> dict:
        body = {
            "email": email,
            "password": TEST_PASSWORD,
            "role": role,
            "fullName": email.split("@")[0].title(),
            **fields,
        }
        response = await client.post("/api/auth/register", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def create_admin(db_manager: DatabaseManager):
    """Insert an admin account directly and return ``(user_id, token)``."""

    async def _create(admin_role: str, email: str | None = None) -> tuple[uuid.UUID, str]:
        user_id = uuid.uuid4()
        async with db_manager.session() as session:
            session.add(
                UserDB(
                    id=user_id,
                    email=email or f"{admin_role.lower()}-{user_id.hex[:6]}@admin.test",
                    password_hash=hash_password(TEST_PASSWORD),
                    full_name=f"{admin_role} Admin",
                    role="admin",
                    is_admin=True,
                    admin_role=admin_role,
                )
            )
        token = TokenService().issue(str(user_id), "admin", is_admin=True, admin_role=admin_role)
        return user_id, token

    return _create

