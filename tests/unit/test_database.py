"""Unit tests for the database manager."""

import uuid

import pytest
from sqlalchemy import select

from cleanconnect.models.user import UserDB
from cleanconnect.services.database import DatabaseManager, to_async_url


@pytest.mark.unit
class TestToAsyncUrl:
    """Unit tests for driver rewriting."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("postgres://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
            ("postgresql://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
            ("sqlite:///app.db", "sqlite+aiosqlite:///app.db"),
            ("postgresql+asyncpg://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
        ],
    )
    def test_rewrites_to_async_driver(self, url: str, expected: str) -> None:
        assert to_async_url(url) == expected


@pytest.mark.unit
class TestInMemoryDatabase:
    """Unit tests for an in-memory SQLite database."""

    @pytest.mark.asyncio
    async def test_tables_and_rows_survive_across_sessions(self) -> None:
        """Test that every session talks to the same in-memory database."""
        manager = DatabaseManager("sqlite+aiosqlite:///:memory:")
        user_id = uuid.uuid4()
        try:
            await manager.create_tables()
            async with manager.session() as session:
                session.add(UserDB(id=user_id, email="mem@test.ng", password_hash="x", role="client"))

            async with manager.session() as session:
                stored = (await session.execute(select(UserDB).where(UserDB.id == user_id))).scalar_one()

            assert stored.email == "mem@test.ng"
            assert await manager.health_check()
        finally:
            await manager.close()
