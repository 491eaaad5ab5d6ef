"""Tests for database initialization and session handling."""

import pytest
from sqlalchemy import inspect, text

from legal_profile.core import database
from legal_profile.core.database import (
    close_database,
    get_db_session,
    health_check,
    init_database,
)
from legal_profile.models.user import User


@pytest.fixture
async def memory_db():
    await init_database("sqlite+aiosqlite:///:memory:")
    yield
    await close_database()


class TestInitDatabase:
    @pytest.mark.asyncio
    async def test_creates_tables(self, memory_db):
        async with database._engine.connect() as conn:
            tables = await conn.run_sync(lambda c: inspect(c).get_table_names())

        assert {"users", "general_laws", "censor_rules"} <= set(tables)

    @pytest.mark.asyncio
    async def test_creates_parent_directory_for_file_database(self, tmp_path):
        db_path = tmp_path / "nested" / "legal_profile.db"

        await init_database(f"sqlite+aiosqlite:///{db_path}")
        try:
            assert db_path.parent.is_dir()
        finally:
            await close_database()

    @pytest.mark.asyncio
    async def test_close_resets_state(self, memory_db):
        await close_database()
        assert database._engine is None
        assert database._session_factory is None


class TestGetDbSession:
    @pytest.mark.asyncio
    async def test_session_round_trip(self, memory_db):
        async with get_db_session() as session:
            session.add(User(name="Rob Smith", email="rob@localhost"))
            await session.commit()

        async with get_db_session() as session:
            result = await session.execute(text("SELECT COUNT(*) FROM users"))
            assert result.scalar() == 1

    @pytest.mark.asyncio
    async def test_error_rolls_back_and_reraises(self, memory_db):
        with pytest.raises(RuntimeError):
            async with get_db_session() as session:
                session.add(User(name="Rob Smith", email="rob@localhost"))
                await session.flush()
                raise RuntimeError("boom")

        async with get_db_session() as session:
            result = await session.execute(text("SELECT COUNT(*) FROM users"))
            assert result.scalar() == 0

    @pytest.mark.asyncio
    async def test_savepoint_rollback(self, memory_db):
        async with get_db_session() as session:
            session.add(User(name="Rob Smith", email="rob@localhost"))
            await session.flush()
            with pytest.raises(RuntimeError):
                async with session.begin_nested():
                    session.add(User(name="Ana Lopez", email="ana@localhost"))
                    await session.flush()
                    raise RuntimeError("inner")
            await session.commit()

        async with get_db_session() as session:
            result = await session.execute(text("SELECT email FROM users"))
            assert result.scalars().all() == ["rob@localhost"]


class TestHealthCheck:
    @pytest.mark.asyncio
    async def test_healthy(self, memory_db):
        assert await health_check() is True
