"""
Tests for schema initialization and default settings seeding
"""

import pytest
import pytest_asyncio
from datetime import datetime

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError, OperationalError

from fsb_admin.db import database
from fsb_admin.db import init_db, drop_db, async_session_maker, DEFAULT_SETTINGS
from fsb_admin.db.models import Setting, FileRecord
from fsb_admin.errors import StoreInitError, StoreUnavailable


@pytest_asyncio.fixture(autouse=True)
async def setup_database():
    """Start each test from an empty store"""
    await drop_db()
    yield
    await drop_db()


async def read_settings() -> dict:
    async with async_session_maker() as session:
        result = await session.execute(select(Setting))
        return {s.key: s.value for s in result.scalars().all()}


@pytest.mark.asyncio
async def test_init_seeds_exactly_the_defaults():
    await init_db()
    assert await read_settings() == DEFAULT_SETTINGS


@pytest.mark.asyncio
async def test_init_twice_is_idempotent():
    await init_db()
    await init_db()
    assert await read_settings() == {
        "cache_time_minutes": "15",
        "max_cache_size_gb": "10",
        "max_file_size_mb": "100",
    }


@pytest.mark.asyncio
async def test_init_never_overwrites_existing_values():
    await init_db()
    async with async_session_maker() as session:
        setting = await session.get(Setting, "cache_time_minutes")
        setting.value = "45"
        await session.commit()

    await init_db()

    values = await read_settings()
    assert values["cache_time_minutes"] == "45"
    assert values["max_cache_size_gb"] == "10"


@pytest.mark.asyncio
async def test_init_restores_missing_defaults_only():
    await init_db()
    async with async_session_maker() as session:
        await session.execute(delete(Setting).where(Setting.key == "max_file_size_mb"))
        setting = await session.get(Setting, "max_cache_size_gb")
        setting.value = "20"
        await session.commit()

    await init_db()

    assert await read_settings() == {
        "cache_time_minutes": "15",
        "max_cache_size_gb": "20",
        "max_file_size_mb": "100",
    }


@pytest.mark.asyncio
async def test_init_failure_is_fatal(monkeypatch):
    async def failing_seed(conn):
        raise OperationalError("INSERT INTO settings", {}, Exception("disk I/O error"))

    monkeypatch.setattr(database, "_seed_default_settings", failing_seed)

    with pytest.raises(StoreInitError) as exc_info:
        await init_db()
    assert isinstance(exc_info.value, StoreUnavailable)
    assert "disk I/O error" in exc_info.value.message


@pytest.mark.asyncio
async def test_foreign_keys_enforced():
    await init_db()
    now = datetime(2026, 10, 19, 12, 0, 0)

    async with async_session_maker() as session:
        session.add(FileRecord(bot_id="ghost", created_at=now, expires_at=now))
        with pytest.raises(IntegrityError):
            await session.commit()
