"""Tests for engine bootstrap from DATABASE_URL."""

import pytest
from sqlalchemy import inspect

from visitor_access.storage.database import dispose_engine, get_engine, init_db


@pytest.fixture
async def database_url(tmp_path, monkeypatch):
    url = f'sqlite+aiosqlite:///{tmp_path / "visitor_access.db"}'
    monkeypatch.setenv('DATABASE_URL', url)
    await dispose_engine()
    yield url
    await dispose_engine()


@pytest.mark.asyncio
async def test_init_db_creates_tables(database_url):
    await init_db()

    async with get_engine().connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    assert {'invitations', 'access_logs'} <= set(tables)


@pytest.mark.asyncio
async def test_engine_is_reused_until_disposed(database_url):
    engine = get_engine()
    assert get_engine() is engine

    await dispose_engine()

    assert get_engine() is not engine
