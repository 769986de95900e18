"""SQL Datastore — connect/verify, count and fetch against in-memory SQLite.

Invariants:
    - A failed connect leaves no engine open and raises DatastoreConnectionError
    - Reads before connect raise DatastoreQueryError
    - count_matching ignores ordering; fetch applies skip/limit
"""

import pytest
from sqlalchemy import select

from harmonia.config import DatabaseSpec
from harmonia.core.errors import DatastoreConnectionError, DatastoreQueryError
from harmonia.db.base import Base
from harmonia.infrastructure.datastore import SQLDatastore
from harmonia.models.artist import Artist

MEMORY = DatabaseSpec(url="sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def datastore():
    store = SQLDatastore()
    await store.connect({"main": MEMORY}, verbose=False)
    async with store.engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with store.session() as db:
        db.add_all(
            Artist(name=f"A{i}", genres=["folk"], origin_year=1900 + i)
            for i in range(7)
        )
        await db.commit()
    yield store
    await store.disconnect()


async def test_connect_records_primary():
    store = SQLDatastore()
    await store.connect({"main": MEMORY, "replica": MEMORY}, verbose=False)

    assert store.is_connected
    assert store.names == ("main", "replica")
    assert store.engine() is store.engine("main")
    await store.disconnect()
    assert not store.is_connected


async def test_count_matching(datastore):
    stmt = select(Artist).where(Artist.origin_year >= 1903).order_by(Artist.id)
    assert await datastore.count_matching(stmt) == 4


async def test_fetch_window(datastore):
    stmt = select(Artist).order_by(Artist.id)

    rows = await datastore.fetch(stmt, skip=2, limit=3)

    assert [a.name for a in rows] == ["A2", "A3", "A4"]


async def test_fetch_past_end_is_empty(datastore):
    assert await datastore.fetch(select(Artist), skip=50, limit=10) == []


async def test_health_check(datastore):
    assert await datastore.health_check() is True


async def test_reads_before_connect_raise():
    with pytest.raises(DatastoreQueryError):
        await SQLDatastore().count_matching(select(Artist))


async def test_failed_connect_opens_nothing(tmp_path):
    unreachable = DatabaseSpec(
        url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'nested' / 'db.sqlite'}",
    )
    store = SQLDatastore()

    with pytest.raises(DatastoreConnectionError) as info:
        await store.connect({"main": MEMORY, "broken": unreachable}, verbose=False)

    assert info.value.name == "broken"
    assert info.value.__cause__ is not None
    assert not store.is_connected


async def test_failure_message_is_localised(tmp_path):
    store = SQLDatastore()
    store.set_messages({"connect.failed": "falhou '{name}'"})
    unreachable = DatabaseSpec(url=f"sqlite+aiosqlite:///{tmp_path / 'no' / 'db'}")

    with pytest.raises(DatastoreConnectionError) as info:
        await store.connect({"x": unreachable}, verbose=False)

    assert "falhou 'x'" in info.value.message


def test_postgres_url_rewritten_for_asyncpg():
    spec = DatabaseSpec(url="postgresql://u:p@db/harmonia")
    assert spec.url == "postgresql+asyncpg://u:p@db/harmonia"
