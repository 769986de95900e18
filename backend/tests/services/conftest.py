"""Service test fixtures — started app over in-memory SQLite, fakes for lifecycle tests.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - The app under test went through the real startup stages (build_app)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - raise_app_exceptions=False: catch-all handler responses are asserted,
      not re-raised into the test
"""

import pytest
from httpx import ASGITransport, AsyncClient

from harmonia.db.base import Base
from harmonia.main import build_app
from harmonia.models.artist import Artist
from harmonia.models.course import Course

from tests.services.fakes import FakeDatastore, FakeFaultLog, make_environment


@pytest.fixture
def environment():
    return make_environment()


@pytest.fixture
async def app(environment):
    app = await build_app(environment)
    async with app.state.datastore.engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield app
    await app.state.datastore.disconnect()


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def seed_artists(app):
    """25 artists named Artist 01..Artist 25, alternating origin years."""
    async with app.state.datastore.session() as db:
        artists = [
            Artist(
                name=f"Artist {i:02d}",
                genres=["jazz"] if i % 2 else ["rock"],
                origin_year=1950 + (i % 2),
            )
            for i in range(1, 26)
        ]
        db.add_all(artists)
        await db.commit()
        return [a.id for a in artists]


@pytest.fixture
async def seed_course(app):
    async with app.state.datastore.session() as db:
        artist = Artist(name="Miles Davis", genres=["jazz"], origin_year=1926)
        db.add(artist)
        await db.flush()
        course = Course(title="Modal Jazz 101", level="beginner", artist_id=artist.id)
        db.add(course)
        await db.commit()
        return {"artist_id": artist.id, "course_id": course.id}


@pytest.fixture
def fake_datastore():
    return FakeDatastore()


@pytest.fixture
def fault_log():
    return FakeFaultLog()
