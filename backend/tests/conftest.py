"""
Luminar Notes Backend: Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own in-memory SQLite store (aiosqlite + StaticPool,
       so all sessions share one connection), injected into the app through
       create_app(database=...). No PostgreSQL server is needed.

Fixture Hierarchy (all function-scoped):
    ├── database: fresh in-memory Database with the notes table created
    ├── db_session: AsyncSession on that database
    ├── note_store: NoteStore bound to db_session
    ├── app: FastAPI app wired to `database`
    ├── test_client: HTTPX AsyncClient for API endpoint testing
    └── sample_note_payload: valid POST body
"""

import os

# Set before any app import so the module-level Settings picks them up
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool

from app.database import Database
from app.services.note_store import NoteStore


def make_memory_database() -> Database:
    return Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest_asyncio.fixture
async def database():
    """In-memory store with the notes table created; disposed after the test."""
    db = make_memory_database()
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def note_store(db_session):
    return NoteStore(db_session)


@pytest.fixture
def app(database):
    from app.main import create_app
    return create_app(database=database)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_note_payload():
    return {
        "title": "Groceries",
        "content": "Milk, eggs, bread",
        "date": "Jan 1, 2026",
    }
