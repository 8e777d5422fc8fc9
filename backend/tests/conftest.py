"""
MovieLibrary Backend: Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Repository, service and route tests run against a real SQLite
       database held in memory (aiosqlite + StaticPool), created fresh for
       every test. Handler-isolation tests use AsyncMock repositories.

Fixture Hierarchy (all function-scoped):
    db_engine ─┬─ db_session ─┬─ movie_repository
               │              └─ rental_repository
               └─ test_client (real get_db_session, bound to db_engine)
    mock_db_session: AsyncMock session for driver-failure tests
"""

import os

# Settings are read at import time; set them before importing movielibrary
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from movielibrary import database
from movielibrary.database import Base
from movielibrary.models.movie import Movie  # noqa: F401
from movielibrary.models.rental import Rental  # noqa: F401
from movielibrary.repositories.movie_repository import MovieRepository
from movielibrary.repositories.rental_repository import RentalRepository
from movielibrary.schemas.movie import MovieFields


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """A fresh in-memory database with both tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def movie_repository(db_session) -> MovieRepository:
    return MovieRepository(db_session)


@pytest.fixture
def rental_repository(db_session) -> RentalRepository:
    return RentalRepository(db_session)


@pytest.fixture
def mock_db_session():
    """
    An AsyncMock standing in for AsyncSession.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.scalar = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def sample_movie_fields() -> MovieFields:
    return MovieFields(
        title="The Matrix",
        director="Lana Wachowski",
        release_year=1999,
        genre="Science Fiction",
        rating=Decimal("8.7"),
        description="A hacker learns the truth about his reality.",
    )


@pytest.fixture
def rental_start(now) -> datetime:
    """A rental date comfortably inside the creation window."""
    return (now - timedelta(days=10)).replace(microsecond=0)


@pytest_asyncio.fixture
async def test_client(db_engine, session_factory, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    The app keeps its real `get_db_session` (commit on success, rollback on
    error); only the engine and session factory behind it point at the test
    database.
    """
    monkeypatch.setattr(database, "engine", db_engine)
    monkeypatch.setattr(database, "async_session_factory", session_factory)

    from movielibrary.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
