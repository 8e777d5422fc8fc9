"""
MovieLibrary Backend: Unit of Work Tests
=========================================

What:  get_db_session commits on success and rolls back on error or
       cancellation, so a write flushed by a repository never outlives a
       failed request.
"""

import asyncio

import pytest
from sqlalchemy import func, select

from movielibrary import database
from movielibrary.models.movie import Movie
from movielibrary.repositories.movie_repository import MovieRepository
from movielibrary.schemas.movie import MovieFields


async def _count(session_factory) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(Movie))


class TestGetDbSession:

    @pytest.fixture(autouse=True)
    def use_test_database(self, session_factory, monkeypatch):
        monkeypatch.setattr(database, "async_session_factory", session_factory)

    @pytest.mark.asyncio
    async def test_commits_on_success(self, session_factory):
        unit_of_work = database.get_db_session()
        session = await unit_of_work.__anext__()
        await MovieRepository(session).add(MovieFields(title="Stalker"))

        with pytest.raises(StopAsyncIteration):
            await unit_of_work.__anext__()

        assert await _count(session_factory) == 1

    @pytest.mark.asyncio
    async def test_rolls_back_on_error(self, session_factory):
        unit_of_work = database.get_db_session()
        session = await unit_of_work.__anext__()
        await MovieRepository(session).add(MovieFields(title="Solaris"))

        with pytest.raises(RuntimeError):
            await unit_of_work.athrow(RuntimeError("handler failed"))

        assert await _count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_rolls_back_on_cancellation(self, session_factory):
        unit_of_work = database.get_db_session()
        session = await unit_of_work.__anext__()
        await MovieRepository(session).add(MovieFields(title="Mirror"))

        with pytest.raises(asyncio.CancelledError):
            await unit_of_work.athrow(asyncio.CancelledError())

        assert await _count(session_factory) == 0
