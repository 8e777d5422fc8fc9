"""
MovieLibrary Backend: Movie Service Unit Tests
===============================================

What:  MovieService command handlers in isolation.
How:   The repository is an AsyncMock, so each test controls exactly what
       the store reports and can assert which writes were attempted.

What we test:
    ✅ validation failures reach no repository method
    ✅ update builds the replacement from the stored record and the caller's token
    ✅ CONFLICT / NOT_FOUND outcomes become typed exceptions
    ✅ deleting a missing movie is a not-found result, not an exception
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from movielibrary.exceptions import ConcurrencyConflictError, NotFoundError, ValidationFailedError
from movielibrary.repositories.base import UpdateOutcome, WriteResult, new_version_token
from movielibrary.schemas.movie import (
    AddMovieCommand,
    DeleteMovieCommand,
    MovieRecord,
    MovieSearchCriteria,
    UpdateMovieCommand,
)
from movielibrary.services.movie_service import MovieService


def _record(**overrides) -> MovieRecord:
    values = {
        "id": uuid.uuid4(),
        "title": "Blade Runner",
        "director": "Ridley Scott",
        "release_year": 1982,
        "genre": "Science Fiction",
        "rating": Decimal("8.1"),
        "description": None,
        "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
        "updated_at": None,
        "row_version": new_version_token(),
    }
    values.update(overrides)
    return MovieRecord(**values)


class TestAddMovie:

    def setup_method(self):
        self.repository = AsyncMock()
        self.service = MovieService(self.repository)

    @pytest.mark.asyncio
    async def test_add_returns_id_title_and_token(self):
        stored = _record()
        self.repository.add.return_value = stored

        result = await self.service.add_movie(AddMovieCommand(title="Blade Runner", release_year=1982))

        assert result.id == stored.id
        assert result.title == "Blade Runner"
        assert result.row_version == stored.row_version
        assert result.message == "Movie added successfully"
        fields = self.repository.add.await_args.args[0]
        assert fields.release_year == 1982

    @pytest.mark.asyncio
    async def test_invalid_movie_is_never_stored(self):
        with pytest.raises(ValidationFailedError):
            await self.service.add_movie(AddMovieCommand(title=""))

        self.repository.add.assert_not_awaited()


class TestUpdateMovie:

    def setup_method(self):
        self.repository = AsyncMock()
        self.service = MovieService(self.repository)

    def _command(self, movie_id, token, **fields):
        values = {"title": "Blade Runner: Final Cut", "release_year": 1982}
        values.update(fields)
        return UpdateMovieCommand(id=movie_id, row_version=token, **values)

    @pytest.mark.asyncio
    async def test_update_passes_callers_token(self):
        current = _record()
        token_seen_by_caller = new_version_token()
        self.repository.get_by_id.return_value = current
        self.repository.update.side_effect = lambda record, expected: WriteResult(
            UpdateOutcome.SUCCESS, record.model_copy(update={"row_version": new_version_token()})
        )

        result = await self.service.update_movie(self._command(current.id, token_seen_by_caller))

        replacement, expected = self.repository.update.await_args.args
        assert expected == token_seen_by_caller
        assert replacement.id == current.id
        assert replacement.created_at == current.created_at
        assert replacement.title == "Blade Runner: Final Cut"
        # Full-field overwrite: omitted optional fields are cleared
        assert replacement.director is None
        assert result.success
        assert result.message == "Movie updated successfully"
        assert result.movie.title == "Blade Runner: Final Cut"

    @pytest.mark.asyncio
    async def test_rating_finer_than_stored_precision_is_rejected(self):
        current = _record()
        self.repository.get_by_id.return_value = current

        with pytest.raises(ValidationFailedError):
            await self.service.update_movie(
                self._command(current.id, current.row_version, rating=Decimal("7.25"))
            )

        self.repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_conflict_raises(self):
        current = _record()
        self.repository.get_by_id.return_value = current
        self.repository.update.return_value = WriteResult(UpdateOutcome.CONFLICT)

        with pytest.raises(ConcurrencyConflictError) as exc_info:
            await self.service.update_movie(self._command(current.id, new_version_token()))

        assert exc_info.value.resource == "movie"

    @pytest.mark.asyncio
    async def test_missing_movie_raises_before_update(self):
        self.repository.get_by_id.return_value = None
        movie_id = uuid.uuid4()

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.update_movie(self._command(movie_id, new_version_token()))

        assert exc_info.value.message == f"Movie with Id {movie_id} not found"
        self.repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_movie_deleted_between_read_and_write(self):
        current = _record()
        self.repository.get_by_id.return_value = current
        self.repository.update.return_value = WriteResult(UpdateOutcome.NOT_FOUND)

        with pytest.raises(NotFoundError):
            await self.service.update_movie(self._command(current.id, current.row_version))

    @pytest.mark.asyncio
    async def test_invalid_update_reads_nothing(self):
        with pytest.raises(ValidationFailedError):
            await self.service.update_movie(
                self._command(uuid.uuid4(), new_version_token(), rating=Decimal("11"))
            )

        self.repository.get_by_id.assert_not_awaited()
        self.repository.update.assert_not_awaited()


class TestDeleteAndQueries:

    def setup_method(self):
        self.repository = AsyncMock()
        self.service = MovieService(self.repository)

    @pytest.mark.asyncio
    async def test_delete_existing(self):
        self.repository.delete.return_value = True

        result = await self.service.delete_movie(DeleteMovieCommand(id=uuid.uuid4()))

        assert result.success
        assert result.message == "Movie deleted successfully"

    @pytest.mark.asyncio
    async def test_delete_missing_is_a_result_not_an_error(self):
        self.repository.delete.return_value = False
        movie_id = uuid.uuid4()

        result = await self.service.delete_movie(DeleteMovieCommand(id=movie_id))

        assert not result.success
        assert result.message == f"Movie with Id {movie_id} not found"

    @pytest.mark.asyncio
    async def test_get_missing_movie(self):
        self.repository.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.get_movie(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_search_forwards_criteria(self):
        self.repository.search.return_value = [_record()]
        criteria = MovieSearchCriteria(director="scott")

        movies = await self.service.search_movies(criteria)

        assert len(movies) == 1
        self.repository.search.assert_awaited_once_with(criteria)
