"""
MovieLibrary Backend: Movie Command Handlers
=============================================

What:  Add, update, delete and read movies.
How:   Each command is validated in full first, then turned into exactly one
       repository write (updates also read the current record to build the
       replacement). Repository outcomes become result values or typed
       exceptions; HTTP mapping happens in main.py.
Who:   Built per request by `routes.dependencies.get_movie_service`.

Update Flow:
    validate ─▶ get_by_id ─▶ model_copy(update=fields) ─▶ update(record, token)
                  │                                          │
                  └─ None → NotFoundError                    ├─ CONFLICT  → ConcurrencyConflictError
                                                             └─ NOT_FOUND → NotFoundError

A conflict is never retried here. The caller decides whether to re-read
and resubmit.
"""

import logging
import uuid
from typing import List

from movielibrary.exceptions import ConcurrencyConflictError, NotFoundError
from movielibrary.repositories.base import UpdateOutcome
from movielibrary.repositories.movie_repository import MovieRepository
from movielibrary.schemas.movie import (
    AddMovieCommand,
    AddMovieResult,
    DeleteMovieCommand,
    DeleteMovieResult,
    MovieFields,
    MovieRecord,
    MovieSearchCriteria,
    UpdateMovieCommand,
    UpdateMovieResult,
)
from movielibrary.services.validation import validate_add_movie, validate_update_movie

logger = logging.getLogger(__name__)


class MovieService:
    """
    Command handlers for the movie catalog.

    Stateless apart from the injected repository; one instance per request.
    """

    def __init__(self, repository: MovieRepository):
        self.repository = repository

    async def add_movie(self, command: AddMovieCommand) -> AddMovieResult:
        validate_add_movie(command)

        fields = MovieFields.model_validate(command.model_dump(include=set(MovieFields.model_fields)))
        movie = await self.repository.add(fields)

        logger.info("Added movie %s (%s)", movie.id, movie.title)
        return AddMovieResult(id=movie.id, title=movie.title, row_version=movie.row_version)

    async def update_movie(self, command: UpdateMovieCommand) -> UpdateMovieResult:
        """
        Overwrite every editable field of a movie, guarded by its version token.

        Raises:
            ValidationFailedError:     a field rule failed; nothing was read or written
            NotFoundError:             no movie with this id
            ConcurrencyConflictError:  the movie changed since `command.row_version` was read
        """
        validate_update_movie(command)

        current = await self.repository.get_by_id(command.id)
        if current is None:
            raise NotFoundError(resource="movie", resource_id=str(command.id))

        replacement = current.model_copy(update=command.model_dump(include=set(MovieFields.model_fields)))
        result = await self.repository.update(replacement, command.row_version)

        if result.outcome is UpdateOutcome.CONFLICT:
            raise ConcurrencyConflictError(resource="movie", resource_id=str(command.id))
        if result.outcome is UpdateOutcome.NOT_FOUND:
            raise NotFoundError(resource="movie", resource_id=str(command.id))

        return UpdateMovieResult(
            success=True,
            message="Movie updated successfully",
            movie=result.record,
        )

    async def delete_movie(self, command: DeleteMovieCommand) -> DeleteMovieResult:
        # A missing movie is an ordinary outcome here, not an exception
        deleted = await self.repository.delete(command.id)
        if not deleted:
            logger.info("Delete skipped: movie %s not found", command.id)
            return DeleteMovieResult(
                success=False,
                message=f"Movie with Id {command.id} not found",
            )
        return DeleteMovieResult(success=True, message="Movie deleted successfully")

    async def get_movie(self, movie_id: uuid.UUID) -> MovieRecord:
        movie = await self.repository.get_by_id(movie_id)
        if movie is None:
            raise NotFoundError(resource="movie", resource_id=str(movie_id))
        return movie

    async def list_movies(self) -> List[MovieRecord]:
        return await self.repository.get_all()

    async def search_movies(self, criteria: MovieSearchCriteria) -> List[MovieRecord]:
        return await self.repository.search(criteria)
