"""
MovieLibrary Backend: Movie Repository
=======================================

What:  Versioned CRUD over the `movies` table.
How:   Plain SQLAlchemy 2.0 statements against an injected AsyncSession.
       Writes are flushed, never committed; the request's unit of work
       (`get_db_session`) decides commit or rollback.
Who:   Built per request by the route dependencies; used by MovieService
       and, through `get_by_id`, by RentalService to snapshot titles.

Optimistic Concurrency (update):
    UPDATE movies
       SET title = :title, ..., updated_at = :now, row_version = :new
     WHERE id = :id AND row_version = :expected

    One matched row means SUCCESS. Zero rows means the token was stale or
    the movie is gone; a follow-up existence check picks CONFLICT or
    NOT_FOUND. Either way the statement changed nothing.

Query patterns:
    - get_all:  ORDER BY created_at DESC (idx_movies_created_at)
    - search:   AND of case-insensitive substring filters on title, director,
                genre, inclusive year range and minimum rating; same ordering
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from movielibrary.models.movie import Movie
from movielibrary.repositories.base import (
    UpdateOutcome,
    WriteResult,
    database_errors,
    new_version_token,
    utcnow,
)
from movielibrary.schemas.movie import MovieFields, MovieRecord, MovieSearchCriteria

logger = logging.getLogger(__name__)


def _text_filter(value: Optional[str]) -> Optional[str]:
    """Blank or missing text criteria mean no filter on that field."""
    if value is None or not value.strip():
        return None
    return value.strip()


class MovieRepository:
    """Versioned repository for Movie records."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, movie_id: uuid.UUID) -> Optional[MovieRecord]:
        # populate_existing: a row cached earlier in this session may predate
        # a conditional UPDATE issued since
        query = (
            select(Movie)
            .where(Movie.id == movie_id)
            .execution_options(populate_existing=True)
        )
        with database_errors("get movie", movie_id=str(movie_id)):
            result = await self.session.execute(query)
            movie = result.scalar_one_or_none()
        return MovieRecord.model_validate(movie) if movie is not None else None

    async def get_all(self) -> List[MovieRecord]:
        query = (
            select(Movie)
            .order_by(desc(Movie.created_at))
            .execution_options(populate_existing=True)
        )
        with database_errors("list movies"):
            result = await self.session.execute(query)
            movies = result.scalars().all()
        return [MovieRecord.model_validate(m) for m in movies]

    async def search(self, criteria: MovieSearchCriteria) -> List[MovieRecord]:
        query = select(Movie)

        title = _text_filter(criteria.title)
        if title:
            query = query.where(Movie.title.icontains(title, autoescape=True))

        director = _text_filter(criteria.director)
        if director:
            query = query.where(Movie.director.icontains(director, autoescape=True))

        genre = _text_filter(criteria.genre)
        if genre:
            query = query.where(Movie.genre.icontains(genre, autoescape=True))

        if criteria.min_year is not None:
            query = query.where(Movie.release_year >= criteria.min_year)

        if criteria.max_year is not None:
            query = query.where(Movie.release_year <= criteria.max_year)

        if criteria.min_rating is not None:
            query = query.where(Movie.rating >= criteria.min_rating)

        query = query.order_by(desc(Movie.created_at)).execution_options(populate_existing=True)

        with database_errors("search movies"):
            result = await self.session.execute(query)
            movies = result.scalars().all()
        return [MovieRecord.model_validate(m) for m in movies]

    async def add(self, fields: MovieFields) -> MovieRecord:
        movie = Movie(
            **fields.model_dump(),
            created_at=utcnow(),
            row_version=new_version_token(),
        )
        with database_errors("add movie"):
            self.session.add(movie)
            await self.session.flush()
        logger.info("Movie %s added", movie.id)
        return MovieRecord.model_validate(movie)

    async def update(self, movie: MovieRecord, expected_version: bytes) -> WriteResult[MovieRecord]:
        """
        Overwrite every editable field of `movie` if the stored token still
        equals `expected_version`.

        created_at is never written; updated_at and row_version are assigned
        here, and the returned snapshot carries both.
        """
        updated_at = utcnow()
        new_version = new_version_token()

        statement = (
            update(Movie)
            .where(Movie.id == movie.id, Movie.row_version == expected_version)
            .values(
                title=movie.title,
                director=movie.director,
                release_year=movie.release_year,
                genre=movie.genre,
                rating=movie.rating,
                description=movie.description,
                updated_at=updated_at,
                row_version=new_version,
            )
            .execution_options(synchronize_session=False)
        )

        with database_errors("update movie", movie_id=str(movie.id)):
            result = await self.session.execute(statement)

        if result.rowcount == 0:
            if await self.exists(movie.id):
                logger.warning("Movie %s update rejected: version token is stale", movie.id)
                return WriteResult(UpdateOutcome.CONFLICT)
            return WriteResult(UpdateOutcome.NOT_FOUND)

        stored = movie.model_copy(update={"updated_at": updated_at, "row_version": new_version})
        logger.info("Movie %s updated", movie.id)
        return WriteResult(UpdateOutcome.SUCCESS, stored)

    async def delete(self, movie_id: uuid.UUID) -> bool:
        statement = (
            delete(Movie)
            .where(Movie.id == movie_id)
            .execution_options(synchronize_session=False)
        )
        with database_errors("delete movie", movie_id=str(movie_id)):
            result = await self.session.execute(statement)
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Movie %s deleted", movie_id)
        return deleted

    async def exists(self, movie_id: uuid.UUID) -> bool:
        with database_errors("check movie", movie_id=str(movie_id)):
            found = await self.session.scalar(
                select(Movie.id).where(Movie.id == movie_id).limit(1)
            )
        return found is not None
