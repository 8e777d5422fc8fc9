"""
MovieLibrary Backend: Route Dependencies
=========================================

What:  Builds the per-request object graph: one session, repositories on top
       of it, and the services the route handlers call.
How:   FastAPI caches `get_db_session` within a request, so every repository
       built here shares the same unit of work.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from movielibrary.database import get_db_session
from movielibrary.repositories.movie_repository import MovieRepository
from movielibrary.repositories.rental_repository import RentalRepository
from movielibrary.services.movie_service import MovieService
from movielibrary.services.rental_service import RentalService


def get_movie_repository(db: AsyncSession = Depends(get_db_session)) -> MovieRepository:
    return MovieRepository(db)


def get_rental_repository(db: AsyncSession = Depends(get_db_session)) -> RentalRepository:
    return RentalRepository(db)


def get_movie_service(
    movies: MovieRepository = Depends(get_movie_repository),
) -> MovieService:
    return MovieService(movies)


def get_rental_service(
    movies: MovieRepository = Depends(get_movie_repository),
    rentals: RentalRepository = Depends(get_rental_repository),
) -> RentalService:
    return RentalService(movies, rentals)
