"""
MovieLibrary Backend: Movie Route Handlers
===========================================

What:  HTTP surface of the movie catalog under /api/movies.
How:   Parses path, query and body into commands, calls MovieService and
       returns its result. Failures are raised as typed exceptions and
       turned into status codes by the handlers in main.py.

Endpoints:
    GET    /api/movies            list, newest first
    GET    /api/movies/search     filtered list
    GET    /api/movies/{id}       one movie (404 when missing)
    POST   /api/movies            add (201)
    PUT    /api/movies/{id}       update with row_version (404 / 409)
    DELETE /api/movies/{id}       delete (404 when missing)
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from movielibrary.routes.dependencies import get_movie_service
from movielibrary.schemas.common import ErrorResponse
from movielibrary.schemas.movie import (
    AddMovieCommand,
    AddMovieRequest,
    AddMovieResult,
    DeleteMovieCommand,
    DeleteMovieResult,
    MovieListResponse,
    MovieRecord,
    MovieSearchCriteria,
    UpdateMovieCommand,
    UpdateMovieRequest,
    UpdateMovieResult,
)
from movielibrary.services.movie_service import MovieService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/movies", tags=["Movies"])


@router.get(
    "",
    response_model=MovieListResponse,
    summary="List all movies",
)
async def list_movies(
    service: MovieService = Depends(get_movie_service),
) -> MovieListResponse:
    return MovieListResponse.of(await service.list_movies())


# Declared before /{movie_id} so "search" is not parsed as an id
@router.get(
    "/search",
    response_model=MovieListResponse,
    summary="Search movies",
    description=(
        "All supplied filters must match. Text filters are case-insensitive "
        "substrings; year and rating bounds are inclusive."
    ),
)
async def search_movies(
    title: Optional[str] = Query(default=None, description="Substring of the title"),
    director: Optional[str] = Query(default=None, description="Substring of the director"),
    genre: Optional[str] = Query(default=None, description="Substring of the genre"),
    min_year: Optional[int] = Query(default=None, description="Earliest release year"),
    max_year: Optional[int] = Query(default=None, description="Latest release year"),
    min_rating: Optional[Decimal] = Query(default=None, description="Lowest rating"),
    service: MovieService = Depends(get_movie_service),
) -> MovieListResponse:
    criteria = MovieSearchCriteria(
        title=title,
        director=director,
        genre=genre,
        min_year=min_year,
        max_year=max_year,
        min_rating=min_rating,
    )
    return MovieListResponse.of(await service.search_movies(criteria))


@router.get(
    "/{movie_id}",
    response_model=MovieRecord,
    responses={404: {"description": "Movie not found", "model": ErrorResponse}},
    summary="Get a movie by id",
)
async def get_movie(
    movie_id: UUID,
    service: MovieService = Depends(get_movie_service),
) -> MovieRecord:
    return await service.get_movie(movie_id)


@router.post(
    "",
    response_model=AddMovieResult,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Validation failed", "model": ErrorResponse}},
    summary="Add a movie",
)
async def add_movie(
    body: AddMovieRequest,
    service: MovieService = Depends(get_movie_service),
) -> AddMovieResult:
    return await service.add_movie(AddMovieCommand.model_validate(body.model_dump()))


@router.put(
    "/{movie_id}",
    response_model=UpdateMovieResult,
    responses={
        400: {"description": "Validation failed", "model": ErrorResponse},
        404: {"description": "Movie not found", "model": ErrorResponse},
        409: {"description": "Movie was modified by another request", "model": ErrorResponse},
    },
    summary="Update a movie",
    description=(
        "Replaces every editable field. `row_version` must be the token from "
        "the last read; a stale token is rejected with 409 and nothing is changed."
    ),
)
async def update_movie(
    movie_id: UUID,
    body: UpdateMovieRequest,
    service: MovieService = Depends(get_movie_service),
) -> UpdateMovieResult:
    command = UpdateMovieCommand.model_validate({**body.model_dump(), "id": movie_id})
    return await service.update_movie(command)


@router.delete(
    "/{movie_id}",
    response_model=DeleteMovieResult,
    responses={404: {"description": "Movie not found", "model": DeleteMovieResult}},
    summary="Delete a movie",
)
async def delete_movie(
    movie_id: UUID,
    response: Response,
    service: MovieService = Depends(get_movie_service),
) -> DeleteMovieResult:
    result = await service.delete_movie(DeleteMovieCommand(id=movie_id))
    if not result.success:
        response.status_code = status.HTTP_404_NOT_FOUND
    return result
