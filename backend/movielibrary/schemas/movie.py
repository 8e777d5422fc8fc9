"""
MovieLibrary Backend: Movie Schemas
====================================

What:  Pydantic models for everything movie-shaped that crosses a layer:

    ┌──────────────────────┬──────────────────────────────────────────────┐
    │ MovieRecord          │ frozen snapshot handed out by the repository │
    │ MovieSearchCriteria  │ optional AND-combined search filters         │
    │ *Command             │ parsed input for one command handler         │
    │ *Result              │ value returned by one command handler        │
    │ *Request             │ HTTP request bodies                          │
    └──────────────────────┴──────────────────────────────────────────────┘

Records are never mutated. An update is a replacement built with
`record.model_copy(update=...)` and handed back to the repository together
with the version token the caller originally read.
"""

import uuid
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from movielibrary.schemas.common import UtcDatetime, VersionToken


class MovieFields(BaseModel):
    """The caller-editable part of a movie; overwritten as a whole on update."""
    title: str = Field(default="", description="Movie title (required, max 200 chars)")
    director: Optional[str] = Field(default=None, description="Director (max 100 chars)")
    release_year: Optional[int] = Field(default=None, description="Release year")
    genre: Optional[str] = Field(default=None, description="Genre (max 50 chars)")
    rating: Optional[Decimal] = Field(default=None, description="Rating from 0 to 10")
    description: Optional[str] = Field(default=None, description="Synopsis (max 1000 chars)")


class MovieRecord(MovieFields):
    """A stored movie, as last read from or written to the repository."""
    id: uuid.UUID = Field(description="Unique movie identifier")
    created_at: UtcDatetime = Field(description="When the movie was added (UTC)")
    updated_at: Optional[UtcDatetime] = Field(
        default=None, description="Last successful update (UTC), null if never updated"
    )
    row_version: VersionToken = Field(
        description="Opaque version token (base64); send it back unchanged to update"
    )

    model_config = ConfigDict(frozen=True, from_attributes=True)


class MovieSearchCriteria(BaseModel):
    """
    Search filters, combined with AND. A missing (or blank) criterion means
    no filter on that field. Text filters are case-insensitive substrings;
    year and rating bounds are inclusive.
    """
    title: Optional[str] = None
    director: Optional[str] = None
    genre: Optional[str] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    min_rating: Optional[Decimal] = None


# ══════════════════════════════════════════════════════════════════════════
# Commands
# ══════════════════════════════════════════════════════════════════════════


class AddMovieCommand(MovieFields):
    pass


class UpdateMovieCommand(MovieFields):
    id: uuid.UUID
    row_version: VersionToken


class DeleteMovieCommand(BaseModel):
    id: uuid.UUID


# ══════════════════════════════════════════════════════════════════════════
# Results
# ══════════════════════════════════════════════════════════════════════════


class AddMovieResult(BaseModel):
    id: uuid.UUID
    title: str
    row_version: VersionToken
    message: str = "Movie added successfully"


class UpdateMovieResult(BaseModel):
    success: bool
    message: str
    movie: Optional[MovieRecord] = None


class DeleteMovieResult(BaseModel):
    success: bool
    message: str


# ══════════════════════════════════════════════════════════════════════════
# Request Bodies
# ══════════════════════════════════════════════════════════════════════════


class AddMovieRequest(MovieFields):
    """Body of POST /api/movies. Field rules are enforced by the handler."""


class UpdateMovieRequest(MovieFields):
    """Body of PUT /api/movies/{id}: every field, plus the token that was read."""
    row_version: VersionToken = Field(description="Version token from the last read (base64)")


class MovieListResponse(BaseModel):
    movies: list[MovieRecord]
    total_count: int

    @classmethod
    def of(cls, movies: list[MovieRecord]) -> "MovieListResponse":
        return cls(movies=movies, total_count=len(movies))

