"""
MovieLibrary Backend: Movie SQLAlchemy Model
=============================================

What:  ORM model representing the `movies` table.
Who:   Used by MovieRepository for CRUD operations and by Alembic for schema
       management. Nothing outside the repository holds a Movie row.

Table Design:
    - UUID primary key, assigned on insert
    - title/director/genre/description: bounded strings, matching the field
      rules in services/validation.py
    - rating: NUMERIC(3,1), 0.0 to 10.0
    - created_at: set once on insert, never written by update
    - updated_at: NULL until the first successful update
    - row_version: opaque version token, replaced on every write

    Index on created_at DESC serves the default listing order.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, Index, Integer, LargeBinary, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from movielibrary.database import Base

TITLE_MAX_LENGTH = 200
DIRECTOR_MAX_LENGTH = 100
GENRE_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 1000
RATING_PRECISION = 3
RATING_SCALE = 1


class Movie(Base):
    """
    A catalog entry.

    Lifecycle:
        1. Created by MovieRepository.add (created_at + first row_version)
        2. Overwritten by MovieRepository.update only when the caller's
           row_version matches (updated_at bumped, new row_version)
        3. Removed by MovieRepository.delete
    """

    __tablename__ = "movies"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    director: Mapped[str | None] = mapped_column(String(DIRECTOR_MAX_LENGTH), nullable=True)
    release_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    genre: Mapped[str | None] = mapped_column(String(GENRE_MAX_LENGTH), nullable=True)
    rating: Mapped[Decimal | None] = mapped_column(
        Numeric(RATING_PRECISION, RATING_SCALE), nullable=True
    )
    description: Mapped[str | None] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH), nullable=True
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    # Stored in UTC; SQLite drops the zone, records re-attach UTC on read
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # ── Concurrency Token ─────────────────────────────────────────────────
    # Compared for equality only, inside the UPDATE's WHERE clause
    row_version: Mapped[bytes] = mapped_column(LargeBinary(16), nullable=False)

    def __repr__(self) -> str:
        return f"<Movie(id={self.id}, title='{self.title}')>"


# Serves the default listing order (newest first)
Index("idx_movies_created_at", Movie.created_at.desc())
