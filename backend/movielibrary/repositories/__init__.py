# Repositories package init
"""
MovieLibrary Backend: Versioned Repositories
=============================================

What:  CRUD over Movie and Rental rows, with optimistic concurrency on update.
How:   Each repository wraps one AsyncSession (one unit of work) and hands out
       frozen record snapshots instead of ORM instances.

Repository Inventory:
    - MovieRepository:  get_by_id, get_all, search, add, update, delete, exists
    - RentalRepository: get_by_id, get_all, search, add, update, delete, exists

Update contract (both repositories):
    update(record, expected_version) -> WriteResult
        SUCCESS    token matched; whole record overwritten; new token assigned
        NOT_FOUND  no row with that id; nothing written
        CONFLICT   row exists but carries another token; nothing written

    The match and the overwrite are one conditional UPDATE statement, so the
    store serializes competing writers: for a given token only one UPDATE
    can match.
"""

from movielibrary.repositories.base import UpdateOutcome, WriteResult, new_version_token
from movielibrary.repositories.movie_repository import MovieRepository
from movielibrary.repositories.rental_repository import RentalRepository

__all__ = [
    "MovieRepository",
    "RentalRepository",
    "UpdateOutcome",
    "WriteResult",
    "new_version_token",
]
