"""
MovieLibrary Backend: Repository Building Blocks
=================================================

What:  Shared pieces of the versioned repositories: the update outcome enum,
       the write result wrapper, version token generation, and translation of
       driver errors into DatabaseError.
"""

import enum
import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Generic, Iterator, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from movielibrary.exceptions import DatabaseError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


class UpdateOutcome(str, enum.Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class WriteResult(Generic[RecordT]):
    """
    Outcome of a conditional update.

    `record` is the stored snapshot (with its new token) on SUCCESS and
    None otherwise.
    """

    outcome: UpdateOutcome
    record: Optional[RecordT] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is UpdateOutcome.SUCCESS


def new_version_token() -> bytes:
    """16 random bytes; unique per write, meaningless to callers."""
    return uuid.uuid4().bytes


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def database_errors(operation: str, **context) -> Iterator[None]:
    """
    Wrap SQLAlchemy failures in DatabaseError.

    The original exception type is kept in the context for the server log;
    the client only ever sees the generic DatabaseError message.
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
        raise DatabaseError(
            context={"operation": operation, "original_error": type(e).__name__, **context},
        ) from e
