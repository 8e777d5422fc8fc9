"""
MovieLibrary Backend: Field Validation
=======================================

What:  Field-level rules for every command, checked before any repository call.
How:   Each validator collects every failing rule into a list of FieldError
       and raises one ValidationFailedError carrying all of them, so the
       caller sees every problem at once instead of fixing them one by one.
Who:   Called first thing by MovieService and RentalService.

Time-relative rules (rental and return date windows, release year ceiling)
are measured against `now`, which defaults to the current UTC time and can
be pinned by tests.

Rules that need stored state (movie exists, return date not before the
rental date, rental not already returned) are not checked here; they belong
to the handlers and the lifecycle engine.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

from movielibrary.config import settings
from movielibrary.exceptions import FieldError, ValidationFailedError
from movielibrary.models.movie import (
    DESCRIPTION_MAX_LENGTH,
    DIRECTOR_MAX_LENGTH,
    GENRE_MAX_LENGTH,
    RATING_SCALE,
    TITLE_MAX_LENGTH,
)
from movielibrary.models.rental import (
    CUSTOMER_NAME_MAX_LENGTH,
    DAILY_RATE_PRECISION,
    DAILY_RATE_SCALE,
)
from movielibrary.schemas.common import as_utc
from movielibrary.schemas.movie import AddMovieCommand, MovieFields, UpdateMovieCommand
from movielibrary.schemas.rental import CreateRentalCommand, ReturnRentalCommand

RATING_MIN = Decimal("0")
RATING_MAX = Decimal("10")
DAILY_RATE_MAX_INTEGER_DIGITS = DAILY_RATE_PRECISION - DAILY_RATE_SCALE


def _now(now: Optional[datetime]) -> datetime:
    return as_utc(now) if now is not None else datetime.now(timezone.utc)


def _decimal_places(value: Decimal) -> int:
    exponent = value.normalize().as_tuple().exponent
    if not isinstance(exponent, int):
        return 0
    return max(-exponent, 0)


def _integer_digits(value: Decimal) -> int:
    return len(str(int(abs(value))).lstrip("0"))


def _describe_days(days: int) -> str:
    if days == 365:
        return "1 year"
    return "1 day" if days == 1 else f"{days} days"


def _raise_if_any(errors: List[FieldError]) -> None:
    if errors:
        raise ValidationFailedError(errors)


def _check_movie_fields(fields: MovieFields, now: datetime) -> List[FieldError]:
    errors: List[FieldError] = []

    if not fields.title or not fields.title.strip():
        errors.append(FieldError("title", "Title is required"))
    elif len(fields.title) > TITLE_MAX_LENGTH:
        errors.append(FieldError("title", f"Title cannot exceed {TITLE_MAX_LENGTH} characters"))

    if fields.director and len(fields.director) > DIRECTOR_MAX_LENGTH:
        errors.append(
            FieldError("director", f"Director name cannot exceed {DIRECTOR_MAX_LENGTH} characters")
        )

    if fields.genre and len(fields.genre) > GENRE_MAX_LENGTH:
        errors.append(FieldError("genre", f"Genre cannot exceed {GENRE_MAX_LENGTH} characters"))

    if fields.release_year is not None:
        if fields.release_year <= settings.release_year_min:
            errors.append(
                FieldError("release_year", f"Release year must be after {settings.release_year_min}")
            )
        elif fields.release_year > now.year + settings.release_year_future_window:
            errors.append(
                FieldError(
                    "release_year",
                    "Release year cannot be more than "
                    f"{settings.release_year_future_window} years in the future",
                )
            )

    if fields.rating is not None:
        if fields.rating < RATING_MIN:
            errors.append(FieldError("rating", f"Rating must be at least {RATING_MIN}"))
        elif fields.rating > RATING_MAX:
            errors.append(FieldError("rating", f"Rating cannot exceed {RATING_MAX}"))
        elif _decimal_places(fields.rating) > RATING_SCALE:
            errors.append(
                FieldError("rating", f"Rating cannot have more than {RATING_SCALE} decimal place")
            )

    if fields.description and len(fields.description) > DESCRIPTION_MAX_LENGTH:
        errors.append(
            FieldError(
                "description", f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters"
            )
        )

    return errors


def validate_add_movie(command: AddMovieCommand, now: Optional[datetime] = None) -> None:
    _raise_if_any(_check_movie_fields(command, _now(now)))


def validate_update_movie(command: UpdateMovieCommand, now: Optional[datetime] = None) -> None:
    errors = _check_movie_fields(command, _now(now))
    if not command.row_version:
        errors.append(FieldError("row_version", "Row version is required"))
    _raise_if_any(errors)


def validate_create_rental(command: CreateRentalCommand, now: Optional[datetime] = None) -> None:
    current = _now(now)
    errors: List[FieldError] = []

    if not command.customer_name or not command.customer_name.strip():
        errors.append(FieldError("customer_name", "Customer name is required"))
    elif len(command.customer_name) > CUSTOMER_NAME_MAX_LENGTH:
        errors.append(
            FieldError(
                "customer_name",
                f"Customer name cannot exceed {CUSTOMER_NAME_MAX_LENGTH} characters",
            )
        )

    future_days = settings.rental_max_future_days
    past_days = settings.rental_max_past_days
    if command.rental_date > current + timedelta(days=future_days):
        errors.append(
            FieldError(
                "rental_date",
                f"Rental date cannot be more than {_describe_days(future_days)} in the future",
            )
        )
    elif command.rental_date < current - timedelta(days=past_days):
        errors.append(
            FieldError(
                "rental_date",
                f"Rental date cannot be more than {_describe_days(past_days)} in the past",
            )
        )

    if command.daily_rate <= 0:
        errors.append(FieldError("daily_rate", "Daily rate must be greater than 0"))
    elif _decimal_places(command.daily_rate) > DAILY_RATE_SCALE:
        errors.append(
            FieldError(
                "daily_rate",
                f"Daily rate cannot have more than {DAILY_RATE_SCALE} decimal places",
            )
        )
    elif _integer_digits(command.daily_rate) > DAILY_RATE_MAX_INTEGER_DIGITS:
        errors.append(
            FieldError(
                "daily_rate",
                f"Daily rate cannot have more than {DAILY_RATE_MAX_INTEGER_DIGITS} digits "
                "before the decimal point",
            )
        )

    _raise_if_any(errors)


def validate_return_rental(command: ReturnRentalCommand, now: Optional[datetime] = None) -> None:
    current = _now(now)
    errors: List[FieldError] = []

    future_days = settings.rental_max_future_days
    if command.return_date > current + timedelta(days=future_days):
        errors.append(
            FieldError(
                "return_date",
                f"Return date cannot be more than {_describe_days(future_days)} in the future",
            )
        )
    if not command.row_version:
        errors.append(FieldError("row_version", "Row version is required"))

    _raise_if_any(errors)
