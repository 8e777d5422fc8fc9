"""
MovieLibrary Backend: Rental Lifecycle Engine
==============================================

What:  Applies the Active → Returned transition and computes what is owed.
How:   Load the rental, check the transition and dates, build a replacement
       record, persist it with the caller's version token.
Who:   Called by RentalService.return_rental.

Return Flow:
    ┌──────────┐    ┌──────────────┐    ┌─────────────┐    ┌───────────────┐
    │  Load    │───▶│  Transition  │───▶│  Billing    │───▶│  Conditional  │
    │  by id   │    │  + dates     │    │  days*rate  │    │  UPDATE       │
    └──────────┘    └──────────────┘    └─────────────┘    └───────────────┘
      missing         Returned → 400                          stale → 409
      → 404           return < rental → 400                   gone  → 404

Billing:
    days  = whole days between rental_date and return_date, at least 1
    total = days * daily_rate

    Partial days are dropped, and anything under one day (including a
    same-instant return) is charged as one full day.

Returning is not idempotent: a second return of the same rental always
fails, whatever token it carries.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from movielibrary.exceptions import (
    ConcurrencyConflictError,
    InvalidInputError,
    InvalidStateTransitionError,
    NotFoundError,
)
from movielibrary.models.rental import RentalStatus
from movielibrary.repositories.base import UpdateOutcome
from movielibrary.repositories.rental_repository import RentalRepository
from movielibrary.schemas.common import as_utc
from movielibrary.schemas.rental import RentalRecord

logger = logging.getLogger(__name__)

MINIMUM_BILLABLE_DAYS = 1


@dataclass(frozen=True)
class ReturnOutcome:
    rental: RentalRecord
    total_cost: Decimal
    days_charged: int


def billable_days(rental_date: datetime, return_date: datetime) -> int:
    """Whole days rented, never less than one."""
    elapsed = as_utc(return_date) - as_utc(rental_date)
    return max(elapsed.days, MINIMUM_BILLABLE_DAYS)


def total_cost(rental_date: datetime, return_date: datetime, daily_rate: Decimal) -> Decimal:
    return Decimal(billable_days(rental_date, return_date)) * daily_rate


class RentalLifecycle:
    """State machine for a single rental, bound to one repository."""

    def __init__(self, repository: RentalRepository):
        self.repository = repository

    async def return_rental(
        self,
        rental_id: uuid.UUID,
        return_date: datetime,
        expected_version: bytes,
    ) -> ReturnOutcome:
        """
        Mark a rental returned and compute its cost.

        Raises:
            NotFoundError:                no rental with this id (before or during the write)
            InvalidStateTransitionError:  the rental is already Returned
            InvalidInputError:            return_date precedes rental_date
            ConcurrencyConflictError:     expected_version is stale

        Nothing is written unless every check passes and the token matches.
        """
        rental = await self.repository.get_by_id(rental_id)
        if rental is None:
            raise NotFoundError(resource="rental", resource_id=str(rental_id))

        if not rental.status.can_transition_to(RentalStatus.RETURNED):
            raise InvalidStateTransitionError(
                message="This rental has already been returned",
                current_state=rental.status.value,
                context={"rental_id": str(rental_id)},
            )

        return_date = as_utc(return_date)
        if return_date < rental.rental_date:
            raise InvalidInputError(
                message="Return date cannot be before rental date",
                field="return_date",
            )

        days = billable_days(rental.rental_date, return_date)
        cost = total_cost(rental.rental_date, return_date, rental.daily_rate)

        result = await self.repository.update(rental.as_returned(return_date), expected_version)

        if result.outcome is UpdateOutcome.CONFLICT:
            raise ConcurrencyConflictError(resource="rental", resource_id=str(rental_id))
        if result.outcome is UpdateOutcome.NOT_FOUND:
            raise NotFoundError(resource="rental", resource_id=str(rental_id))

        logger.info(
            "Rental %s returned after %d day(s), total %s", rental_id, days, cost
        )
        return ReturnOutcome(rental=result.record, total_cost=cost, days_charged=days)
