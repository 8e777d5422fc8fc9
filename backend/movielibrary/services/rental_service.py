"""
MovieLibrary Backend: Rental Command Handlers
==============================================

What:  Create, return and read rentals.
Who:   Built per request by `routes.dependencies.get_rental_service`.

CreateRental:
    1. Validate the command (customer name, rental date window, daily rate)
    2. Load the movie; a missing movie fails here, before anything is written
    3. Snapshot the movie title into item_name and add the rental as Active

    The movie check and the rental insert are not atomic with respect to a
    concurrent delete of that movie. Rentals keep their item_name snapshot
    and do not depend on the movie afterwards.

ReturnRental:
    Validated here, then handed to RentalLifecycle, which owns the state
    check, billing and the conditional write.
"""

import logging
import uuid
from typing import List, Optional

from movielibrary.exceptions import NotFoundError
from movielibrary.repositories.movie_repository import MovieRepository
from movielibrary.repositories.rental_repository import RentalRepository
from movielibrary.schemas.rental import (
    CreateRentalCommand,
    CreateRentalResult,
    RentalDraft,
    RentalRecord,
    RentalSearchCriteria,
    ReturnRentalCommand,
    ReturnRentalResult,
)
from movielibrary.services.rental_lifecycle import RentalLifecycle
from movielibrary.services.validation import validate_create_rental, validate_return_rental

logger = logging.getLogger(__name__)


class RentalService:
    def __init__(self, movie_repository: MovieRepository, rental_repository: RentalRepository):
        self.movie_repository = movie_repository
        self.rental_repository = rental_repository
        self.lifecycle = RentalLifecycle(rental_repository)

    async def create_rental(self, command: CreateRentalCommand) -> CreateRentalResult:
        validate_create_rental(command)

        movie = await self.movie_repository.get_by_id(command.movie_id)
        if movie is None:
            raise NotFoundError(resource="movie", resource_id=str(command.movie_id))

        rental = await self.rental_repository.add(
            RentalDraft(
                movie_id=movie.id,
                customer_name=command.customer_name.strip(),
                item_name=movie.title,
                rental_date=command.rental_date,
                daily_rate=command.daily_rate,
            )
        )

        logger.info("Created rental %s of '%s' for %s", rental.id, rental.item_name, rental.customer_name)
        return CreateRentalResult(
            id=rental.id,
            customer_name=rental.customer_name,
            movie_id=rental.movie_id,
            item_name=rental.item_name,
            rental_date=rental.rental_date,
            daily_rate=rental.daily_rate,
            status=rental.status,
            row_version=rental.row_version,
        )

    async def return_rental(self, command: ReturnRentalCommand) -> ReturnRentalResult:
        validate_return_rental(command)

        outcome = await self.lifecycle.return_rental(
            command.rental_id, command.return_date, command.row_version
        )
        rental = outcome.rental
        return ReturnRentalResult(
            id=rental.id,
            customer_name=rental.customer_name,
            movie_id=rental.movie_id,
            item_name=rental.item_name,
            rental_date=rental.rental_date,
            return_date=rental.return_date,
            daily_rate=rental.daily_rate,
            status=rental.status,
            days_charged=outcome.days_charged,
            total_cost=outcome.total_cost,
            row_version=rental.row_version,
        )

    async def get_rental(self, rental_id: uuid.UUID) -> RentalRecord:
        rental = await self.rental_repository.get_by_id(rental_id)
        if rental is None:
            raise NotFoundError(resource="rental", resource_id=str(rental_id))
        return rental

    async def list_rentals(self, criteria: Optional[RentalSearchCriteria] = None) -> List[RentalRecord]:
        if criteria is None:
            return await self.rental_repository.get_all()
        return await self.rental_repository.search(criteria)
