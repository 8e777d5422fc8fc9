"""
MovieLibrary Backend: Rental Repository
========================================

What:  Versioned CRUD over the `rentals` table.
Who:   Used by RentalService (create, read) and RentalLifecycle (return).

Update writes the mutable columns (customer_name, rental_date, return_date,
daily_rate, status) under the same conditional-UPDATE scheme as movies.
movie_id and item_name are fixed at creation and never written again.
No command deletes a rental; `delete` completes the per-entity repository contract.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from movielibrary.models.rental import Rental, RentalStatus
from movielibrary.repositories.base import (
    UpdateOutcome,
    WriteResult,
    database_errors,
    new_version_token,
)
from movielibrary.schemas.rental import RentalDraft, RentalRecord, RentalSearchCriteria

logger = logging.getLogger(__name__)


class RentalRepository:
    """Versioned repository for Rental records."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, rental_id: uuid.UUID) -> Optional[RentalRecord]:
        query = (
            select(Rental)
            .where(Rental.id == rental_id)
            .execution_options(populate_existing=True)
        )
        with database_errors("get rental", rental_id=str(rental_id)):
            result = await self.session.execute(query)
            rental = result.scalar_one_or_none()
        return RentalRecord.model_validate(rental) if rental is not None else None

    async def get_all(self) -> List[RentalRecord]:
        return await self.search(RentalSearchCriteria())

    async def search(self, criteria: RentalSearchCriteria) -> List[RentalRecord]:
        query = select(Rental)

        if criteria.customer_name and criteria.customer_name.strip():
            query = query.where(
                Rental.customer_name.icontains(criteria.customer_name.strip(), autoescape=True)
            )
        if criteria.movie_id is not None:
            query = query.where(Rental.movie_id == criteria.movie_id)
        if criteria.status is not None:
            query = query.where(Rental.status == criteria.status.value)

        query = query.order_by(desc(Rental.rental_date)).execution_options(populate_existing=True)

        with database_errors("list rentals"):
            result = await self.session.execute(query)
            rentals = result.scalars().all()
        return [RentalRecord.model_validate(r) for r in rentals]

    async def add(self, draft: RentalDraft) -> RentalRecord:
        rental = Rental(
            **draft.model_dump(),
            return_date=None,
            status=RentalStatus.ACTIVE.value,
            row_version=new_version_token(),
        )
        with database_errors("add rental", movie_id=str(draft.movie_id)):
            self.session.add(rental)
            await self.session.flush()
        logger.info("Rental %s added for movie %s", rental.id, rental.movie_id)
        return RentalRecord.model_validate(rental)

    async def update(self, rental: RentalRecord, expected_version: bytes) -> WriteResult[RentalRecord]:
        new_version = new_version_token()

        statement = (
            update(Rental)
            .where(Rental.id == rental.id, Rental.row_version == expected_version)
            .values(
                customer_name=rental.customer_name,
                rental_date=rental.rental_date,
                return_date=rental.return_date,
                daily_rate=rental.daily_rate,
                status=rental.status.value,
                row_version=new_version,
            )
            .execution_options(synchronize_session=False)
        )

        with database_errors("update rental", rental_id=str(rental.id)):
            result = await self.session.execute(statement)

        if result.rowcount == 0:
            if await self.exists(rental.id):
                logger.warning("Rental %s update rejected: version token is stale", rental.id)
                return WriteResult(UpdateOutcome.CONFLICT)
            return WriteResult(UpdateOutcome.NOT_FOUND)

        logger.info("Rental %s updated (status=%s)", rental.id, rental.status.value)
        return WriteResult(UpdateOutcome.SUCCESS, rental.model_copy(update={"row_version": new_version}))

    async def delete(self, rental_id: uuid.UUID) -> bool:
        statement = (
            delete(Rental)
            .where(Rental.id == rental_id)
            .execution_options(synchronize_session=False)
        )
        with database_errors("delete rental", rental_id=str(rental_id)):
            result = await self.session.execute(statement)
        if result.rowcount > 0:
            logger.info("Rental %s deleted", rental_id)
            return True
        return False

    async def exists(self, rental_id: uuid.UUID) -> bool:
        with database_errors("check rental", rental_id=str(rental_id)):
            found = await self.session.scalar(
                select(Rental.id).where(Rental.id == rental_id).limit(1)
            )
        return found is not None
