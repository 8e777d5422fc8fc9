"""
MovieLibrary Backend: Rental Route Handlers
============================================

Endpoints:
    GET  /api/rentals               list, most recent rental_date first
    GET  /api/rentals/{id}          one rental (404 when missing)
    POST /api/rentals               create against an existing movie (201)
    PUT  /api/rentals/{id}/return   return with row_version (400 / 404 / 409)
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from movielibrary.models.rental import RentalStatus
from movielibrary.routes.dependencies import get_rental_service
from movielibrary.schemas.common import ErrorResponse
from movielibrary.schemas.rental import (
    CreateRentalCommand,
    CreateRentalRequest,
    CreateRentalResult,
    RentalListResponse,
    RentalRecord,
    RentalSearchCriteria,
    ReturnRentalCommand,
    ReturnRentalRequest,
    ReturnRentalResult,
)
from movielibrary.services.rental_service import RentalService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rentals", tags=["Rentals"])


@router.get(
    "",
    response_model=RentalListResponse,
    summary="List rentals",
    description="Optional filters: customer name substring, movie id, status.",
)
async def list_rentals(
    customer_name: Optional[str] = Query(default=None, description="Substring of the customer name"),
    movie_id: Optional[UUID] = Query(default=None, description="Only rentals of this movie"),
    rental_status: Optional[RentalStatus] = Query(
        default=None, alias="status", description="Active or Returned"
    ),
    service: RentalService = Depends(get_rental_service),
) -> RentalListResponse:
    criteria = None
    if customer_name or movie_id or rental_status:
        criteria = RentalSearchCriteria(
            customer_name=customer_name, movie_id=movie_id, status=rental_status
        )
    return RentalListResponse.of(await service.list_rentals(criteria))


@router.get(
    "/{rental_id}",
    response_model=RentalRecord,
    responses={404: {"description": "Rental not found", "model": ErrorResponse}},
    summary="Get a rental by id",
)
async def get_rental(
    rental_id: UUID,
    service: RentalService = Depends(get_rental_service),
) -> RentalRecord:
    return await service.get_rental(rental_id)


@router.post(
    "",
    response_model=CreateRentalResult,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Validation failed", "model": ErrorResponse},
        404: {"description": "Movie not found", "model": ErrorResponse},
    },
    summary="Rent a movie",
)
async def create_rental(
    body: CreateRentalRequest,
    service: RentalService = Depends(get_rental_service),
) -> CreateRentalResult:
    return await service.create_rental(CreateRentalCommand.model_validate(body.model_dump()))


@router.put(
    "/{rental_id}/return",
    response_model=ReturnRentalResult,
    responses={
        400: {"description": "Invalid return (already returned, bad dates)", "model": ErrorResponse},
        404: {"description": "Rental not found", "model": ErrorResponse},
        409: {"description": "Rental was modified by another request", "model": ErrorResponse},
    },
    summary="Return a rental",
    description=(
        "Marks the rental Returned and reports the amount owed: whole days "
        "rented (at least one) times the daily rate."
    ),
)
async def return_rental(
    rental_id: UUID,
    body: ReturnRentalRequest,
    service: RentalService = Depends(get_rental_service),
) -> ReturnRentalResult:
    command = ReturnRentalCommand(
        rental_id=rental_id,
        return_date=body.return_date,
        row_version=body.row_version,
    )
    return await service.return_rental(command)
