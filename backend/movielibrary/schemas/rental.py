"""
MovieLibrary Backend: Rental Schemas
=====================================

What:  Pydantic models for rentals: the frozen RentalRecord snapshot, the
       draft handed to RentalRepository.add, commands, results and request
       bodies.

Invariant enforced on every validated RentalRecord:
    status == Returned  ⇔  return_date is not None
    return_date >= rental_date (whenever both are present)
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from movielibrary.models.rental import RentalStatus
from movielibrary.schemas.common import UtcDatetime, VersionToken


class RentalDraft(BaseModel):
    """Everything RentalRepository.add needs; id, status and token come from the store."""
    movie_id: uuid.UUID
    customer_name: str
    item_name: str
    rental_date: UtcDatetime
    daily_rate: Decimal


class RentalRecord(BaseModel):
    """A stored rental, as last read from or written to the repository."""
    id: uuid.UUID = Field(description="Unique rental identifier")
    movie_id: uuid.UUID = Field(description="Movie the rental was opened against")
    customer_name: str = Field(description="Customer name")
    item_name: str = Field(description="Movie title at the time of rental")
    rental_date: UtcDatetime = Field(description="When the rental started (UTC)")
    return_date: Optional[UtcDatetime] = Field(
        default=None, description="When the rental was returned (UTC), null while active"
    )
    daily_rate: Decimal = Field(description="Price charged per day")
    status: RentalStatus = Field(description="Active or Returned")
    row_version: VersionToken = Field(
        description="Opaque version token (base64); send it back unchanged to return"
    )

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @model_validator(mode="after")
    def check_status_matches_return_date(self) -> "RentalRecord":
        returned = self.status is RentalStatus.RETURNED
        if returned != (self.return_date is not None):
            raise ValueError("status must be Returned exactly when return_date is set")
        if self.return_date is not None and self.return_date < self.rental_date:
            raise ValueError("return_date cannot precede rental_date")
        return self

    def as_returned(self, return_date: datetime) -> "RentalRecord":
        """Replacement record for the Active → Returned transition (validated)."""
        return RentalRecord.model_validate(
            {
                **self.model_dump(),
                "return_date": return_date,
                "status": RentalStatus.RETURNED,
            }
        )


class RentalSearchCriteria(BaseModel):
    """Rental filters, combined with AND; missing means no filter."""
    customer_name: Optional[str] = None
    movie_id: Optional[uuid.UUID] = None
    status: Optional[RentalStatus] = None


# ══════════════════════════════════════════════════════════════════════════
# Commands
# ══════════════════════════════════════════════════════════════════════════


class CreateRentalCommand(BaseModel):
    customer_name: str = Field(default="", description="Customer name (required, max 200 chars)")
    movie_id: uuid.UUID = Field(description="Movie to rent; must exist")
    rental_date: UtcDatetime = Field(description="Start of the rental")
    daily_rate: Decimal = Field(description="Price per day, greater than 0")


class ReturnRentalCommand(BaseModel):
    rental_id: uuid.UUID
    return_date: UtcDatetime
    row_version: VersionToken


# ══════════════════════════════════════════════════════════════════════════
# Results
# ══════════════════════════════════════════════════════════════════════════


class CreateRentalResult(BaseModel):
    id: uuid.UUID
    customer_name: str
    movie_id: uuid.UUID
    item_name: str
    rental_date: UtcDatetime
    daily_rate: Decimal
    status: RentalStatus
    row_version: VersionToken
    message: str = "Rental created successfully"


class ReturnRentalResult(BaseModel):
    id: uuid.UUID
    customer_name: str
    movie_id: uuid.UUID
    item_name: str
    rental_date: UtcDatetime
    return_date: UtcDatetime
    daily_rate: Decimal
    status: RentalStatus
    days_charged: int
    total_cost: Decimal
    row_version: VersionToken
    message: str = "Rental returned successfully"


# ══════════════════════════════════════════════════════════════════════════
# Request Bodies
# ══════════════════════════════════════════════════════════════════════════


class CreateRentalRequest(CreateRentalCommand):
    """Body of POST /api/rentals."""


class ReturnRentalRequest(BaseModel):
    """Body of PUT /api/rentals/{id}/return."""
    return_date: UtcDatetime = Field(description="When the movie came back")
    row_version: VersionToken = Field(description="Version token from the last read (base64)")


class RentalListResponse(BaseModel):
    rentals: list[RentalRecord]
    total_count: int

    @classmethod
    def of(cls, rentals: list[RentalRecord]) -> "RentalListResponse":
        return cls(rentals=rentals, total_count=len(rentals))
