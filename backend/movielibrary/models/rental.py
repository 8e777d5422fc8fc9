"""
MovieLibrary Backend: Rental SQLAlchemy Model
==============================================

What:  ORM model representing the `rentals` table, plus the RentalStatus enum.
Who:   Used by RentalRepository; RentalStatus is shared with the lifecycle
       engine and the API schemas.

Table Design:
    - movie_id: the Movie the rental was opened against. Checked to exist at
      creation only; there is no foreign key, so later catalog edits or
      deletions never touch historical rentals.
    - item_name: the Movie title copied at rental time
    - status/return_date: 'Returned' exactly when return_date is set
    - row_version: opaque version token, replaced on every write
"""

import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, LargeBinary, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from movielibrary.database import Base

CUSTOMER_NAME_MAX_LENGTH = 200
ITEM_NAME_MAX_LENGTH = 200
DAILY_RATE_PRECISION = 10
DAILY_RATE_SCALE = 2


class RentalStatus(str, enum.Enum):
    """
    Two-state rental lifecycle.

        Active ──return──▶ Returned (terminal)
    """

    ACTIVE = "Active"
    RETURNED = "Returned"

    def can_transition_to(self, target: "RentalStatus") -> bool:
        return self is RentalStatus.ACTIVE and target is RentalStatus.RETURNED


class Rental(Base):
    """A single rental of one movie by one customer."""

    __tablename__ = "rentals"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    movie_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    customer_name: Mapped[str] = mapped_column(String(CUSTOMER_NAME_MAX_LENGTH), nullable=False)
    item_name: Mapped[str] = mapped_column(String(ITEM_NAME_MAX_LENGTH), nullable=False)

    rental_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    return_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    daily_rate: Mapped[Decimal] = mapped_column(
        Numeric(DAILY_RATE_PRECISION, DAILY_RATE_SCALE), nullable=False
    )

    # VARCHAR rather than a native ENUM so the same DDL runs on SQLite
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=RentalStatus.ACTIVE.value,
    )

    row_version: Mapped[bytes] = mapped_column(LargeBinary(16), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<Rental(id={self.id}, movie_id={self.movie_id}, "
            f"status='{self.status}')>"
        )


Index("idx_rentals_rental_date", Rental.rental_date.desc())
