"""Create movies and rentals tables

Revision ID: 001
Revises: None
Create Date: 2026-01-02 12:00:00.000000+00:00

What:  Creates the catalog (`movies`) and the rental records (`rentals`).
How:   Portable column types (Uuid, LargeBinary, Numeric) so the same
       revision runs on PostgreSQL and on SQLite.

rentals.movie_id deliberately has no foreign key: a movie only has to exist
when the rental is created.

Rollback: downgrade() drops both tables (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "movies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("director", sa.String(100), nullable=True),
        sa.Column("release_year", sa.Integer(), nullable=True),
        sa.Column("genre", sa.String(50), nullable=True),
        sa.Column(
            "rating",
            sa.Numeric(3, 1),
            nullable=True,
            comment="0.0 to 10.0",
        ),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="Set on insert, never updated (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="Last successful update (UTC)",
        ),
        sa.Column(
            "row_version",
            sa.LargeBinary(16),
            nullable=False,
            comment="Optimistic concurrency token, replaced on every write",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_movies_created_at", "movies", [sa.text("created_at DESC")])

    op.create_table(
        "rentals",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("movie_id", sa.Uuid(), nullable=False),
        sa.Column("customer_name", sa.String(200), nullable=False),
        sa.Column(
            "item_name",
            sa.String(200),
            nullable=False,
            comment="Movie title copied at rental time",
        ),
        sa.Column("rental_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("return_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("daily_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'Active'"),
            comment="Active or Returned; Returned exactly when return_date is set",
        ),
        sa.Column("row_version", sa.LargeBinary(16), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_rentals_movie_id", "rentals", ["movie_id"])
    op.create_index("idx_rentals_rental_date", "rentals", [sa.text("rental_date DESC")])


def downgrade() -> None:
    op.drop_index("idx_rentals_rental_date", table_name="rentals")
    op.drop_index("ix_rentals_movie_id", table_name="rentals")
    op.drop_table("rentals")
    op.drop_index("idx_movies_created_at", table_name="movies")
    op.drop_table("movies")
