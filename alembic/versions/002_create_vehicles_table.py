"""create vehicles table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 10:10:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "vehicles",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("license_plate", sa.String(16), nullable=False),
        sa.Column("brand", sa.String(100), nullable=False),
        sa.Column("model", sa.String(100), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("renter_id", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["renter_id"], ["users.id"]),
        sa.CheckConstraint(
            "status IN ('available', 'rented', 'in_maintenance')",
            name="ck_vehicles_status",
        ),
        # Only a rented vehicle can have a renter
        sa.CheckConstraint(
            "renter_id IS NULL OR status = 'rented'",
            name="ck_vehicles_renter_only_when_rented",
        ),
        sa.CheckConstraint("year >= 1900", name="ck_vehicles_year_min"),
    )
    op.create_index("ix_vehicles_id", "vehicles", ["id"], unique=False)
    op.create_index("ix_vehicles_license_plate", "vehicles", ["license_plate"], unique=True)
    op.create_index("ix_vehicles_status", "vehicles", ["status"], unique=False)
    op.create_index("ix_vehicles_renter_id", "vehicles", ["renter_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_vehicles_renter_id", table_name="vehicles")
    op.drop_index("ix_vehicles_status", table_name="vehicles")
    op.drop_index("ix_vehicles_license_plate", table_name="vehicles")
    op.drop_index("ix_vehicles_id", table_name="vehicles")
    op.drop_table("vehicles")
