"""create maintenance_histories table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19 10:20:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "maintenance_histories",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("vehicle_id", sa.String(32), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("maintenance_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actual_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"]),
        sa.CheckConstraint(
            "type IN ('preventive', 'corrective')",
            name="ck_maintenance_histories_type",
        ),
        sa.CheckConstraint("cost >= 0", name="ck_maintenance_histories_cost_non_negative"),
        sa.CheckConstraint(
            "actual_cost IS NULL OR actual_cost >= 0",
            name="ck_maintenance_histories_actual_cost_non_negative",
        ),
    )
    op.create_index("ix_maintenance_histories_id", "maintenance_histories", ["id"], unique=False)
    op.create_index(
        "ix_maintenance_histories_vehicle_id", "maintenance_histories", ["vehicle_id"], unique=False
    )
    op.create_index(
        "ix_maintenance_histories_maintenance_date",
        "maintenance_histories",
        ["maintenance_date"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_maintenance_histories_maintenance_date", table_name="maintenance_histories")
    op.drop_index("ix_maintenance_histories_vehicle_id", table_name="maintenance_histories")
    op.drop_index("ix_maintenance_histories_id", table_name="maintenance_histories")
    op.drop_table("maintenance_histories")
