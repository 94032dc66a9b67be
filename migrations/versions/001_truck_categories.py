"""Truck category reference table.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── truck_categories ──────────────────────────────────────────────
    op.create_table(
        "truck_categories",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), unique=True, nullable=False),
        sa.Column(
            "truck_type",
            sa.Enum("MINI_TRUCK", "PICKUP", "LORRY", "TRUCK", name="trucktype"),
            nullable=False,
        ),
        sa.Column("capacity", sa.Float, nullable=False),
        sa.Column("base_price", sa.Float, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, server_default=sa.true(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_truck_categories_type_active",
        "truck_categories",
        ["truck_type", "is_active"],
    )


def downgrade() -> None:
    op.drop_table("truck_categories")
    op.execute("DROP TYPE IF EXISTS trucktype")
