"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _event_columns() -> list:
    """Columns shared by every consumption event table."""
    return [
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("household_id", sa.Integer(), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=False),
        sa.Column("period_end", sa.Date(), nullable=False),
        sa.Column("co2e_kg", sa.Numeric(14, 4), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _metered_columns() -> list:
    return [
        sa.Column("quantity", sa.Numeric(14, 4), nullable=True),
        sa.Column("unit", sa.String(16), nullable=False),
        sa.Column("canonical_quantity", sa.Numeric(14, 4), nullable=True),
        sa.Column("carbon_intensity", sa.Numeric(14, 6), nullable=True),
    ]


def _event_indexes(table: str) -> None:
    op.create_index(f"ix_{table}_id", table, ["id"])
    op.create_index(f"ix_{table}_household_id", table, ["household_id"])
    op.create_index(f"ix_{table}_period_start", table, ["period_start"])


def upgrade() -> None:
    # --- households ---
    op.create_table(
        "households",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("num_members", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("sq_ft", sa.Integer(), nullable=True),
        sa.Column("num_vehicles", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("zipcode", sa.String(10), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_households_id", "households", ["id"])

    # --- household_summary ---
    op.create_table(
        "household_summary",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("household_id", sa.Integer(), nullable=False),
        sa.Column("electricity", sa.Numeric(14, 4), nullable=True),
        sa.Column("natural_gas", sa.Numeric(14, 4), nullable=True),
        sa.Column("gasoline", sa.Numeric(14, 4), nullable=True),
        sa.Column("air_travel", sa.Numeric(14, 4), nullable=True),
        sa.Column("food", sa.Numeric(14, 4), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["household_id"], ["households.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("household_id"),
    )
    op.create_index("ix_household_summary_id", "household_summary", ["id"])

    # --- conversion_factors ---
    op.create_table(
        "conversion_factors",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("start_unit", sa.String(16), nullable=False),
        sa.Column("end_unit", sa.String(16), nullable=False),
        sa.Column("factor", sa.Numeric(18, 8), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("category", "start_unit", "end_unit", name="uq_conversion_factor_pair"),
    )
    op.create_index("ix_conversion_factors_id", "conversion_factors", ["id"])
    op.create_index("ix_conversion_factors_category", "conversion_factors", ["category"])

    # --- electricity / natural_gas ---
    for table in ("electricity", "natural_gas"):
        op.create_table(
            table,
            *_event_columns(),
            *_metered_columns(),
            sa.ForeignKeyConstraint(["household_id"], ["households.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.CheckConstraint("co2e_kg >= 0", name=f"ck_{table}_co2e_nonneg"),
            sa.CheckConstraint("period_end >= period_start", name=f"ck_{table}_period"),
        )
        _event_indexes(table)

    # --- gasoline ---
    op.create_table(
        "gasoline",
        *_event_columns(),
        *_metered_columns(),
        sa.Column("dollars", sa.Numeric(12, 2), nullable=True),
        sa.Column("price_per_unit", sa.Numeric(10, 4), nullable=True),
        sa.ForeignKeyConstraint(["household_id"], ["households.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("co2e_kg >= 0", name="ck_gasoline_co2e_nonneg"),
    )
    _event_indexes("gasoline")

    # --- air_travel ---
    op.create_table(
        "air_travel",
        *_event_columns(),
        *_metered_columns(),
        sa.Column("return_date", sa.Date(), nullable=True),
        sa.Column("roundtrip", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("num_travelers", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("origin", sa.String(64), nullable=True),
        sa.Column("destination", sa.String(64), nullable=True),
        sa.Column("direct_entry", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("co2e_kg_per_trip", sa.Numeric(14, 4), nullable=True),
        sa.ForeignKeyConstraint(["household_id"], ["households.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("co2e_kg >= 0", name="ck_air_travel_co2e_nonneg"),
        sa.CheckConstraint("num_travelers >= 1", name="ck_air_travel_travelers"),
    )
    _event_indexes("air_travel")

    # --- food_entries / food_details ---
    op.create_table(
        "food_entries",
        *_event_columns(),
        sa.Column("entry_type", sa.String(32), nullable=False, server_default="grocery"),
        sa.ForeignKeyConstraint(["household_id"], ["households.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("co2e_kg >= 0", name="ck_food_entries_co2e_nonneg"),
    )
    _event_indexes("food_entries")

    op.create_table(
        "food_details",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("food_entry_id", sa.Integer(), nullable=False),
        sa.Column("item", sa.String(128), nullable=False),
        sa.Column("food_category", sa.String(32), nullable=False, server_default="other"),
        sa.Column("packaged", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_metered_columns(),
        sa.Column("co2e_kg", sa.Numeric(14, 4), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["food_entry_id"], ["food_entries.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("co2e_kg >= 0", name="ck_food_details_co2e_nonneg"),
    )
    op.create_index("ix_food_details_id", "food_details", ["id"])
    op.create_index("ix_food_details_food_entry_id", "food_details", ["food_entry_id"])


def downgrade() -> None:
    op.drop_table("food_details")
    op.drop_table("food_entries")
    op.drop_table("air_travel")
    op.drop_table("gasoline")
    op.drop_table("natural_gas")
    op.drop_table("electricity")
    op.drop_table("conversion_factors")
    op.drop_table("household_summary")
    op.drop_table("households")
