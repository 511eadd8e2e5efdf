"""seed conversion factors

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-18 00:00:01.000000

Factors convert start_unit -> end_unit (amount * factor). The reverse
direction is derived at lookup time, so only one direction is stored.
"""
from typing import Sequence, Union

from alembic import op

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        INSERT INTO conversion_factors (category, start_unit, end_unit, factor) VALUES
            ('electricity', 'mwh',    'kwh',     1000),
            ('electricity', 'wh',     'kwh',     0.001),
            ('natural_gas', 'ccf',    'therms',  1.037),
            ('natural_gas', 'mcf',    'therms',  10.37),
            ('gasoline',    'liters', 'gallons', 0.264172),
            ('air_travel',  'km',     'miles',   0.621371),
            ('food',        'g',      'kg',      0.001),
            ('food',        'lb',     'kg',      0.453592),
            ('food',        'oz',     'kg',      0.0283495)
    """)


def downgrade() -> None:
    op.execute("DELETE FROM conversion_factors")
