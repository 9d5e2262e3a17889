"""Create tip_calculations table

Revision ID: 001
Revises: None
Create Date: 2025-03-01 00:00:00.000000+00:00

What:  Creates the `tip_calculations` table, one row per stored calculation.
Rollback: downgrade() drops the table (all stored calculations are lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the tip_calculations table and its date index."""
    op.create_table(
        "tip_calculations",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False,
                  comment="Unique identifier, assigned on insert"),
        sa.Column("customer_name", sa.String(255), nullable=False,
                  comment="Name of the customer the tip was calculated for"),
        sa.Column("mobile_number", sa.String(32), nullable=False,
                  comment="Customer mobile number as entered"),
        sa.Column("bill_amount", sa.Float(), nullable=False),
        sa.Column("tip_amount", sa.Float(), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False,
                  comment="Expected to equal bill_amount + tip_amount"),
        sa.Column("tip_percentage", sa.Integer(), nullable=False,
                  comment="round(tip_amount / bill_amount * 100)"),
        sa.Column(
            "date",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When the calculation was made (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Backs ORDER BY date DESC LIMIT 10
    op.create_index(
        "idx_tip_calculations_date",
        "tip_calculations",
        [sa.text("date DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_tip_calculations_date", table_name="tip_calculations")
    op.drop_table("tip_calculations")
