"""Create district and upazila reference tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 00:10:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create location reference tables."""
    op.create_table(
        "districts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("bn_name", sa.Text(), nullable=True),
    )

    op.create_table(
        "upazilas",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("district_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("bn_name", sa.Text(), nullable=True),
    )
    op.create_index("ix_upazilas_district_id", "upazilas", ["district_id"])


def downgrade() -> None:
    """Drop location reference tables."""
    op.drop_index("ix_upazilas_district_id", table_name="upazilas")
    op.drop_table("upazilas")
    op.drop_table("districts")
