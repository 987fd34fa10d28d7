"""Widen credits.interest scale

Revision ID: 7b52e0c1f9d3
Revises: 3c1e9b7d4a20
Create Date: 2026-10-20 09:41:07.512904

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "7b52e0c1f9d3"
down_revision: Union[str, Sequence[str], None] = "3c1e9b7d4a20"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # A 4-place rate on a 4-place financed balance yields 8 decimals
    op.alter_column(
        "credits",
        "interest",
        existing_type=sa.Numeric(precision=14, scale=6),
        type_=sa.Numeric(precision=18, scale=8),
        existing_nullable=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.alter_column(
        "credits",
        "interest",
        existing_type=sa.Numeric(precision=18, scale=8),
        type_=sa.Numeric(precision=14, scale=6),
        existing_nullable=False,
    )
