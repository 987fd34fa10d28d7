"""Create clients, sales, credits and installments

Revision ID: 3c1e9b7d4a20
Revises:
Create Date: 2026-10-19 10:12:41.118230

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1e9b7d4a20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "clients",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("credit_limit", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("outstanding_balance", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("available_credit", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "sales",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("client_id", sa.String(length=64), nullable=False),
        sa.Column("total", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("is_credit", sa.Boolean(), nullable=False),
        sa.Column("voided", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_sales_client_id"), "sales", ["client_id"], unique=False)

    op.create_table(
        "credits",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sale_id", sa.String(length=64), nullable=False),
        sa.Column("client_id", sa.String(length=64), nullable=False),
        sa.Column("total_amount", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("down_payment", sa.Numeric(precision=14, scale=4), nullable=False),
        sa.Column("financed_balance", sa.Numeric(precision=14, scale=4), nullable=False),
        sa.Column("interest_rate", sa.Numeric(precision=6, scale=4), nullable=False),
        sa.Column("interest", sa.Numeric(precision=14, scale=6), nullable=False),
        sa.Column("term_months", sa.Integer(), nullable=False),
        sa.Column("remaining_balance", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"]),
        sa.ForeignKeyConstraint(["sale_id"], ["sales.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sale_id"),
    )
    op.create_index(op.f("ix_credits_client_id"), "credits", ["client_id"], unique=False)
    op.create_index(op.f("ix_credits_status"), "credits", ["status"], unique=False)
    op.create_index(
        "uq_credits_one_active_per_client",
        "credits",
        ["client_id"],
        unique=True,
        postgresql_where=sa.text("status = 'ACTIVE'"),
    )

    op.create_table(
        "installments",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("credit_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sequence_number", sa.Integer(), nullable=False),
        sa.Column("value", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("payment_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("paid", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(["credit_id"], ["credits.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "credit_id", "sequence_number", name="uq_installments_credit_sequence"
        ),
    )
    op.create_index(op.f("ix_installments_due_date"), "installments", ["due_date"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_installments_due_date"), table_name="installments")
    op.drop_table("installments")
    op.drop_index(
        "uq_credits_one_active_per_client",
        table_name="credits",
        postgresql_where=sa.text("status = 'ACTIVE'"),
    )
    op.drop_index(op.f("ix_credits_status"), table_name="credits")
    op.drop_index(op.f("ix_credits_client_id"), table_name="credits")
    op.drop_table("credits")
    op.drop_index(op.f("ix_sales_client_id"), table_name="sales")
    op.drop_table("sales")
    op.drop_table("clients")
