from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from retail_credit.infra.db.models.base import Base


class CreditRow(Base):
    __tablename__ = "credits"
    __table_args__ = (
        # Backstop for the per-client lock: at most one ACTIVE credit per client
        Index(
            "uq_credits_one_active_per_client",
            "client_id",
            unique=True,
            postgresql_where=text("status = 'ACTIVE'"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    sale_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("sales.id"), nullable=False, unique=True
    )
    client_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("clients.id"), nullable=False, index=True
    )

    total_amount: Mapped[Decimal] = mapped_column(Numeric(precision=14, scale=2), nullable=False)
    down_payment: Mapped[Decimal] = mapped_column(Numeric(precision=14, scale=4), nullable=False)
    financed_balance: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=4), nullable=False
    )
    interest_rate: Mapped[Decimal] = mapped_column(Numeric(precision=6, scale=4), nullable=False)
    # financed_balance (4 places) times interest_rate (4 places)
    interest: Mapped[Decimal] = mapped_column(Numeric(precision=18, scale=8), nullable=False)
    term_months: Mapped[int] = mapped_column(Integer, nullable=False)
    remaining_balance: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2), nullable=False
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class InstallmentRow(Base):
    __tablename__ = "installments"
    __table_args__ = (
        UniqueConstraint("credit_id", "sequence_number", name="uq_installments_credit_sequence"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    credit_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("credits.id"), nullable=False
    )
    sequence_number: Mapped[int] = mapped_column(Integer, nullable=False)
    value: Mapped[Decimal] = mapped_column(Numeric(precision=14, scale=2), nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    payment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
