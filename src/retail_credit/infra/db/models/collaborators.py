"""Host-owned tables, mapped only with the columns the credit engine touches."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from retail_credit.infra.db.models.base import Base


class ClientRow(Base):
    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    credit_limit: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2), nullable=False, default=Decimal("0")
    )
    # Balance projection, written only by the reconciler
    outstanding_balance: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2), nullable=False, default=Decimal("0")
    )
    available_credit: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2), nullable=False, default=Decimal("0")
    )


class SaleRow(Base):
    __tablename__ = "sales"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    client_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    total: Mapped[Decimal] = mapped_column(Numeric(precision=14, scale=2), nullable=False)
    is_credit: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    voided: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
