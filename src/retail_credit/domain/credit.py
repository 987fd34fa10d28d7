from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

from retail_credit.domain.errors import (
    CreditNotActiveError,
    InstallmentAlreadyPaidError,
)
from retail_credit.domain.money import ZERO, round_money


class CreditStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ==============================================================================
# Collaborator records (owned by the host application)
# ==============================================================================


@dataclass(frozen=True, slots=True)
class Sale:
    id: str
    client_id: str
    total: Decimal
    is_credit: bool
    voided: bool = False


@dataclass(frozen=True, slots=True)
class Client:
    id: str
    credit_limit: Decimal
    outstanding_balance: Decimal = ZERO
    available_credit: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class ClientBalance:
    """Projection written back to the client record by the reconciler."""

    outstanding_balance: Decimal
    available_credit: Decimal


# ==============================================================================
# Credit aggregate
# ==============================================================================


@dataclass(frozen=True, slots=True)
class Credit:
    """
    One financed purchase.

    State machine:
        ACTIVE -> CLOSED     (every installment paid)
        ACTIVE -> CANCELLED  (administrative void)
    CLOSED and CANCELLED are terminal.
    """

    id: str
    sale_id: str
    client_id: str
    total_amount: Decimal
    down_payment: Decimal
    financed_balance: Decimal
    interest_rate: Decimal
    interest: Decimal
    term_months: int
    remaining_balance: Decimal
    created_at: datetime
    status: CreditStatus = CreditStatus.ACTIVE

    @property
    def total_obligation(self) -> Decimal:
        return round_money(self.financed_balance + self.interest)

    @property
    def is_active(self) -> bool:
        return self.status is CreditStatus.ACTIVE

    def ensure_active(self) -> None:
        if not self.is_active:
            raise CreditNotActiveError(
                f"Credit '{self.id}' is {self.status.value}",
                credit_id=self.id,
                status=self.status.value,
            )

    def apply_payment(self, value: Decimal) -> Credit:
        """Decrease the remaining balance by an installment value, floored at zero."""
        self.ensure_active()
        return replace(self, remaining_balance=max(ZERO, self.remaining_balance - value))

    def close(self) -> Credit:
        self.ensure_active()
        return replace(self, status=CreditStatus.CLOSED, remaining_balance=ZERO)

    def cancel(self) -> Credit:
        self.ensure_active()
        return replace(self, status=CreditStatus.CANCELLED, remaining_balance=ZERO)


@dataclass(frozen=True, slots=True)
class Installment:
    credit_id: str
    sequence_number: int
    value: Decimal
    due_date: date
    payment_date: datetime | None = None
    paid: bool = False
    id: str = ""

    def mark_paid(self, paid_at: datetime) -> Installment:
        """Set paid flag and payment date together. Never reversible."""
        if self.paid:
            raise InstallmentAlreadyPaidError(
                f"Installment {self.sequence_number} of credit '{self.credit_id}' is already paid",
                credit_id=self.credit_id,
                sequence_number=self.sequence_number,
            )
        return replace(self, paid=True, payment_date=paid_at)


# ==============================================================================
# Operation results
# ==============================================================================


@dataclass(frozen=True, slots=True)
class PaymentResult:
    credit_id: str
    sequence_number: int
    amount_applied: Decimal
    amount_tendered: Decimal
    paid_at: datetime
    remaining_balance: Decimal
    credit_status: CreditStatus
    client_balance: ClientBalance


@dataclass(frozen=True, slots=True)
class CancellationResult:
    credit_id: str
    sale_id: str
    reversed_amount: Decimal  # Full financed-plus-interest obligation
    unpaid_installments: int
    client_balance: ClientBalance


@dataclass(frozen=True, slots=True)
class CreditSnapshot:
    credit: Credit
    installments: list[Installment]

    @property
    def paid_installments(self) -> int:
        return sum(1 for installment in self.installments if installment.paid)

    @property
    def pending_installments(self) -> int:
        return len(self.installments) - self.paid_installments

    @property
    def next_installment(self) -> Installment | None:
        return next((i for i in self.installments if not i.paid), None)
