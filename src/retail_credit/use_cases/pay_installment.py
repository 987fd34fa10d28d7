"""Pay installment use case."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable

from retail_credit.domain.credit import PaymentResult, utc_now
from retail_credit.domain.errors import (
    CreditNotFoundError,
    InstallmentNotFoundError,
    InsufficientAmountError,
    InvalidAmountError,
)
from retail_credit.domain.money import as_money
from retail_credit.ports.unit_of_work import UnitOfWorkFactory
from retail_credit.use_cases.reconcile_client_balance import ClientBalanceReconciler

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PayInstallmentRequest:
    credit_id: str
    sequence_number: int
    amount_tendered: Decimal


class PayInstallment:
    """
    Use case for posting the payment of one installment.

    Rules:
    - The credit must be ACTIVE and the installment unpaid
    - amount_tendered must cover the installment value; any surplus is accepted
      and not tracked
    - The credit's remaining balance decreases by the installment value (never below zero)
    - When every installment is paid the credit becomes CLOSED with a zero balance

    Serialization: the client and the credit are locked for the whole operation,
    so two payments on the same credit cannot race on the balance or the all-paid check.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        reconciler: ClientBalanceReconciler | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow_factory = uow_factory
        self._reconciler = reconciler or ClientBalanceReconciler()
        self._clock = clock

    def execute(self, request: PayInstallmentRequest) -> PaymentResult:
        """
        Raises:
            InvalidAmountError: If amount_tendered is not a positive Decimal
            CreditNotFoundError: If the credit does not exist
            CreditNotActiveError: If the credit is CLOSED or CANCELLED
            InstallmentNotFoundError: If the credit has no such sequence number
            InstallmentAlreadyPaidError: If the installment was already paid
            InsufficientAmountError: If amount_tendered < installment value
            StorageFailureError: If persistence fails (nothing is left behind)
        """
        tendered = as_money(request.amount_tendered, "amount_tendered")
        if tendered <= 0:
            raise InvalidAmountError("amount_tendered must be > 0", amount_tendered=str(tendered))

        with self._uow_factory() as uow:
            located = uow.credits.get_by_id(request.credit_id)
            if located is None:
                raise CreditNotFoundError(request.credit_id)

            uow.lock_client(located.client_id)
            uow.lock_credit(located.id)

            # Re-read under the lock: a concurrent payment may have committed meanwhile
            credit = uow.credits.get_by_id(located.id)
            if credit is None:
                raise CreditNotFoundError(request.credit_id)
            credit.ensure_active()

            installment = uow.installments.get(credit.id, request.sequence_number)
            if installment is None:
                raise InstallmentNotFoundError(credit.id, request.sequence_number)

            paid_at = self._clock()
            paid_installment = installment.mark_paid(paid_at)

            if tendered < installment.value:
                raise InsufficientAmountError(
                    f"amount_tendered must be >= {installment.value}",
                    amount_tendered=str(tendered),
                    installment_value=str(installment.value),
                )

            uow.installments.update(paid_installment)

            credit = credit.apply_payment(installment.value)
            schedule = uow.installments.list_by_credit(credit.id)
            if all(i.paid for i in schedule):
                credit = credit.close()
            uow.credits.update(credit)

            balance = self._reconciler.recompute(uow, credit.client_id)

        logger.info(
            "installment.paid",
            extra={
                "credit_id": credit.id,
                "sequence_number": request.sequence_number,
                "amount_applied": str(installment.value),
                "amount_tendered": str(tendered),
                "remaining_balance": str(credit.remaining_balance),
            },
        )
        if not credit.is_active:
            logger.info(
                "credit.closed",
                extra={"credit_id": credit.id, "client_id": credit.client_id},
            )

        return PaymentResult(
            credit_id=credit.id,
            sequence_number=request.sequence_number,
            amount_applied=installment.value,
            amount_tendered=tendered,
            paid_at=paid_at,
            remaining_balance=credit.remaining_balance,
            credit_status=credit.status,
            client_balance=balance,
        )
