"""Cancel credit use case."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from retail_credit.domain.credit import CancellationResult
from retail_credit.domain.errors import CreditNotFoundError
from retail_credit.ports.unit_of_work import UnitOfWorkFactory
from retail_credit.use_cases.reconcile_client_balance import ClientBalanceReconciler

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CancelCreditRequest:
    credit_id: str


class CancelCredit:
    """
    Use case for administratively voiding an ACTIVE credit.

    Effect:
    - Credit becomes CANCELLED with a zero remaining balance
    - The originating sale is marked voided
    - The full financed-plus-interest obligation is reversed (reported as
      reversed_amount), regardless of how many installments were paid
    - The client's balance projection is recomputed

    Installments are kept as history; they are not deleted.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        reconciler: ClientBalanceReconciler | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._reconciler = reconciler or ClientBalanceReconciler()

    def execute(self, request: CancelCreditRequest) -> CancellationResult:
        """
        Raises:
            CreditNotFoundError: If the credit does not exist
            CreditNotActiveError: If the credit is already CLOSED or CANCELLED
            StorageFailureError: If persistence fails (nothing is left behind)
        """
        with self._uow_factory() as uow:
            located = uow.credits.get_by_id(request.credit_id)
            if located is None:
                raise CreditNotFoundError(request.credit_id)

            uow.lock_client(located.client_id)
            uow.lock_credit(located.id)

            credit = uow.credits.get_by_id(located.id)
            if credit is None:
                raise CreditNotFoundError(request.credit_id)
            cancelled = credit.cancel()

            unpaid = sum(1 for i in uow.installments.list_by_credit(credit.id) if not i.paid)

            uow.credits.update(cancelled)
            uow.sales.mark_voided(credit.sale_id)
            balance = self._reconciler.recompute(uow, credit.client_id)

        logger.info(
            "credit.cancelled",
            extra={
                "credit_id": credit.id,
                "sale_id": credit.sale_id,
                "client_id": credit.client_id,
                "reversed_amount": str(credit.total_obligation),
                "unpaid_installments": unpaid,
            },
        )

        return CancellationResult(
            credit_id=credit.id,
            sale_id=credit.sale_id,
            reversed_amount=credit.total_obligation,
            unpaid_installments=unpaid,
            client_balance=balance,
        )
