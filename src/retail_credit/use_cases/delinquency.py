"""Delinquency queries over persisted credits and installments."""

from __future__ import annotations

from datetime import date

from retail_credit.domain.credit import Credit, CreditStatus, Installment
from retail_credit.domain.delinquency import is_overdue
from retail_credit.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory


class DelinquencyEvaluator:
    """
    Read-only projections used by collections and the pay-installments screen.

    - Every call opens a fresh unit of work (latest committed data, no caching)
    - Only ACTIVE credits are considered; CLOSED/CANCELLED credits owe nothing
    - Nothing is ever written
    """

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def list_overdue(self, client_id: str, as_of: date) -> list[Installment]:
        """Overdue installments of the client's active credits, oldest due date first."""
        with self._uow_factory() as uow:
            unpaid = self._unpaid_for_client(uow, client_id)
        return [i for i in unpaid if is_overdue(i, as_of)]

    def list_pending(self, client_id: str) -> list[Installment]:
        """Every unpaid installment of the client's active credits, overdue or not."""
        with self._uow_factory() as uow:
            return self._unpaid_for_client(uow, client_id)

    def list_delinquent_credits(self, as_of: date) -> list[Credit]:
        """ACTIVE credits with at least one overdue installment."""
        with self._uow_factory() as uow:
            return [
                credit
                for credit in uow.credits.list_by_status(CreditStatus.ACTIVE)
                if any(is_overdue(i, as_of) for i in uow.installments.list_by_credit(credit.id))
            ]

    def _unpaid_for_client(self, uow: UnitOfWork, client_id: str) -> list[Installment]:
        unpaid = [
            installment
            for credit in uow.credits.list_by_client(client_id)
            if credit.status is CreditStatus.ACTIVE
            for installment in uow.installments.list_by_credit(credit.id)
            if not installment.paid
        ]
        return sorted(unpaid, key=lambda i: (i.due_date, i.sequence_number))
