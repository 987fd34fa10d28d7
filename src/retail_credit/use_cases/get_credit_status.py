"""Get credit status use case."""

from __future__ import annotations

from dataclasses import dataclass

from retail_credit.domain.credit import CreditSnapshot
from retail_credit.domain.errors import CreditNotFoundError
from retail_credit.ports.unit_of_work import UnitOfWorkFactory


@dataclass(frozen=True, slots=True)
class GetCreditStatusRequest:
    credit_id: str


class GetCreditStatus:
    """
    Use case for reading a credit together with its schedule.

    Read-only: no locks are taken, the snapshot reflects the last committed state.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, request: GetCreditStatusRequest) -> CreditSnapshot:
        """
        Raises:
            CreditNotFoundError: If the credit does not exist
        """
        with self._uow_factory() as uow:
            credit = uow.credits.get_by_id(request.credit_id)
            if credit is None:
                raise CreditNotFoundError(request.credit_id)

            installments = uow.installments.list_by_credit(credit.id)

        return CreditSnapshot(credit=credit, installments=installments)
