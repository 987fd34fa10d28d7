"""Client balance reconciliation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from retail_credit.domain.credit import ClientBalance, CreditStatus
from retail_credit.domain.errors import ClientNotFoundError
from retail_credit.domain.money import ZERO
from retail_credit.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

logger = logging.getLogger(__name__)


class ClientBalanceReconciler:
    """
    Keeps a client's cached balance projection consistent with their credits.

    - outstanding_balance = sum of remaining_balance over the client's ACTIVE credits
    - available_credit = max(0, credit_limit - outstanding_balance)

    Runs inside the caller's unit of work, so its write commits or rolls back
    together with the transition that triggered it. Stores nothing of its own.
    """

    def recompute(self, uow: UnitOfWork, client_id: str) -> ClientBalance:
        """
        Recompute and write back the client's balance projection.

        Precondition: caller holds the client lock in uow.

        Raises:
            ClientNotFoundError: If the client record does not exist
        """
        client = uow.clients.get_by_id(client_id)
        if client is None:
            raise ClientNotFoundError(client_id)

        outstanding = sum(
            (
                credit.remaining_balance
                for credit in uow.credits.list_by_client(client_id)
                if credit.status is CreditStatus.ACTIVE
            ),
            ZERO,
        )
        balance = ClientBalance(
            outstanding_balance=outstanding,
            available_credit=max(ZERO, client.credit_limit - outstanding),
        )
        uow.clients.update_balance(client_id, balance)

        logger.debug(
            "Client balance reconciled",
            extra={
                "client_id": client_id,
                "outstanding_balance": str(balance.outstanding_balance),
                "available_credit": str(balance.available_credit),
            },
        )
        return balance


@dataclass(frozen=True, slots=True)
class RecomputeClientBalanceRequest:
    client_id: str


class RecomputeClientBalance:
    """Standalone reconciliation for a single client (repairs, back-office jobs)."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        reconciler: ClientBalanceReconciler | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._reconciler = reconciler or ClientBalanceReconciler()

    def execute(self, request: RecomputeClientBalanceRequest) -> ClientBalance:
        with self._uow_factory() as uow:
            uow.lock_client(request.client_id)
            return self._reconciler.recompute(uow, request.client_id)
