"""List credits use case."""

from __future__ import annotations

from dataclasses import dataclass

from retail_credit.domain.credit import Credit, CreditStatus
from retail_credit.ports.unit_of_work import UnitOfWorkFactory


@dataclass(frozen=True, slots=True)
class ListCreditsRequest:
    """Both filters are optional; an empty request lists every credit."""

    client_id: str | None = None
    status: CreditStatus | None = None


class ListCredits:
    """
    Use case for listing credits by client and/or status.

    Read-only: no locks are taken. Credits are returned oldest first.
    An unknown client yields an empty list.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, request: ListCreditsRequest) -> list[Credit]:
        with self._uow_factory() as uow:
            if request.client_id is not None:
                credits = uow.credits.list_by_client(request.client_id)
                if request.status is not None:
                    credits = [c for c in credits if c.status is request.status]
                return credits

            if request.status is not None:
                return uow.credits.list_by_status(request.status)

            credits = [c for status in CreditStatus for c in uow.credits.list_by_status(status)]

        return sorted(credits, key=lambda c: (c.created_at, c.id))
