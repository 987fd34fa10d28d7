from __future__ import annotations

from retail_credit.adapters.in_memory_store import StagedTable
from retail_credit.domain.credit import Credit, CreditStatus, Installment
from retail_credit.ports.credit_repository import CreditRepository, InstallmentRepository


class InMemoryCreditRepository(CreditRepository):
    """
    Canonical contract implementation for tests.

    - Stores credits keyed by id
    - Lists in creation order
    """

    def __init__(self, table: StagedTable[str, Credit]) -> None:
        self._table = table

    def add(self, credit: Credit) -> None:
        self._table.put(credit.id, credit)

    def get_by_id(self, credit_id: str) -> Credit | None:
        return self._table.get(credit_id)

    def get_by_sale(self, sale_id: str) -> Credit | None:
        return next((c for c in self._ordered() if c.sale_id == sale_id), None)

    def list_by_client(self, client_id: str) -> list[Credit]:
        return [c for c in self._ordered() if c.client_id == client_id]

    def list_by_status(self, status: CreditStatus) -> list[Credit]:
        return [c for c in self._ordered() if c.status is status]

    def update(self, credit: Credit) -> None:
        self._table.put(credit.id, credit)

    def _ordered(self) -> list[Credit]:
        return sorted(self._table.values(), key=lambda c: c.created_at)


class InMemoryInstallmentRepository(InstallmentRepository):
    def __init__(self, table: StagedTable[tuple[str, int], Installment]) -> None:
        self._table = table

    def add_many(self, installments: list[Installment]) -> None:
        for installment in installments:
            self._table.put((installment.credit_id, installment.sequence_number), installment)

    def get(self, credit_id: str, sequence_number: int) -> Installment | None:
        return self._table.get((credit_id, sequence_number))

    def list_by_credit(self, credit_id: str) -> list[Installment]:
        matches = [i for i in self._table.values() if i.credit_id == credit_id]
        return sorted(matches, key=lambda i: i.sequence_number)

    def update(self, installment: Installment) -> None:
        self._table.put((installment.credit_id, installment.sequence_number), installment)
