from __future__ import annotations

from dataclasses import replace

from retail_credit.adapters.in_memory_store import StagedTable
from retail_credit.domain.credit import Client, ClientBalance, Sale
from retail_credit.ports.collaborators import ClientDirectory, SaleDirectory


class InMemorySaleDirectory(SaleDirectory):
    def __init__(self, table: StagedTable[str, Sale]) -> None:
        self._table = table

    def get_by_id(self, sale_id: str) -> Sale | None:
        return self._table.get(sale_id)

    def mark_voided(self, sale_id: str) -> None:
        sale = self._table.get(sale_id)
        if sale is not None:
            self._table.put(sale_id, replace(sale, voided=True))


class InMemoryClientDirectory(ClientDirectory):
    def __init__(self, table: StagedTable[str, Client]) -> None:
        self._table = table

    def get_by_id(self, client_id: str) -> Client | None:
        return self._table.get(client_id)

    def update_balance(self, client_id: str, balance: ClientBalance) -> None:
        client = self._table.get(client_id)
        if client is not None:
            self._table.put(
                client_id,
                replace(
                    client,
                    outstanding_balance=balance.outstanding_balance,
                    available_credit=balance.available_credit,
                ),
            )
