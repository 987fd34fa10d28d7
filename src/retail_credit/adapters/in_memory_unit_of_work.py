from __future__ import annotations

import threading

from retail_credit.adapters.in_memory_collaborators import (
    InMemoryClientDirectory,
    InMemorySaleDirectory,
)
from retail_credit.adapters.in_memory_credit_repository import (
    InMemoryCreditRepository,
    InMemoryInstallmentRepository,
)
from retail_credit.adapters.in_memory_store import InMemoryStore, StagedTable
from retail_credit.ports.unit_of_work import UnitOfWork


class InMemoryUnitOfWork(UnitOfWork):
    """
    Canonical UnitOfWork implementation for tests and embedded use.

    - Writes are staged per unit of work and published atomically on commit
    - Rollback discards staged writes (the committed store is never touched)
    - Client/credit locks are per-key re-entrant locks shared through the store
    """

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self._tables: list[StagedTable] = [
            StagedTable(store.credits, store.guard),
            StagedTable(store.installments, store.guard),
            StagedTable(store.sales, store.guard),
            StagedTable(store.clients, store.guard),
        ]
        credits, installments, sales, clients = self._tables
        self.credits = InMemoryCreditRepository(credits)
        self.installments = InMemoryInstallmentRepository(installments)
        self.sales = InMemorySaleDirectory(sales)
        self.clients = InMemoryClientDirectory(clients)
        self._held: list[threading.RLock] = []

    def commit(self) -> None:
        with self._store.guard:
            for table in self._tables:
                table.flush()

    def rollback(self) -> None:
        for table in self._tables:
            table.discard()

    def close(self) -> None:
        while self._held:
            self._held.pop().release()

    def lock_client(self, client_id: str) -> None:
        self._acquire("client", client_id)

    def lock_credit(self, credit_id: str) -> None:
        self._acquire("credit", credit_id)

    def _acquire(self, kind: str, key: str) -> None:
        lock = self._store.lock_for(kind, key)
        lock.acquire()
        self._held.append(lock)
