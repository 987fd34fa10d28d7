"""Shared state for the in-memory adapters.

Committed rows live in plain dicts owned by InMemoryStore. Each unit of work
stages its writes in StagedTable overlays and publishes them all at once on
commit, so a failed operation never leaves partial state behind.
"""

from __future__ import annotations

import threading
import weakref
from typing import Generic, Hashable, Iterable, TypeVar

from retail_credit.domain.credit import Client, Credit, Installment, Sale

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class StagedTable(Generic[K, V]):
    """Read-your-writes overlay over a committed dict."""

    def __init__(self, committed: dict[K, V], guard: threading.Lock) -> None:
        self._committed = committed
        self._guard = guard
        self._pending: dict[K, V] = {}

    def get(self, key: K) -> V | None:
        if key in self._pending:
            return self._pending[key]
        with self._guard:
            return self._committed.get(key)

    def put(self, key: K, value: V) -> None:
        self._pending[key] = value

    def values(self) -> list[V]:
        with self._guard:
            merged = dict(self._committed)
        merged.update(self._pending)
        return list(merged.values())

    def flush(self) -> None:
        # Caller holds the store guard
        self._committed.update(self._pending)
        self._pending.clear()

    def discard(self) -> None:
        self._pending.clear()


class InMemoryStore:
    """
    Process-wide storage shared by every InMemoryUnitOfWork.

    - credits keyed by id
    - installments keyed by (credit_id, sequence_number)
    - sales and clients keyed by id (collaborator records)
    - one re-entrant lock per (kind, key) for per-client/per-credit serialization;
      an entry lives only while some unit of work references its lock
    """

    def __init__(self, sales: Iterable[Sale] = (), clients: Iterable[Client] = ()) -> None:
        self.guard = threading.Lock()
        self.credits: dict[str, Credit] = {}
        self.installments: dict[tuple[str, int], Installment] = {}
        self.sales: dict[str, Sale] = {sale.id: sale for sale in sales}
        self.clients: dict[str, Client] = {client.id: client for client in clients}
        self._locks: weakref.WeakValueDictionary[tuple[str, str], threading.RLock] = (
            weakref.WeakValueDictionary()
        )
        self._locks_guard = threading.Lock()

    def add_sale(self, sale: Sale) -> None:
        with self.guard:
            self.sales[sale.id] = sale

    def add_client(self, client: Client) -> None:
        with self.guard:
            self.clients[client.id] = client

    def lock_for(self, kind: str, key: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get((kind, key))
            if lock is None:
                lock = threading.RLock()
                self._locks[(kind, key)] = lock
            return lock
