"""Ports for records owned by the host application (sales, clients)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from retail_credit.domain.credit import Client, ClientBalance, Sale


class SaleDirectory(ABC):
    @abstractmethod
    def get_by_id(self, sale_id: str) -> Sale | None: ...

    @abstractmethod
    def mark_voided(self, sale_id: str) -> None: ...


class ClientDirectory(ABC):
    """
    Read access to client records and write access to their balance projection.

    Only outstanding_balance and available_credit are ever written by the engine.
    """

    @abstractmethod
    def get_by_id(self, client_id: str) -> Client | None: ...

    @abstractmethod
    def update_balance(self, client_id: str, balance: ClientBalance) -> None: ...
