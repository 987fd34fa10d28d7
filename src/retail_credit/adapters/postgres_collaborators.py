"""PostgreSQL implementations of the sale and client collaborator ports."""

from __future__ import annotations

from sqlalchemy.orm import Session

from retail_credit.domain.credit import Client, ClientBalance, Sale
from retail_credit.domain.errors import ClientNotFoundError, SaleNotFoundError
from retail_credit.infra.db.models.collaborators import ClientRow, SaleRow
from retail_credit.ports.collaborators import ClientDirectory, SaleDirectory


class PostgresSaleDirectory(SaleDirectory):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, sale_id: str) -> Sale | None:
        row = self._session.get(SaleRow, sale_id)
        if row is None:
            return None
        return Sale(
            id=row.id,
            client_id=row.client_id,
            total=row.total,
            is_credit=row.is_credit,
            voided=row.voided,
        )

    def mark_voided(self, sale_id: str) -> None:
        row = self._session.get(SaleRow, sale_id)
        if row is None:
            raise SaleNotFoundError(sale_id)
        row.voided = True


class PostgresClientDirectory(ClientDirectory):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, client_id: str) -> Client | None:
        row = self._session.get(ClientRow, client_id)
        if row is None:
            return None
        return Client(
            id=row.id,
            credit_limit=row.credit_limit,
            outstanding_balance=row.outstanding_balance,
            available_credit=row.available_credit,
        )

    def update_balance(self, client_id: str, balance: ClientBalance) -> None:
        row = self._session.get(ClientRow, client_id)
        if row is None:
            raise ClientNotFoundError(client_id)
        row.outstanding_balance = balance.outstanding_balance
        row.available_credit = balance.available_credit
