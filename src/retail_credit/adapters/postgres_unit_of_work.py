"""PostgreSQL implementation of UnitOfWork."""

from __future__ import annotations

import logging
from types import TracebackType
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from retail_credit.adapters.postgres_collaborators import (
    PostgresClientDirectory,
    PostgresSaleDirectory,
)
from retail_credit.adapters.postgres_credit_repository import (
    PostgresCreditRepository,
    PostgresInstallmentRepository,
)
from retail_credit.domain.errors import StorageFailureError
from retail_credit.infra.db.models.collaborators import ClientRow
from retail_credit.infra.db.models.credit import CreditRow
from retail_credit.ports.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class PostgresUnitOfWork(UnitOfWork):
    """
    One database transaction per engine operation.

    - A fresh session is opened on __enter__ and closed on __exit__
    - Locks are row locks (SELECT ... FOR UPDATE) held until commit/rollback
    - Any SQLAlchemyError rolls the transaction back and surfaces as StorageFailureError
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("PostgresUnitOfWork used outside of a 'with' block")
        return self._session

    def __enter__(self) -> PostgresUnitOfWork:
        self._session = self._session_factory()
        self.credits = PostgresCreditRepository(self._session)
        self.installments = PostgresInstallmentRepository(self._session)
        self.sales = PostgresSaleDirectory(self._session)
        self.clients = PostgresClientDirectory(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        super().__exit__(exc_type, exc, tb)

        if isinstance(exc, SQLAlchemyError):
            logger.error(
                "Storage failure, transaction rolled back",
                extra={"error_type": type(exc).__name__, "error_message": str(exc)},
            )
            raise StorageFailureError(
                "Storage operation failed; changes rolled back",
                error_type=type(exc).__name__,
            ) from exc

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageFailureError(
                "Commit failed; changes rolled back",
                error_type=type(exc).__name__,
            ) from exc

    def rollback(self) -> None:
        self.session.rollback()

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def lock_client(self, client_id: str) -> None:
        self.session.execute(
            select(ClientRow.id).where(ClientRow.id == client_id).with_for_update()
        )

    def lock_credit(self, credit_id: str) -> None:
        try:
            key = UUID(credit_id)
        except ValueError:
            return
        self.session.execute(select(CreditRow.id).where(CreditRow.id == key).with_for_update())
