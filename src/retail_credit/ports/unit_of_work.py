from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Callable

from retail_credit.ports.collaborators import ClientDirectory, SaleDirectory
from retail_credit.ports.credit_repository import CreditRepository, InstallmentRepository


class UnitOfWork(ABC):
    """
    Port for one atomic, serialized engine operation.

    Usage:
        with uow_factory() as uow:
            uow.lock_client(client_id)
            ...
            uow.credits.add(credit)

    Contract:
        - Leaving the block normally commits every write made through the repositories
        - Leaving it with an exception discards every write (nothing partial is observable)
        - lock_client/lock_credit are exclusive and held until the block ends
        - Lock order is always client, then credit
    """

    credits: CreditRepository
    installments: InstallmentRepository
    sales: SaleDirectory
    clients: ClientDirectory

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self.close()

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...

    @abstractmethod
    def close(self) -> None:
        """Release locks and resources. Called once when the block ends."""
        ...

    @abstractmethod
    def lock_client(self, client_id: str) -> None: ...

    @abstractmethod
    def lock_credit(self, credit_id: str) -> None: ...


UnitOfWorkFactory = Callable[[], UnitOfWork]
