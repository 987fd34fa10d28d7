from __future__ import annotations

from abc import ABC, abstractmethod

from retail_credit.domain.credit import Credit, CreditStatus, Installment


class CreditRepository(ABC):
    """
    Port for credit persistence.

    Credits are never physically deleted: cancellation is a status update.

    Contract (Preconditions):
        - Callers hold the relevant client/credit lock (see UnitOfWork) before writing
        - Implementations do not re-validate domain invariants
    """

    @abstractmethod
    def add(self, credit: Credit) -> None: ...

    @abstractmethod
    def get_by_id(self, credit_id: str) -> Credit | None: ...

    @abstractmethod
    def get_by_sale(self, sale_id: str) -> Credit | None: ...

    @abstractmethod
    def list_by_client(self, client_id: str) -> list[Credit]:
        """All credits of a client, oldest first."""
        ...

    @abstractmethod
    def list_by_status(self, status: CreditStatus) -> list[Credit]: ...

    @abstractmethod
    def update(self, credit: Credit) -> None: ...


class InstallmentRepository(ABC):
    """
    Port for installment persistence.

    Installments are keyed by (credit_id, sequence_number).
    A schedule is written once as a batch; each installment is updated at most once (on payment).
    """

    @abstractmethod
    def add_many(self, installments: list[Installment]) -> None: ...

    @abstractmethod
    def get(self, credit_id: str, sequence_number: int) -> Installment | None: ...

    @abstractmethod
    def list_by_credit(self, credit_id: str) -> list[Installment]:
        """Installments of a credit ordered by sequence number."""
        ...

    @abstractmethod
    def update(self, installment: Installment) -> None: ...
