"""PostgreSQL implementation of the credit and installment repositories."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from retail_credit.domain.credit import Credit, CreditStatus, Installment
from retail_credit.domain.errors import (
    DuplicateActiveCreditError,
    SaleAlreadyCreditedError,
    StorageFailureError,
)
from retail_credit.infra.db.models.credit import CreditRow, InstallmentRow
from retail_credit.ports.credit_repository import CreditRepository, InstallmentRepository


def _to_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:  # Invalid UUID format
        return None


class PostgresCreditRepository(CreditRepository):
    """
    PostgreSQL implementation of CreditRepository.

    - Uses SQLAlchemy ORM for database access
    - Converts CreditRow (infrastructure) to Credit (domain)
    - Flushes inserts eagerly so constraint violations surface as domain errors
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, credit: Credit) -> None:
        self._session.add(
            CreditRow(
                id=UUID(credit.id),
                sale_id=credit.sale_id,
                client_id=credit.client_id,
                total_amount=credit.total_amount,
                down_payment=credit.down_payment,
                financed_balance=credit.financed_balance,
                interest_rate=credit.interest_rate,
                interest=credit.interest,
                term_months=credit.term_months,
                remaining_balance=credit.remaining_balance,
                status=credit.status.value,
                created_at=credit.created_at,
            )
        )
        try:
            self._session.flush()
        except IntegrityError as exc:
            message = str(exc.orig)
            if "uq_credits_one_active_per_client" in message:
                raise DuplicateActiveCreditError(
                    f"Client '{credit.client_id}' already has an active credit",
                    client_id=credit.client_id,
                ) from exc
            if "sale_id" in message:
                raise SaleAlreadyCreditedError(
                    f"Sale '{credit.sale_id}' already originated a credit",
                    sale_id=credit.sale_id,
                ) from exc
            raise StorageFailureError("Could not persist credit", credit_id=credit.id) from exc

    def get_by_id(self, credit_id: str) -> Credit | None:
        row = self._get_row(credit_id)
        return self._to_domain(row) if row else None

    def get_by_sale(self, sale_id: str) -> Credit | None:
        query = select(CreditRow).where(CreditRow.sale_id == sale_id)
        row = self._session.execute(query).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def list_by_client(self, client_id: str) -> list[Credit]:
        query = (
            select(CreditRow)
            .where(CreditRow.client_id == client_id)
            .order_by(CreditRow.created_at)
        )
        return [self._to_domain(row) for row in self._session.execute(query).scalars().all()]

    def list_by_status(self, status: CreditStatus) -> list[Credit]:
        query = (
            select(CreditRow)
            .where(CreditRow.status == status.value)
            .order_by(CreditRow.created_at)
        )
        return [self._to_domain(row) for row in self._session.execute(query).scalars().all()]

    def update(self, credit: Credit) -> None:
        row = self._get_row(credit.id)
        if row is None:
            raise StorageFailureError("Credit row vanished during update", credit_id=credit.id)

        # Only the lifecycle fields ever change after creation
        row.remaining_balance = credit.remaining_balance
        row.status = credit.status.value

    def _get_row(self, credit_id: str) -> CreditRow | None:
        key = _to_uuid(credit_id)
        if key is None:
            return None
        return self._session.get(CreditRow, key)

    def _to_domain(self, row: CreditRow) -> Credit:
        return Credit(
            id=str(row.id),  # Convert UUID to string
            sale_id=row.sale_id,
            client_id=row.client_id,
            total_amount=row.total_amount,  # Already Decimal from NUMERIC column
            down_payment=row.down_payment,
            financed_balance=row.financed_balance,
            interest_rate=row.interest_rate,
            interest=row.interest,
            term_months=row.term_months,
            remaining_balance=row.remaining_balance,
            status=CreditStatus(row.status),
            created_at=row.created_at,
        )


class PostgresInstallmentRepository(InstallmentRepository):
    """PostgreSQL implementation of InstallmentRepository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add_many(self, installments: list[Installment]) -> None:
        self._session.add_all(
            [
                InstallmentRow(
                    id=UUID(installment.id) if installment.id else None,
                    credit_id=UUID(installment.credit_id),
                    sequence_number=installment.sequence_number,
                    value=installment.value,
                    due_date=installment.due_date,
                    payment_date=installment.payment_date,
                    paid=installment.paid,
                )
                for installment in installments
            ]
        )
        self._session.flush()

    def get(self, credit_id: str, sequence_number: int) -> Installment | None:
        row = self._get_row(credit_id, sequence_number)
        return self._to_domain(row) if row else None

    def list_by_credit(self, credit_id: str) -> list[Installment]:
        key = _to_uuid(credit_id)
        if key is None:
            return []
        query = (
            select(InstallmentRow)
            .where(InstallmentRow.credit_id == key)
            .order_by(InstallmentRow.sequence_number)
        )
        return [self._to_domain(row) for row in self._session.execute(query).scalars().all()]

    def update(self, installment: Installment) -> None:
        row = self._get_row(installment.credit_id, installment.sequence_number)
        if row is None:
            raise StorageFailureError(
                "Installment row vanished during update",
                credit_id=installment.credit_id,
                sequence_number=installment.sequence_number,
            )

        row.paid = installment.paid
        row.payment_date = installment.payment_date

    def _get_row(self, credit_id: str, sequence_number: int) -> InstallmentRow | None:
        key = _to_uuid(credit_id)
        if key is None:
            return None
        query = select(InstallmentRow).where(
            InstallmentRow.credit_id == key,
            InstallmentRow.sequence_number == sequence_number,
        )
        return self._session.execute(query).scalar_one_or_none()

    def _to_domain(self, row: InstallmentRow) -> Installment:
        return Installment(
            id=str(row.id),
            credit_id=str(row.credit_id),
            sequence_number=row.sequence_number,
            value=row.value,
            due_date=row.due_date,
            payment_date=row.payment_date,
            paid=row.paid,
        )
