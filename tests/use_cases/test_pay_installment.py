"""Test suite for PayInstallment use case (in-memory storage)."""

from __future__ import annotations

import threading
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

import pytest

from retail_credit.adapters.in_memory_collaborators import InMemoryClientDirectory
from retail_credit.adapters.in_memory_store import InMemoryStore
from retail_credit.adapters.in_memory_unit_of_work import InMemoryUnitOfWork
from retail_credit.domain.credit import ClientBalance, Credit, CreditStatus, PaymentResult
from retail_credit.domain.errors import (
    CreditNotActiveError,
    CreditNotFoundError,
    DomainError,
    InstallmentAlreadyPaidError,
    InstallmentNotFoundError,
    InsufficientAmountError,
    InvalidAmountError,
    StorageFailureError,
)
from retail_credit.ports.unit_of_work import UnitOfWorkFactory
from retail_credit.use_cases.cancel_credit import CancelCredit, CancelCreditRequest
from retail_credit.use_cases.open_credit import OpenCredit, OpenCreditRequest
from retail_credit.use_cases.pay_installment import PayInstallment, PayInstallmentRequest

INSTALLMENT = Decimal("61250.00")


class FailingClientDirectory(InMemoryClientDirectory):
    def update_balance(self, client_id: str, balance: ClientBalance) -> None:
        super().update_balance(client_id, balance)
        raise StorageFailureError("connection reset")


class FailingUnitOfWork(InMemoryUnitOfWork):
    """Fails on the last write of the operation, after everything else is staged."""

    def __init__(self, store: InMemoryStore) -> None:
        super().__init__(store)
        self.clients = FailingClientDirectory(self._tables[3])


@pytest.fixture()
def credit(uow_factory: UnitOfWorkFactory, clock: Callable[[], datetime]) -> Credit:
    """1,000,000 sale over 12 months: 12 x 61,250."""
    return OpenCredit(uow_factory, clock=clock).execute(
        OpenCreditRequest(
            sale_id="V-1", client_id="C-1", term_months=12, sale_date=date(2025, 1, 15)
        )
    )


@pytest.fixture()
def use_case(uow_factory: UnitOfWorkFactory, clock: Callable[[], datetime]) -> PayInstallment:
    return PayInstallment(uow_factory=uow_factory, clock=clock)


def _pay(
    use_case: PayInstallment, credit_id: str, n: int, amount: Decimal = INSTALLMENT
) -> PaymentResult:
    return use_case.execute(
        PayInstallmentRequest(credit_id=credit_id, sequence_number=n, amount_tendered=amount)
    )


# ==============================================================================
# Happy Path Tests
# ==============================================================================


def test_pays_installment_and_reduces_balances(
    use_case: PayInstallment,
    credit: Credit,
    store: InMemoryStore,
    clock: Callable[[], datetime],
) -> None:
    result = _pay(use_case, credit.id, 1)

    assert result.amount_applied == INSTALLMENT
    assert result.paid_at == clock()
    assert result.remaining_balance == Decimal("673750.00")
    assert result.credit_status is CreditStatus.ACTIVE
    assert result.client_balance.outstanding_balance == Decimal("673750.00")

    installment = store.installments[(credit.id, 1)]
    assert installment.paid is True
    assert installment.payment_date == clock()
    assert store.clients["C-1"].outstanding_balance == Decimal("673750.00")


def test_overpayment_applies_installment_value_only(
    use_case: PayInstallment, credit: Credit
) -> None:
    result = _pay(use_case, credit.id, 1, Decimal("70000"))

    assert result.amount_applied == INSTALLMENT
    assert result.amount_tendered == Decimal("70000")
    assert result.remaining_balance == Decimal("673750.00")


def test_installments_can_be_paid_out_of_order(
    use_case: PayInstallment, credit: Credit, store: InMemoryStore
) -> None:
    _pay(use_case, credit.id, 5)

    assert store.installments[(credit.id, 5)].paid is True
    assert store.installments[(credit.id, 1)].paid is False


def test_paying_every_installment_closes_credit(
    use_case: PayInstallment, credit: Credit, store: InMemoryStore
) -> None:
    for n in range(1, 12):
        result = _pay(use_case, credit.id, n)
        assert result.credit_status is CreditStatus.ACTIVE

    result = _pay(use_case, credit.id, 12)

    assert result.credit_status is CreditStatus.CLOSED
    assert result.remaining_balance == Decimal("0")
    assert store.credits[credit.id].status is CreditStatus.CLOSED
    assert store.clients["C-1"].outstanding_balance == Decimal("0")
    assert store.clients["C-1"].available_credit == Decimal("2000000")


def test_uneven_schedule_closes_at_zero(
    uow_factory: UnitOfWorkFactory,
    use_case: PayInstallment,
    clock: Callable[[], datetime],
) -> None:
    """1,000 over 18 months: 17 x 40.83 then 40.89."""
    small = OpenCredit(uow_factory, clock=clock).execute(
        OpenCreditRequest(sale_id="V-3", client_id="C-1", term_months=18)
    )

    for n in range(1, 18):
        _pay(use_case, small.id, n, Decimal("40.83"))
    result = _pay(use_case, small.id, 18, Decimal("40.89"))

    assert result.credit_status is CreditStatus.CLOSED
    assert result.remaining_balance == Decimal("0")


# ==============================================================================
# Error Tests
# ==============================================================================


def test_insufficient_amount_leaves_installment_unpaid(
    use_case: PayInstallment, credit: Credit, store: InMemoryStore
) -> None:
    with pytest.raises(InsufficientAmountError):
        _pay(use_case, credit.id, 1, Decimal("61249.99"))

    assert store.installments[(credit.id, 1)].paid is False
    assert store.credits[credit.id].remaining_balance == Decimal("735000.00")


def test_already_paid_installment(use_case: PayInstallment, credit: Credit) -> None:
    _pay(use_case, credit.id, 1)

    with pytest.raises(InstallmentAlreadyPaidError):
        _pay(use_case, credit.id, 1)


def test_already_paid_wins_over_insufficient_amount(
    use_case: PayInstallment, credit: Credit
) -> None:
    _pay(use_case, credit.id, 1)

    with pytest.raises(InstallmentAlreadyPaidError):
        _pay(use_case, credit.id, 1, Decimal("1"))


@pytest.mark.parametrize("sequence_number", [0, 13])
def test_unknown_installment(
    use_case: PayInstallment, credit: Credit, sequence_number: int
) -> None:
    with pytest.raises(InstallmentNotFoundError):
        _pay(use_case, credit.id, sequence_number)


def test_unknown_credit(use_case: PayInstallment) -> None:
    with pytest.raises(CreditNotFoundError):
        _pay(use_case, "cr-404", 1)


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
def test_non_positive_amount(use_case: PayInstallment, credit: Credit, amount: Decimal) -> None:
    with pytest.raises(InvalidAmountError):
        _pay(use_case, credit.id, 1, amount)


def test_float_amount_is_rejected(use_case: PayInstallment, credit: Credit) -> None:
    with pytest.raises(InvalidAmountError):
        _pay(use_case, credit.id, 1, 61250.0)  # type: ignore[arg-type]


def test_closed_credit_rejects_payment(use_case: PayInstallment, credit: Credit) -> None:
    for n in range(1, 13):
        _pay(use_case, credit.id, n)

    with pytest.raises(CreditNotActiveError):
        _pay(use_case, credit.id, 1)


def test_cancelled_credit_rejects_payment(
    use_case: PayInstallment, credit: Credit, uow_factory: UnitOfWorkFactory
) -> None:
    CancelCredit(uow_factory).execute(CancelCreditRequest(credit_id=credit.id))

    with pytest.raises(CreditNotActiveError):
        _pay(use_case, credit.id, 2)


def test_storage_failure_rolls_back_payment(
    credit: Credit, store: InMemoryStore, clock: Callable[[], datetime]
) -> None:
    failing = PayInstallment(uow_factory=lambda: FailingUnitOfWork(store), clock=clock)

    with pytest.raises(StorageFailureError):
        _pay(failing, credit.id, 1)

    installment = store.installments[(credit.id, 1)]
    assert installment.paid is False
    assert installment.payment_date is None
    assert store.credits[credit.id].remaining_balance == Decimal("735000.00")
    assert store.credits[credit.id].status is CreditStatus.ACTIVE
    assert store.clients["C-1"].outstanding_balance == Decimal("735000.00")


# ==============================================================================
# Concurrency Tests
# ==============================================================================


def test_concurrent_payments_on_one_credit_close_it_once(
    use_case: PayInstallment, credit: Credit, store: InMemoryStore
) -> None:
    barrier = threading.Barrier(12)
    results: list[PaymentResult] = []
    errors: list[DomainError] = []
    outcomes_lock = threading.Lock()

    def pay(n: int) -> None:
        barrier.wait()
        try:
            result = _pay(use_case, credit.id, n)
        except DomainError as exc:
            with outcomes_lock:
                errors.append(exc)
            return
        with outcomes_lock:
            results.append(result)

    threads = [threading.Thread(target=pay, args=(n,)) for n in range(1, 13)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(results) == 12
    assert sum(1 for r in results if r.credit_status is CreditStatus.CLOSED) == 1
    assert sorted(r.remaining_balance for r in results) == [
        INSTALLMENT * k for k in range(12)
    ]

    assert store.credits[credit.id].status is CreditStatus.CLOSED
    assert store.credits[credit.id].remaining_balance == Decimal("0")
    assert all(store.installments[(credit.id, n)].paid for n in range(1, 13))
    assert store.clients["C-1"].outstanding_balance == Decimal("0")
