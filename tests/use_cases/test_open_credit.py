"""Test suite for OpenCredit use case (in-memory storage)."""

from __future__ import annotations

import threading
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

import pytest

from retail_credit.adapters.in_memory_credit_repository import InMemoryInstallmentRepository
from retail_credit.adapters.in_memory_store import InMemoryStore
from retail_credit.adapters.in_memory_unit_of_work import InMemoryUnitOfWork
from retail_credit.domain.credit import CreditStatus, Installment, Sale
from retail_credit.domain.errors import (
    ClientNotFoundError,
    DomainError,
    DuplicateActiveCreditError,
    InvalidAmountError,
    InvalidTermError,
    SaleAlreadyCreditedError,
    SaleNotEligibleError,
    SaleNotFoundError,
    StorageFailureError,
)
from retail_credit.ports.unit_of_work import UnitOfWorkFactory
from retail_credit.use_cases.cancel_credit import CancelCredit, CancelCreditRequest
from retail_credit.use_cases.open_credit import OpenCredit, OpenCreditRequest


class FailingInstallmentRepository(InMemoryInstallmentRepository):
    def add_many(self, installments: list[Installment]) -> None:
        super().add_many(installments)
        raise StorageFailureError("disk full")


class FailingUnitOfWork(InMemoryUnitOfWork):
    """Fails after the credit row has been staged."""

    def __init__(self, store: InMemoryStore) -> None:
        super().__init__(store)
        self.installments = FailingInstallmentRepository(self._tables[1])


@pytest.fixture()
def use_case(uow_factory: UnitOfWorkFactory, clock: Callable[[], datetime]) -> OpenCredit:
    return OpenCredit(uow_factory=uow_factory, clock=clock)


def _request(sale_id: str = "V-1", client_id: str = "C-1", **overrides: object) -> OpenCreditRequest:
    fields: dict[str, object] = {
        "sale_id": sale_id,
        "client_id": client_id,
        "term_months": 12,
        "sale_date": date(2025, 1, 15),
    }
    fields.update(overrides)
    return OpenCreditRequest(**fields)  # type: ignore[arg-type]


# ==============================================================================
# Happy Path Tests
# ==============================================================================


def test_opens_active_credit_with_policy_figures(
    use_case: OpenCredit, clock: Callable[[], datetime]
) -> None:
    credit = use_case.execute(_request())

    assert credit.status is CreditStatus.ACTIVE
    assert credit.total_amount == Decimal("1000000")
    assert credit.down_payment == Decimal("300000")
    assert credit.financed_balance == Decimal("700000")
    assert credit.interest_rate == Decimal("0.05")
    assert credit.interest == Decimal("35000")
    assert credit.remaining_balance == Decimal("735000.00")
    assert credit.created_at == clock()


def test_persists_credit_and_full_schedule(use_case: OpenCredit, store: InMemoryStore) -> None:
    credit = use_case.execute(_request())

    assert store.credits[credit.id] == credit
    installments = sorted(
        (i for i in store.installments.values() if i.credit_id == credit.id),
        key=lambda i: i.sequence_number,
    )
    assert len(installments) == 12
    assert all(i.value == Decimal("61250.00") for i in installments)
    assert installments[0].due_date == date(2025, 2, 15)
    assert installments[-1].due_date == date(2026, 1, 15)


def test_updates_client_balance(use_case: OpenCredit, store: InMemoryStore) -> None:
    use_case.execute(_request())

    client = store.clients["C-1"]
    assert client.outstanding_balance == Decimal("735000.00")
    assert client.available_credit == Decimal("1265000.00")


def test_explicit_down_payment(use_case: OpenCredit) -> None:
    credit = use_case.execute(_request(down_payment=Decimal("500000"), term_months=24))

    assert credit.financed_balance == Decimal("500000")
    assert credit.total_obligation == Decimal("525000.00")
    assert credit.term_months == 24


def test_sale_date_defaults_to_clock(use_case: OpenCredit, store: InMemoryStore) -> None:
    credit = use_case.execute(_request(sale_date=None))

    first = store.installments[(credit.id, 1)]
    assert first.due_date == date(2025, 2, 15)


def test_available_credit_floors_at_zero(use_case: OpenCredit, store: InMemoryStore) -> None:
    """C-2 has a 500,000 limit and finances a 2,000,000 sale: 1,470,000 owed."""
    store.add_sale(Sale(id="V-21", client_id="C-2", total=Decimal("2000000"), is_credit=True))

    use_case.execute(_request(sale_id="V-21", client_id="C-2"))

    client = store.clients["C-2"]
    assert client.outstanding_balance == Decimal("1470000.00")
    assert client.available_credit == Decimal("0")


def test_new_credit_allowed_after_cancellation(
    use_case: OpenCredit, uow_factory: UnitOfWorkFactory
) -> None:
    first = use_case.execute(_request())
    CancelCredit(uow_factory).execute(CancelCreditRequest(credit_id=first.id))

    second = use_case.execute(_request(sale_id="V-2"))

    assert second.status is CreditStatus.ACTIVE


# ==============================================================================
# Validation Error Tests
# ==============================================================================


@pytest.mark.parametrize("term", [6, 36])
def test_rejects_invalid_term(use_case: OpenCredit, store: InMemoryStore, term: int) -> None:
    with pytest.raises(InvalidTermError):
        use_case.execute(_request(term_months=term))

    assert store.credits == {}


def test_rejects_down_payment_not_below_total(use_case: OpenCredit, store: InMemoryStore) -> None:
    with pytest.raises(InvalidAmountError):
        use_case.execute(_request(down_payment=Decimal("1000000")))

    assert store.credits == {}


# ==============================================================================
# Eligibility Error Tests
# ==============================================================================


def test_unknown_client(use_case: OpenCredit) -> None:
    with pytest.raises(ClientNotFoundError):
        use_case.execute(_request(client_id="C-404"))


def test_unknown_sale(use_case: OpenCredit) -> None:
    with pytest.raises(SaleNotFoundError):
        use_case.execute(_request(sale_id="V-404"))


def test_cash_sale_is_not_eligible(use_case: OpenCredit) -> None:
    with pytest.raises(SaleNotEligibleError):
        use_case.execute(_request(sale_id="V-CASH"))


def test_sale_of_another_client_is_not_eligible(use_case: OpenCredit) -> None:
    with pytest.raises(SaleNotEligibleError):
        use_case.execute(_request(sale_id="V-20"))


def test_voided_sale_is_not_eligible(use_case: OpenCredit, uow_factory: UnitOfWorkFactory) -> None:
    first = use_case.execute(_request())
    CancelCredit(uow_factory).execute(CancelCreditRequest(credit_id=first.id))

    # Cancellation voided V-1
    with pytest.raises(SaleNotEligibleError):
        use_case.execute(_request())


def test_sale_already_credited(use_case: OpenCredit) -> None:
    use_case.execute(_request())

    with pytest.raises(SaleAlreadyCreditedError):
        use_case.execute(_request())


def test_duplicate_active_credit(use_case: OpenCredit, store: InMemoryStore) -> None:
    use_case.execute(_request())

    with pytest.raises(DuplicateActiveCreditError):
        use_case.execute(_request(sale_id="V-2"))

    assert len(store.credits) == 1
    assert store.clients["C-1"].outstanding_balance == Decimal("735000.00")


# ==============================================================================
# Atomicity and Concurrency
# ==============================================================================


def test_storage_failure_leaves_nothing_behind(
    store: InMemoryStore, clock: Callable[[], datetime]
) -> None:
    use_case = OpenCredit(uow_factory=lambda: FailingUnitOfWork(store), clock=clock)

    with pytest.raises(StorageFailureError):
        use_case.execute(_request())

    assert store.credits == {}
    assert store.installments == {}
    assert store.clients["C-1"].outstanding_balance == Decimal("0")


def test_concurrent_opens_for_same_client_yield_one_credit(
    use_case: OpenCredit, store: InMemoryStore
) -> None:
    barrier = threading.Barrier(2)
    outcomes: list[object] = []
    outcomes_lock = threading.Lock()

    def open_sale(sale_id: str) -> None:
        barrier.wait()
        try:
            outcome: object = use_case.execute(_request(sale_id=sale_id))
        except DomainError as exc:
            outcome = exc
        with outcomes_lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=open_sale, args=(s,)) for s in ("V-1", "V-2")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    errors = [o for o in outcomes if isinstance(o, DomainError)]
    assert len(outcomes) == 2
    assert len(errors) == 1
    assert isinstance(errors[0], DuplicateActiveCreditError)
    assert len(store.credits) == 1
