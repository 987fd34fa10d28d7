"""Shared fixtures: an in-memory store with one client and a few credit sales."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Callable

import pytest

from retail_credit.adapters.in_memory_store import InMemoryStore
from retail_credit.adapters.in_memory_unit_of_work import InMemoryUnitOfWork
from retail_credit.domain.credit import Client, Credit, CreditStatus, Sale
from retail_credit.ports.unit_of_work import UnitOfWorkFactory

FIXED_NOW = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)
SALE_DATE = date(2025, 1, 15)


@pytest.fixture()
def store() -> InMemoryStore:
    """
    C-1 (limit 2,000,000) owns three credit sales and one cash sale.
    C-2 (limit 500,000) owns one credit sale.
    """
    return InMemoryStore(
        clients=[
            Client(id="C-1", credit_limit=Decimal("2000000")),
            Client(id="C-2", credit_limit=Decimal("500000")),
        ],
        sales=[
            Sale(id="V-1", client_id="C-1", total=Decimal("1000000"), is_credit=True),
            Sale(id="V-2", client_id="C-1", total=Decimal("500000"), is_credit=True),
            Sale(id="V-3", client_id="C-1", total=Decimal("1000"), is_credit=True),
            Sale(id="V-CASH", client_id="C-1", total=Decimal("80000"), is_credit=False),
            Sale(id="V-20", client_id="C-2", total=Decimal("300000"), is_credit=True),
        ],
    )


@pytest.fixture()
def uow_factory(store: InMemoryStore) -> UnitOfWorkFactory:
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture()
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture()
def sale_date() -> date:
    return SALE_DATE


@pytest.fixture()
def make_credit() -> Callable[..., Credit]:
    """Factory for a 1,000,000 / 12-month credit with the standard policy figures."""

    def _make(**overrides: object) -> Credit:
        fields: dict[str, object] = {
            "id": "cr-1",
            "sale_id": "V-1",
            "client_id": "C-1",
            "total_amount": Decimal("1000000"),
            "down_payment": Decimal("300000"),
            "financed_balance": Decimal("700000"),
            "interest_rate": Decimal("0.05"),
            "interest": Decimal("35000"),
            "term_months": 12,
            "remaining_balance": Decimal("735000"),
            "created_at": FIXED_NOW,
            "status": CreditStatus.ACTIVE,
        }
        fields.update(overrides)
        return Credit(**fields)  # type: ignore[arg-type]

    return _make
