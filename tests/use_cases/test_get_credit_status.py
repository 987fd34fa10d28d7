"""Test suite for GetCreditStatus use case."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Callable

import pytest

from retail_credit.domain.credit import CreditStatus
from retail_credit.domain.errors import CreditNotFoundError
from retail_credit.ports.unit_of_work import UnitOfWorkFactory
from retail_credit.use_cases.get_credit_status import GetCreditStatus, GetCreditStatusRequest
from retail_credit.use_cases.open_credit import OpenCredit, OpenCreditRequest
from retail_credit.use_cases.pay_installment import PayInstallment, PayInstallmentRequest


def test_snapshot_reflects_payments(
    uow_factory: UnitOfWorkFactory, clock: Callable[[], datetime]
) -> None:
    credit = OpenCredit(uow_factory, clock=clock).execute(
        OpenCreditRequest(
            sale_id="V-1", client_id="C-1", term_months=12, sale_date=date(2025, 1, 15)
        )
    )
    PayInstallment(uow_factory, clock=clock).execute(
        PayInstallmentRequest(
            credit_id=credit.id, sequence_number=1, amount_tendered=Decimal("61250")
        )
    )

    snapshot = GetCreditStatus(uow_factory).execute(GetCreditStatusRequest(credit_id=credit.id))

    assert snapshot.credit.status is CreditStatus.ACTIVE
    assert snapshot.credit.remaining_balance == Decimal("673750.00")
    assert snapshot.paid_installments == 1
    assert snapshot.pending_installments == 11
    assert snapshot.next_installment is not None
    assert snapshot.next_installment.sequence_number == 2
    assert [i.sequence_number for i in snapshot.installments] == list(range(1, 13))


def test_unknown_credit(uow_factory: UnitOfWorkFactory) -> None:
    with pytest.raises(CreditNotFoundError):
        GetCreditStatus(uow_factory).execute(GetCreditStatusRequest(credit_id="cr-404"))
