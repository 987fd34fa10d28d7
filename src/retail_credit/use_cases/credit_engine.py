"""Library entry point for host applications that embed the engine without HTTP."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Callable

from retail_credit.domain.credit import (
    CancellationResult,
    ClientBalance,
    Credit,
    CreditSnapshot,
    CreditStatus,
    Installment,
    PaymentResult,
    utc_now,
)
from retail_credit.ports.unit_of_work import UnitOfWorkFactory
from retail_credit.use_cases.cancel_credit import CancelCredit, CancelCreditRequest
from retail_credit.use_cases.delinquency import DelinquencyEvaluator
from retail_credit.use_cases.get_credit_status import GetCreditStatus, GetCreditStatusRequest
from retail_credit.use_cases.list_credits import ListCredits, ListCreditsRequest
from retail_credit.use_cases.open_credit import OpenCredit, OpenCreditRequest
from retail_credit.use_cases.pay_installment import PayInstallment, PayInstallmentRequest
from retail_credit.use_cases.quote_credit import CreditQuote, QuoteCredit, QuoteCreditRequest
from retail_credit.use_cases.reconcile_client_balance import (
    ClientBalanceReconciler,
    RecomputeClientBalance,
    RecomputeClientBalanceRequest,
)


class CreditEngine:
    """
    Facade over the credit lifecycle use cases.

    All use cases share one unit-of-work factory and one reconciler, so the
    host only has to provide storage (see retail_credit.ports).
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        reconciler = ClientBalanceReconciler()
        self._open = OpenCredit(uow_factory, reconciler, clock)
        self._pay = PayInstallment(uow_factory, reconciler, clock)
        self._cancel = CancelCredit(uow_factory, reconciler)
        self._status = GetCreditStatus(uow_factory)
        self._list = ListCredits(uow_factory)
        self._recompute = RecomputeClientBalance(uow_factory, reconciler)
        self._delinquency = DelinquencyEvaluator(uow_factory)
        self._clock = clock

    def open_credit(
        self,
        sale_id: str,
        client_id: str,
        down_payment: Decimal | None,
        term_months: int,
        sale_date: date | None = None,
    ) -> str:
        credit = self._open.execute(
            OpenCreditRequest(
                sale_id=sale_id,
                client_id=client_id,
                term_months=term_months,
                down_payment=down_payment,
                sale_date=sale_date,
            )
        )
        return credit.id

    def pay_installment(
        self, credit_id: str, sequence_number: int, amount_tendered: Decimal
    ) -> PaymentResult:
        return self._pay.execute(
            PayInstallmentRequest(
                credit_id=credit_id,
                sequence_number=sequence_number,
                amount_tendered=amount_tendered,
            )
        )

    def cancel_credit(self, credit_id: str) -> CancellationResult:
        return self._cancel.execute(CancelCreditRequest(credit_id=credit_id))

    def get_credit_status(self, credit_id: str) -> CreditSnapshot:
        return self._status.execute(GetCreditStatusRequest(credit_id=credit_id))

    def list_credits(
        self, client_id: str | None = None, status: CreditStatus | None = None
    ) -> list[Credit]:
        return self._list.execute(ListCreditsRequest(client_id=client_id, status=status))

    def list_overdue_installments(self, client_id: str, as_of: date | None = None) -> list[Installment]:
        return self._delinquency.list_overdue(client_id, as_of or self._clock().date())

    def list_pending_installments(self, client_id: str) -> list[Installment]:
        return self._delinquency.list_pending(client_id)

    def list_delinquent_credits(self, as_of: date | None = None) -> list[Credit]:
        return self._delinquency.list_delinquent_credits(as_of or self._clock().date())

    def recompute_client_balance(self, client_id: str) -> ClientBalance:
        return self._recompute.execute(RecomputeClientBalanceRequest(client_id=client_id))

    def quote(
        self, total: Decimal, term_months: int, down_payment: Decimal | None = None
    ) -> CreditQuote:
        return QuoteCredit().execute(
            QuoteCreditRequest(
                total=total,
                term_months=term_months,
                sale_date=self._clock().date(),
                down_payment=down_payment,
            )
        )
