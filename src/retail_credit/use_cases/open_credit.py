"""Open credit use case."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

from retail_credit.domain.credit import Credit, CreditStatus, Sale, new_id, utc_now
from retail_credit.domain.errors import (
    ClientNotFoundError,
    DuplicateActiveCreditError,
    SaleAlreadyCreditedError,
    SaleNotEligibleError,
    SaleNotFoundError,
)
from retail_credit.domain.money import INTEREST_RATE, as_money, compute_schedule, validate_term
from retail_credit.domain.schedule import generate_installments
from retail_credit.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory
from retail_credit.use_cases.reconcile_client_balance import ClientBalanceReconciler

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OpenCreditRequest:
    """Request to turn an approved credit sale into a financed credit."""

    sale_id: str
    client_id: str
    term_months: int
    down_payment: Decimal | None = None  # Defaults to 30% of the sale total
    interest_rate: Decimal | None = None  # Defaults to the flat 5% surcharge
    sale_date: date | None = None  # Seeds the due dates; defaults to today


class OpenCredit:
    """
    Use case for opening a credit from a credit sale.

    Responsibilities:
    - Validate term and amounts before touching storage
    - Serialize on the client so two concurrent sales cannot both pass the
      "no active credit" check
    - Persist the credit, its full schedule and the client's new balance in
      one unit of work (all or nothing)
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        reconciler: ClientBalanceReconciler | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow_factory = uow_factory
        self._reconciler = reconciler or ClientBalanceReconciler()
        self._clock = clock

    def execute(self, request: OpenCreditRequest) -> Credit:
        """
        Execute the open credit use case.

        Returns:
            The created ACTIVE credit

        Raises:
            InvalidTermError: If term_months is not 12, 18 or 24
            InvalidAmountError: If the sale total, down payment or rate is invalid
            ClientNotFoundError: If the client does not exist
            SaleNotFoundError: If the sale does not exist
            SaleNotEligibleError: If the sale is voided, not a credit sale or not the client's
            SaleAlreadyCreditedError: If the sale already originated a credit
            DuplicateActiveCreditError: If the client already has an active credit
            StorageFailureError: If persistence fails (nothing is left behind)
        """
        validate_term(request.term_months)

        with self._uow_factory() as uow:
            uow.lock_client(request.client_id)

            if uow.clients.get_by_id(request.client_id) is None:
                raise ClientNotFoundError(request.client_id)

            sale = self._load_eligible_sale(uow, request)
            interest_rate = INTEREST_RATE if request.interest_rate is None else request.interest_rate
            terms = compute_schedule(
                sale.total,
                request.term_months,
                down_payment=request.down_payment,
                interest_rate=interest_rate,
            )
            self._ensure_no_active_credit(uow, request.client_id)

            now = self._clock()
            credit = Credit(
                id=new_id(),
                sale_id=sale.id,
                client_id=request.client_id,
                total_amount=as_money(sale.total, "total"),
                down_payment=terms.down_payment,
                financed_balance=terms.financed_balance,
                interest_rate=Decimal(interest_rate),
                interest=terms.interest,
                term_months=request.term_months,
                remaining_balance=terms.total_obligation,
                created_at=now,
            )
            installments = generate_installments(credit, request.sale_date or now.date())

            uow.credits.add(credit)
            uow.installments.add_many(installments)
            balance = self._reconciler.recompute(uow, request.client_id)

        logger.info(
            "credit.opened",
            extra={
                "credit_id": credit.id,
                "sale_id": credit.sale_id,
                "client_id": credit.client_id,
                "term_months": credit.term_months,
                "total_obligation": str(credit.total_obligation),
                "outstanding_balance": str(balance.outstanding_balance),
            },
        )
        return credit

    def _load_eligible_sale(self, uow: UnitOfWork, request: OpenCreditRequest) -> Sale:
        sale = uow.sales.get_by_id(request.sale_id)
        if sale is None:
            raise SaleNotFoundError(request.sale_id)

        if not sale.is_credit:
            raise SaleNotEligibleError("Sale is not a credit sale", sale_id=sale.id)
        if sale.voided:
            raise SaleNotEligibleError("Sale is voided", sale_id=sale.id)
        if sale.client_id != request.client_id:
            raise SaleNotEligibleError(
                "Sale belongs to another client",
                sale_id=sale.id,
                client_id=request.client_id,
            )

        if uow.credits.get_by_sale(sale.id) is not None:
            raise SaleAlreadyCreditedError(
                f"Sale '{sale.id}' already originated a credit", sale_id=sale.id
            )
        return sale

    def _ensure_no_active_credit(self, uow: UnitOfWork, client_id: str) -> None:
        for existing in uow.credits.list_by_client(client_id):
            if existing.status is CreditStatus.ACTIVE and existing.remaining_balance > 0:
                raise DuplicateActiveCreditError(
                    f"Client '{client_id}' already has an active credit",
                    client_id=client_id,
                    credit_id=existing.id,
                )
