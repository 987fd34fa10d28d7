"""
Dependency injection for FastAPI routes.

Key principle: every engine operation owns its own unit of work (one session,
one transaction). Routes receive use cases bound to a unit-of-work factory,
never a shared session.
"""

from __future__ import annotations

from fastapi import Depends

from retail_credit.adapters.postgres_unit_of_work import PostgresUnitOfWork
from retail_credit.infra.db.session import get_session_local
from retail_credit.ports.unit_of_work import UnitOfWorkFactory
from retail_credit.use_cases.cancel_credit import CancelCredit
from retail_credit.use_cases.delinquency import DelinquencyEvaluator
from retail_credit.use_cases.get_credit_status import GetCreditStatus
from retail_credit.use_cases.list_credits import ListCredits
from retail_credit.use_cases.open_credit import OpenCredit
from retail_credit.use_cases.pay_installment import PayInstallment
from retail_credit.use_cases.quote_credit import QuoteCredit
from retail_credit.use_cases.reconcile_client_balance import RecomputeClientBalance


def get_uow_factory() -> UnitOfWorkFactory:
    """
    Provides a factory of PostgreSQL units of work.

    The sessionmaker is resolved lazily (first request), so importing the app
    does not require DATABASE_URL.
    """
    session_factory = get_session_local()
    return lambda: PostgresUnitOfWork(session_factory)


def get_quote_credit_use_case() -> QuoteCredit:
    return QuoteCredit()


def get_open_credit_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> OpenCredit:
    return OpenCredit(uow_factory=uow_factory)


def get_pay_installment_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> PayInstallment:
    return PayInstallment(uow_factory=uow_factory)


def get_cancel_credit_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CancelCredit:
    return CancelCredit(uow_factory=uow_factory)


def get_credit_status_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetCreditStatus:
    return GetCreditStatus(uow_factory=uow_factory)


def get_delinquency_evaluator(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> DelinquencyEvaluator:
    return DelinquencyEvaluator(uow_factory=uow_factory)


def get_recompute_balance_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> RecomputeClientBalance:
    return RecomputeClientBalance(uow_factory=uow_factory)


def get_list_credits_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListCredits:
    return ListCredits(uow_factory=uow_factory)
