from datetime import date

from fastapi import APIRouter, Depends, Query

from retail_credit.domain.credit import CreditStatus, utc_now
from retail_credit.entrypoints.http.dependencies import (
    get_delinquency_evaluator,
    get_list_credits_use_case,
    get_recompute_balance_use_case,
)
from retail_credit.entrypoints.http.dtos.credits import (
    ClientBalanceDTO,
    CreditListResponseDTO,
    OverdueInstallmentsResponseDTO,
    PendingInstallmentsResponseDTO,
)
from retail_credit.entrypoints.http.error_responses import NOT_FOUND_RESPONSE, VALIDATION_RESPONSE
from retail_credit.entrypoints.http.mappers.credit_mapper import CreditMapper
from retail_credit.use_cases.delinquency import DelinquencyEvaluator
from retail_credit.use_cases.list_credits import ListCredits, ListCreditsRequest
from retail_credit.use_cases.reconcile_client_balance import (
    RecomputeClientBalance,
    RecomputeClientBalanceRequest,
)


router = APIRouter(prefix="/clients", tags=["Clients"])


@router.get(
    "/{client_id}/credits",
    response_model=CreditListResponseDTO,
    summary="List a client's credits",
    description="Every credit the client has held, optionally filtered by status, oldest first.",
    responses={**VALIDATION_RESPONSE},
)
def list_client_credits(
    client_id: str,
    credit_status: CreditStatus | None = Query(default=None, alias="status"),
    use_case: ListCredits = Depends(get_list_credits_use_case),
) -> CreditListResponseDTO:
    credits = use_case.execute(ListCreditsRequest(client_id=client_id, status=credit_status))
    return CreditMapper.to_credit_list_response(credits, client_id=client_id, status=credit_status)


@router.get(
    "/{client_id}/installments/overdue",
    response_model=OverdueInstallmentsResponseDTO,
    summary="List overdue installments",
    description="Unpaid installments of the client's active credits due before `as_of`, oldest first.",
)
def list_overdue_installments(
    client_id: str,
    as_of: date | None = Query(default=None, description="Defaults to today (UTC)"),
    evaluator: DelinquencyEvaluator = Depends(get_delinquency_evaluator),
) -> OverdueInstallmentsResponseDTO:
    as_of = as_of or utc_now().date()
    installments = evaluator.list_overdue(client_id, as_of)
    return CreditMapper.to_overdue_response(client_id, as_of, installments)


@router.get(
    "/{client_id}/installments/pending",
    response_model=PendingInstallmentsResponseDTO,
    summary="List pending installments",
    description="Every unpaid installment of the client's active credits, overdue or not.",
)
def list_pending_installments(
    client_id: str,
    evaluator: DelinquencyEvaluator = Depends(get_delinquency_evaluator),
) -> PendingInstallmentsResponseDTO:
    installments = evaluator.list_pending(client_id)
    return CreditMapper.to_pending_response(client_id, installments)


@router.post(
    "/{client_id}/balance/recompute",
    response_model=ClientBalanceDTO,
    summary="Recompute client balance",
    description="Rebuild the client's outstanding balance from their active credits.",
    responses={**NOT_FOUND_RESPONSE},
)
def recompute_client_balance(
    client_id: str,
    use_case: RecomputeClientBalance = Depends(get_recompute_balance_use_case),
) -> ClientBalanceDTO:
    balance = use_case.execute(RecomputeClientBalanceRequest(client_id=client_id))
    return CreditMapper.to_balance_dto(balance)
