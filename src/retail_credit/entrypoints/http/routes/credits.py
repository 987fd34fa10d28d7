from datetime import date

from fastapi import APIRouter, Depends, Query, status

from retail_credit.domain.credit import CreditStatus, utc_now
from retail_credit.entrypoints.http.dependencies import (
    get_cancel_credit_use_case,
    get_credit_status_use_case,
    get_delinquency_evaluator,
    get_list_credits_use_case,
    get_open_credit_use_case,
    get_pay_installment_use_case,
    get_quote_credit_use_case,
)
from retail_credit.entrypoints.http.dtos.credits import (
    CancellationResponseDTO,
    CreditDTO,
    CreditListResponseDTO,
    CreditQuoteRequestDTO,
    CreditQuoteResponseDTO,
    CreditSnapshotResponseDTO,
    DelinquentCreditsResponseDTO,
    OpenCreditRequestDTO,
    PaymentRequestDTO,
    PaymentResponseDTO,
)
from retail_credit.entrypoints.http.error_responses import (
    CONFLICT_RESPONSE,
    NOT_FOUND_RESPONSE,
    STORAGE_RESPONSE,
    VALIDATION_RESPONSE,
)
from retail_credit.entrypoints.http.mappers.credit_mapper import CreditMapper
from retail_credit.use_cases.cancel_credit import CancelCredit, CancelCreditRequest
from retail_credit.use_cases.delinquency import DelinquencyEvaluator
from retail_credit.use_cases.get_credit_status import GetCreditStatus, GetCreditStatusRequest
from retail_credit.use_cases.list_credits import ListCredits, ListCreditsRequest
from retail_credit.use_cases.open_credit import OpenCredit
from retail_credit.use_cases.pay_installment import PayInstallment
from retail_credit.use_cases.quote_credit import QuoteCredit


router = APIRouter(prefix="/credits", tags=["Credits"])


@router.post(
    "/quote",
    response_model=CreditQuoteResponseDTO,
    summary="Preview a credit sale",
    description="""
    Compute down payment, financed balance, interest and the installment
    schedule for a sale total without persisting anything.

    ## Policy
    - Down payment defaults to 30% of the total
    - Flat 5% interest on the financed balance
    - Allowed terms: 12, 18 or 24 months
    - Installments are rounded to cents; the last one absorbs the remainder
    """,
    responses={**VALIDATION_RESPONSE},
)
def quote_credit(
    payload: CreditQuoteRequestDTO,
    use_case: QuoteCredit = Depends(get_quote_credit_use_case),
) -> CreditQuoteResponseDTO:
    request = CreditMapper.to_quote_request(payload, today=utc_now().date())
    quote = use_case.execute(request)
    return CreditMapper.to_quote_response(quote)


@router.post(
    "",
    response_model=CreditDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Open a credit",
    description="""
    Open a credit from an approved credit sale and generate its full
    installment schedule. The client's balance is updated in the same
    transaction.

    A client may hold at most one active credit at a time.
    """,
    responses={
        **VALIDATION_RESPONSE,
        **NOT_FOUND_RESPONSE,
        **CONFLICT_RESPONSE,
        **STORAGE_RESPONSE,
    },
)
def open_credit(
    payload: OpenCreditRequestDTO,
    use_case: OpenCredit = Depends(get_open_credit_use_case),
) -> CreditDTO:
    """
    Follows the parse → execute → map → return pattern.
    """
    request = CreditMapper.to_open_request(payload)
    credit = use_case.execute(request)
    return CreditMapper.to_credit_dto(credit)


@router.get(
    "",
    response_model=CreditListResponseDTO,
    summary="List credits",
    description="All credits, optionally filtered by status, oldest first.",
    responses={**VALIDATION_RESPONSE},
)
def list_credits(
    credit_status: CreditStatus | None = Query(default=None, alias="status"),
    use_case: ListCredits = Depends(get_list_credits_use_case),
) -> CreditListResponseDTO:
    credits = use_case.execute(ListCreditsRequest(status=credit_status))
    return CreditMapper.to_credit_list_response(credits, status=credit_status)


# Declared before /{credit_id} so "delinquent" is not captured as an id
@router.get(
    "/delinquent",
    response_model=DelinquentCreditsResponseDTO,
    summary="List delinquent credits",
    description="Active credits with at least one installment overdue as of the given date.",
)
def list_delinquent_credits(
    as_of: date | None = Query(default=None, description="Defaults to today (UTC)"),
    evaluator: DelinquencyEvaluator = Depends(get_delinquency_evaluator),
) -> DelinquentCreditsResponseDTO:
    as_of = as_of or utc_now().date()
    credits = evaluator.list_delinquent_credits(as_of)
    return CreditMapper.to_delinquent_response(as_of, credits)


@router.get(
    "/{credit_id}",
    response_model=CreditSnapshotResponseDTO,
    summary="Get credit status",
    responses={**NOT_FOUND_RESPONSE},
)
def get_credit_status(
    credit_id: str,
    use_case: GetCreditStatus = Depends(get_credit_status_use_case),
) -> CreditSnapshotResponseDTO:
    snapshot = use_case.execute(GetCreditStatusRequest(credit_id=credit_id))
    return CreditMapper.to_snapshot_response(snapshot)


@router.post(
    "/{credit_id}/installments/{sequence_number}/payments",
    response_model=PaymentResponseDTO,
    summary="Pay an installment",
    description="""
    Pay one installment in full. The tendered amount must cover the
    installment value; any surplus is not tracked. The credit closes
    automatically when its last installment is paid.
    """,
    responses={
        **VALIDATION_RESPONSE,
        **NOT_FOUND_RESPONSE,
        **CONFLICT_RESPONSE,
        **STORAGE_RESPONSE,
    },
)
def pay_installment(
    credit_id: str,
    sequence_number: int,
    payload: PaymentRequestDTO,
    use_case: PayInstallment = Depends(get_pay_installment_use_case),
) -> PaymentResponseDTO:
    request = CreditMapper.to_payment_request(credit_id, sequence_number, payload)
    result = use_case.execute(request)
    return CreditMapper.to_payment_response(result)


@router.post(
    "/{credit_id}/cancellation",
    response_model=CancellationResponseDTO,
    summary="Cancel a credit",
    description="""
    Cancel an active credit: the credit becomes CANCELLED, its sale is
    voided and the client's balance is recomputed. Paid installments stay
    on record.
    """,
    responses={**NOT_FOUND_RESPONSE, **CONFLICT_RESPONSE, **STORAGE_RESPONSE},
)
def cancel_credit(
    credit_id: str,
    use_case: CancelCredit = Depends(get_cancel_credit_use_case),
) -> CancellationResponseDTO:
    result = use_case.execute(CancelCreditRequest(credit_id=credit_id))
    return CreditMapper.to_cancellation_response(result)
