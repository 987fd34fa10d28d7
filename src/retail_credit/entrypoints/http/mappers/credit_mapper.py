from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation

from retail_credit.domain.credit import (
    CancellationResult,
    ClientBalance,
    Credit,
    CreditSnapshot,
    CreditStatus,
    Installment,
    PaymentResult,
)
from retail_credit.domain.delinquency import days_overdue
from retail_credit.domain.errors import ValidationError
from retail_credit.entrypoints.http.dtos.credits import (
    CancellationResponseDTO,
    ClientBalanceDTO,
    CreditDTO,
    CreditListResponseDTO,
    CreditQuoteRequestDTO,
    CreditQuoteResponseDTO,
    CreditSnapshotResponseDTO,
    DelinquentCreditsResponseDTO,
    InstallmentDTO,
    OpenCreditRequestDTO,
    OverdueInstallmentDTO,
    OverdueInstallmentsResponseDTO,
    PaymentRequestDTO,
    PaymentResponseDTO,
    PendingInstallmentsResponseDTO,
    QuotedInstallmentDTO,
)
from retail_credit.use_cases.open_credit import OpenCreditRequest
from retail_credit.use_cases.pay_installment import PayInstallmentRequest
from retail_credit.use_cases.quote_credit import CreditQuote, QuoteCreditRequest


class CreditMapper:
    """Maps between REST DTOs and domain models for credits.

    Handles string <-> Decimal conversion at the boundary.
    """

    # ==========================================================================
    # Requests (DTO -> domain)
    # ==========================================================================

    @staticmethod
    def to_quote_request(dto: CreditQuoteRequestDTO, today: date) -> QuoteCreditRequest:
        """
        Raises:
            ValidationError: If string values cannot be converted to valid Decimals
        """
        errors: list[dict[str, str]] = []
        total = CreditMapper._parse_decimal("total", dto.total, errors)
        down_payment = CreditMapper._parse_optional_decimal("down_payment", dto.down_payment, errors)

        if errors:
            raise ValidationError(errors=errors)

        return QuoteCreditRequest(
            total=total,
            term_months=dto.term_months,
            sale_date=dto.sale_date or today,
            down_payment=down_payment,
        )

    @staticmethod
    def to_open_request(dto: OpenCreditRequestDTO) -> OpenCreditRequest:
        errors: list[dict[str, str]] = []
        down_payment = CreditMapper._parse_optional_decimal("down_payment", dto.down_payment, errors)

        if errors:
            raise ValidationError(errors=errors)

        return OpenCreditRequest(
            sale_id=dto.sale_id,
            client_id=dto.client_id,
            term_months=dto.term_months,
            down_payment=down_payment,
            sale_date=dto.sale_date,
        )

    @staticmethod
    def to_payment_request(
        credit_id: str, sequence_number: int, dto: PaymentRequestDTO
    ) -> PayInstallmentRequest:
        errors: list[dict[str, str]] = []
        amount = CreditMapper._parse_decimal("amount_tendered", dto.amount_tendered, errors)

        if errors:
            raise ValidationError(errors=errors)

        return PayInstallmentRequest(
            credit_id=credit_id,
            sequence_number=sequence_number,
            amount_tendered=amount,
        )

    # ==========================================================================
    # Responses (domain -> DTO)
    # ==========================================================================

    @staticmethod
    def to_quote_response(quote: CreditQuote) -> CreditQuoteResponseDTO:
        return CreditQuoteResponseDTO(
            down_payment=str(quote.terms.down_payment),
            financed_balance=str(quote.terms.financed_balance),
            interest_rate=str(quote.interest_rate),
            interest=str(quote.terms.interest),
            installment_value=str(quote.terms.installment_value),
            total_obligation=str(quote.total_obligation),
            term_months=quote.term_months,
            installments=[
                QuotedInstallmentDTO(
                    sequence_number=i.sequence_number,
                    due_date=i.due_date,
                    value=str(i.value),
                )
                for i in quote.installments
            ],
        )

    @staticmethod
    def to_credit_dto(credit: Credit) -> CreditDTO:
        return CreditDTO(
            id=credit.id,
            sale_id=credit.sale_id,
            client_id=credit.client_id,
            status=credit.status.value,
            total_amount=str(credit.total_amount),
            down_payment=str(credit.down_payment),
            financed_balance=str(credit.financed_balance),
            interest_rate=str(credit.interest_rate),
            interest=str(credit.interest),
            total_obligation=str(credit.total_obligation),
            term_months=credit.term_months,
            remaining_balance=str(credit.remaining_balance),
            created_at=credit.created_at,
        )

    @staticmethod
    def to_installment_dto(installment: Installment) -> InstallmentDTO:
        return InstallmentDTO(
            credit_id=installment.credit_id,
            sequence_number=installment.sequence_number,
            value=str(installment.value),
            due_date=installment.due_date,
            paid=installment.paid,
            payment_date=installment.payment_date,
        )

    @staticmethod
    def to_snapshot_response(snapshot: CreditSnapshot) -> CreditSnapshotResponseDTO:
        next_installment = snapshot.next_installment
        return CreditSnapshotResponseDTO(
            credit=CreditMapper.to_credit_dto(snapshot.credit),
            paid_installments=snapshot.paid_installments,
            pending_installments=snapshot.pending_installments,
            next_installment=(
                CreditMapper.to_installment_dto(next_installment) if next_installment else None
            ),
            installments=[CreditMapper.to_installment_dto(i) for i in snapshot.installments],
        )

    @staticmethod
    def to_balance_dto(balance: ClientBalance) -> ClientBalanceDTO:
        return ClientBalanceDTO(
            outstanding_balance=str(balance.outstanding_balance),
            available_credit=str(balance.available_credit),
        )

    @staticmethod
    def to_payment_response(result: PaymentResult) -> PaymentResponseDTO:
        return PaymentResponseDTO(
            credit_id=result.credit_id,
            sequence_number=result.sequence_number,
            amount_applied=str(result.amount_applied),
            amount_tendered=str(result.amount_tendered),
            paid_at=result.paid_at,
            remaining_balance=str(result.remaining_balance),
            credit_status=result.credit_status.value,
            client_balance=CreditMapper.to_balance_dto(result.client_balance),
        )

    @staticmethod
    def to_cancellation_response(result: CancellationResult) -> CancellationResponseDTO:
        return CancellationResponseDTO(
            credit_id=result.credit_id,
            sale_id=result.sale_id,
            reversed_amount=str(result.reversed_amount),
            unpaid_installments=result.unpaid_installments,
            client_balance=CreditMapper.to_balance_dto(result.client_balance),
        )

    @staticmethod
    def to_overdue_response(
        client_id: str, as_of: date, installments: list[Installment]
    ) -> OverdueInstallmentsResponseDTO:
        return OverdueInstallmentsResponseDTO(
            client_id=client_id,
            as_of=as_of,
            installments=[
                OverdueInstallmentDTO(
                    **CreditMapper.to_installment_dto(i).model_dump(),
                    days_overdue=days_overdue(i, as_of),
                )
                for i in installments
            ],
        )

    @staticmethod
    def to_pending_response(
        client_id: str, installments: list[Installment]
    ) -> PendingInstallmentsResponseDTO:
        return PendingInstallmentsResponseDTO(
            client_id=client_id,
            installments=[CreditMapper.to_installment_dto(i) for i in installments],
        )

    @staticmethod
    def to_delinquent_response(as_of: date, credits: list[Credit]) -> DelinquentCreditsResponseDTO:
        return DelinquentCreditsResponseDTO(
            as_of=as_of,
            credits=[CreditMapper.to_credit_dto(c) for c in credits],
        )

    @staticmethod
    def to_credit_list_response(
        credits: list[Credit],
        client_id: str | None = None,
        status: CreditStatus | None = None,
    ) -> CreditListResponseDTO:
        return CreditListResponseDTO(
            client_id=client_id,
            status=status.value if status is not None else None,
            credits=[CreditMapper.to_credit_dto(c) for c in credits],
        )

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @staticmethod
    def _parse_decimal(field: str, raw: str, errors: list[dict[str, str]]) -> Decimal:
        try:
            return Decimal(raw)
        except (InvalidOperation, ValueError):
            errors.append(
                {
                    "field": field,
                    "message": f"Must be a valid decimal: {raw}",
                    "code": "INVALID_DECIMAL",
                }
            )
            return Decimal("0")  # Placeholder to continue validation

    @staticmethod
    def _parse_optional_decimal(
        field: str, raw: str | None, errors: list[dict[str, str]]
    ) -> Decimal | None:
        if raw is None:
            return None
        return CreditMapper._parse_decimal(field, raw, errors)
