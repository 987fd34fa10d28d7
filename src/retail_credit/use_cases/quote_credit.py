from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from retail_credit.domain.money import INTEREST_RATE, CreditTerms, compute_schedule
from retail_credit.domain.schedule import due_date_for, installment_values


@dataclass(frozen=True, slots=True)
class QuoteCreditRequest:
    total: Decimal
    term_months: int
    sale_date: date
    down_payment: Decimal | None = None


@dataclass(frozen=True, slots=True)
class QuotedInstallment:
    sequence_number: int
    due_date: date
    value: Decimal


@dataclass(frozen=True, slots=True)
class CreditQuote:
    terms: CreditTerms
    interest_rate: Decimal
    term_months: int
    total_obligation: Decimal
    installments: list[QuotedInstallment]


@dataclass(frozen=True, slots=True)
class QuoteCredit:
    """
    Preview the financing of a credit sale without persisting anything.

    Rounding policy (same as a real credit):
    - Policy figures (down payment, financed balance, interest) keep full precision
    - Installment values are rounded to cents using ROUND_HALF_UP
    - The last installment absorbs the remainder, so values sum to total_obligation exactly
    """

    interest_rate: Decimal = INTEREST_RATE

    def execute(self, req: QuoteCreditRequest) -> CreditQuote:
        terms = compute_schedule(
            req.total,
            req.term_months,
            down_payment=req.down_payment,
            interest_rate=self.interest_rate,
        )
        total_obligation = terms.total_obligation

        installments = [
            QuotedInstallment(
                sequence_number=sequence_number,
                due_date=due_date_for(req.sale_date, sequence_number),
                value=value,
            )
            for sequence_number, value in enumerate(
                installment_values(total_obligation, req.term_months), start=1
            )
        ]

        return CreditQuote(
            terms=terms,
            interest_rate=self.interest_rate,
            term_months=req.term_months,
            total_obligation=total_obligation,
            installments=installments,
        )
