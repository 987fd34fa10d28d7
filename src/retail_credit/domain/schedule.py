"""Installment schedule generation for credit sales."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from retail_credit.domain.credit import Credit, Installment, new_id
from retail_credit.domain.money import round_money


def due_date_for(sale_date: date, sequence_number: int) -> date:
    """
    Due date of an installment: sale date plus N calendar months.

    Always computed from the seed date (never chained), so a sale on Jan 31
    falls due on Feb 28/29, Mar 31, Apr 30, ...
    relativedelta clamps the day to the last valid day of the target month.
    """
    return sale_date + relativedelta(months=sequence_number)


def generate_installments(credit: Credit, sale_date: date) -> list[Installment]:
    """
    Generate the full installment schedule of a credit.

    Requirements:
    - Exactly credit.term_months installments, sequence 1..term
    - Installment i falls due sale_date + i months
    - Every value is the per-installment value rounded to cents
    - Last installment absorbs the rounding remainder so the values sum
      to the credit's financed-plus-interest total exactly

    Example:
        1000.00 total, 18 months -> 735.00 obligation
        735.00 / 18 = 40.8333... -> 17 x 40.83, last 40.89
    """
    values = installment_values(credit.total_obligation, credit.term_months)

    return [
        Installment(
            id=new_id(),
            credit_id=credit.id,
            sequence_number=sequence_number,
            value=value,
            due_date=due_date_for(sale_date, sequence_number),
        )
        for sequence_number, value in enumerate(values, start=1)
    ]


def installment_values(total_obligation: Decimal, term_months: int) -> list[Decimal]:
    """Equal cent-rounded values; the last one takes the remainder."""
    base_value = round_money(total_obligation / term_months)
    last_value = total_obligation - base_value * (term_months - 1)
    return [base_value] * (term_months - 1) + [last_value]
