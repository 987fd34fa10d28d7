from __future__ import annotations

from datetime import date

from retail_credit.domain.credit import Installment


def is_overdue(installment: Installment, as_of: date) -> bool:
    """An unpaid installment whose due date is strictly before as_of."""
    return not installment.paid and installment.due_date < as_of


def days_overdue(installment: Installment, as_of: date) -> int:
    if not is_overdue(installment, as_of):
        return 0
    return (as_of - installment.due_date).days
