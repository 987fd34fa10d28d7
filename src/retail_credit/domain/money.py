"""Money and term policy for credit sales.

Single source of the down payment / financed balance / interest formulas.
Every caller (quotes, credit opening, schedule generation) goes through here.

Rounding policy:
- compute_schedule() keeps full Decimal precision, nothing is rounded
- round_money() is the only rounding point (cents, ROUND_HALF_UP) and is applied
  when installment values and balances are persisted
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from retail_credit.domain.errors import InvalidAmountError, InvalidTermError


ALLOWED_TERMS = frozenset({12, 18, 24})
DOWN_PAYMENT_RATE = Decimal("0.30")
INTEREST_RATE = Decimal("0.05")
CENT = Decimal("0.01")
# Widest scales the credits table stores exactly
MONEY_PLACES = 2
RATE_PLACES = 4
ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class CreditTerms:
    down_payment: Decimal
    financed_balance: Decimal
    interest: Decimal
    installment_value: Decimal

    @property
    def total_obligation(self) -> Decimal:
        """Financed balance plus the flat interest surcharge, in cents."""
        return round_money(self.financed_balance + self.interest)


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def as_money(value: Decimal | int, field: str = "amount") -> Decimal:
    """
    Coerce a monetary input to Decimal.

    Raises:
        InvalidAmountError: If value is a float or not a number
    """
    # Guardrail: prevent float leakage past boundary
    if isinstance(value, bool) or not isinstance(value, (Decimal, int)):
        raise InvalidAmountError(
            f"{field} must be Decimal or int (no floats past the boundary)",
            field=field,
        )
    amount = Decimal(value)
    if not amount.is_finite():
        raise InvalidAmountError(f"{field} must be a finite number", field=field)
    return amount


def ensure_places(amount: Decimal, places: int, field: str) -> None:
    """
    Raises:
        InvalidAmountError: If amount carries more than `places` significant decimals
    """
    if amount.normalize().as_tuple().exponent < -places:
        raise InvalidAmountError(
            f"{field} must have at most {places} decimal places",
            field=field,
            value=str(amount),
        )


def validate_term(term_months: int) -> None:
    if isinstance(term_months, bool) or term_months not in ALLOWED_TERMS:
        raise InvalidTermError(
            f"term_months must be one of {sorted(ALLOWED_TERMS)}",
            term_months=term_months,
        )


def compute_schedule(
    total: Decimal | int,
    term_months: int,
    *,
    down_payment: Decimal | int | None = None,
    interest_rate: Decimal | int = INTEREST_RATE,
) -> CreditTerms:
    """
    Compute the financing figures of a credit sale.

    - down_payment = total * 30% (unless given explicitly)
    - financed_balance = total - down_payment
    - interest = financed_balance * interest_rate (flat, charged once)
    - installment_value = (financed_balance + interest) / term_months

    Raises:
        InvalidTermError: If term_months is not 12, 18 or 24
        InvalidAmountError: If total <= 0, down_payment is outside [0, total),
            interest_rate is negative, or an input has more decimals than the
            credits table stores (2 for money, 4 for the rate)
    """
    total = as_money(total, "total")
    ensure_places(total, MONEY_PLACES, "total")
    validate_term(term_months)

    if total <= 0:
        raise InvalidAmountError("total must be > 0", total=str(total))

    if down_payment is None:
        down = total * DOWN_PAYMENT_RATE
    else:
        down = as_money(down_payment, "down_payment")
        ensure_places(down, MONEY_PLACES, "down_payment")
        if down < 0:
            raise InvalidAmountError("down_payment must be >= 0", down_payment=str(down))
        # A credit with nothing left to finance would be born with a zero balance
        if down >= total:
            raise InvalidAmountError("down_payment must be < total", down_payment=str(down))

    rate = as_money(interest_rate, "interest_rate")
    ensure_places(rate, RATE_PLACES, "interest_rate")
    if rate < 0:
        raise InvalidAmountError("interest_rate must be >= 0", interest_rate=str(rate))

    financed_balance = total - down
    interest = financed_balance * rate

    return CreditTerms(
        down_payment=down,
        financed_balance=financed_balance,
        interest=interest,
        installment_value=(financed_balance + interest) / Decimal(term_months),
    )
