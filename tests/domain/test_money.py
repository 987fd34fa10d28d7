"""
Unit tests for the credit money policy.

Covers:
- Default 30% down payment and flat 5% interest
- Term validation (12, 18, 24 only)
- Amount guardrails (positive totals, no floats, down payment below total)
- Cent rounding (ROUND_HALF_UP)
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from retail_credit.domain.errors import InvalidAmountError, InvalidTermError
from retail_credit.domain.money import (
    ALLOWED_TERMS,
    as_money,
    compute_schedule,
    round_money,
    validate_term,
)


# ==============================================================================
# compute_schedule()
# ==============================================================================


def test_default_policy_for_one_million_over_twelve_months() -> None:
    terms = compute_schedule(Decimal("1000000"), 12)

    assert terms.down_payment == Decimal("300000")
    assert terms.financed_balance == Decimal("700000")
    assert terms.interest == Decimal("35000")
    assert terms.installment_value == Decimal("61250")
    assert terms.total_obligation == Decimal("735000.00")


def test_installment_value_keeps_full_precision() -> None:
    """Rounding happens when installments are generated, not here."""
    terms = compute_schedule(Decimal("1000"), 18)

    assert terms.total_obligation == Decimal("735.00")
    assert terms.installment_value == Decimal("735") / Decimal("18")
    assert terms.installment_value != round_money(terms.installment_value)


def test_explicit_down_payment_overrides_default() -> None:
    terms = compute_schedule(Decimal("1000000"), 24, down_payment=Decimal("100000"))

    assert terms.down_payment == Decimal("100000")
    assert terms.financed_balance == Decimal("900000")
    assert terms.interest == Decimal("45000")
    assert terms.total_obligation == Decimal("945000.00")


def test_zero_down_payment_finances_everything() -> None:
    terms = compute_schedule(Decimal("1200"), 12, down_payment=0)

    assert terms.financed_balance == Decimal("1200")
    assert terms.total_obligation == Decimal("1260.00")


def test_zero_interest_rate() -> None:
    terms = compute_schedule(Decimal("1000"), 12, interest_rate=Decimal("0"))

    assert terms.interest == Decimal("0")
    assert terms.total_obligation == Decimal("700.00")


def test_accepts_int_total() -> None:
    assert compute_schedule(1000000, 12).financed_balance == Decimal("700000")


@pytest.mark.parametrize("term", [1, 6, 13, 36, 0, -12])
def test_rejects_terms_outside_policy(term: int) -> None:
    with pytest.raises(InvalidTermError):
        compute_schedule(Decimal("1000"), term)


@pytest.mark.parametrize("total", [Decimal("0"), Decimal("-1"), -500])
def test_rejects_non_positive_total(total: Decimal) -> None:
    with pytest.raises(InvalidAmountError):
        compute_schedule(total, 12)


def test_rejects_negative_down_payment() -> None:
    with pytest.raises(InvalidAmountError):
        compute_schedule(Decimal("1000"), 12, down_payment=Decimal("-1"))


@pytest.mark.parametrize("down", [Decimal("1000"), Decimal("1500")])
def test_rejects_down_payment_not_below_total(down: Decimal) -> None:
    with pytest.raises(InvalidAmountError):
        compute_schedule(Decimal("1000"), 12, down_payment=down)


def test_rejects_negative_interest_rate() -> None:
    with pytest.raises(InvalidAmountError):
        compute_schedule(Decimal("1000"), 12, interest_rate=Decimal("-0.01"))


def test_rejects_rate_finer_than_stored_scale() -> None:
    with pytest.raises(InvalidAmountError):
        compute_schedule(Decimal("1000"), 12, interest_rate=Decimal("0.05125"))


@pytest.mark.parametrize(
    ("total", "down"),
    [(Decimal("1000.005"), None), (Decimal("1000"), Decimal("100.001"))],
)
def test_rejects_sub_cent_money(total: Decimal, down: Decimal | None) -> None:
    with pytest.raises(InvalidAmountError):
        compute_schedule(total, 12, down_payment=down)


def test_trailing_zeros_do_not_count_as_places() -> None:
    terms = compute_schedule(
        Decimal("1000.000"), 12, interest_rate=Decimal("0.0512500")
    )

    assert terms.interest == Decimal("35.875")


def test_rejects_float_total() -> None:
    with pytest.raises(InvalidAmountError):
        compute_schedule(1000.0, 12)  # type: ignore[arg-type]


# ==============================================================================
# Helpers
# ==============================================================================


def test_allowed_terms() -> None:
    assert ALLOWED_TERMS == {12, 18, 24}


def test_validate_term_rejects_bool() -> None:
    with pytest.raises(InvalidTermError):
        validate_term(True)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (Decimal("0.005"), Decimal("0.01")),
        (Decimal("0.004"), Decimal("0.00")),
        (Decimal("40.8333"), Decimal("40.83")),
        (Decimal("2.675"), Decimal("2.68")),
    ],
)
def test_round_money_half_up(raw: Decimal, expected: Decimal) -> None:
    assert round_money(raw) == expected


@pytest.mark.parametrize("value", [1.5, "10", None, True, Decimal("NaN"), Decimal("Infinity")])
def test_as_money_rejects_non_decimal_inputs(value: object) -> None:
    with pytest.raises(InvalidAmountError):
        as_money(value)  # type: ignore[arg-type]
