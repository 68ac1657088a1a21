"""Unit tests for 30/360 interest accrual"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from ag_shop.domain.models import PurchaseTerms
from ag_shop.domain.interest import (
    accrual_end_date,
    accrue,
    days_360,
    elapsed_months,
    interest_amount,
    total_with_interest,
)


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (date(2024, 1, 1), date(2024, 2, 1), 1.0),
        (date(2024, 1, 15), date(2024, 2, 15), 1.0),
        (date(2024, 1, 1), date(2024, 4, 1), 3.0),
        (date(2024, 1, 1), date(2024, 1, 16), 0.5),
        (date(2023, 6, 10), date(2024, 6, 10), 12.0),
        # Day 31 counts as day 30 on both ends
        (date(2024, 1, 31), date(2024, 3, 31), 2.0),
        (date(2024, 3, 30), date(2024, 3, 31), 0.0),
    ],
)
def test_elapsed_months_30_360(start, end, expected):
    """Test whole and half months under 30/360"""
    assert elapsed_months(start, end) == expected


def test_elapsed_months_end_of_january_to_first_of_march():
    """
    Jan 31 counts as Jan 30, so Mar 1 is 31 days (30 + 1) later.

    The day-count steps give 31/30 here rather than a whole month; see OQ-2
    in DESIGN.md.
    """
    assert days_360(date(2024, 1, 31), date(2024, 3, 1)) == 31
    assert elapsed_months(date(2024, 1, 31), date(2024, 3, 1)) == pytest.approx(31 / 30)


def test_elapsed_months_same_day_is_zero():
    d = date(2024, 2, 29)
    assert elapsed_months(d, d) == 0.0


def test_elapsed_months_clamps_negative_to_zero():
    """Payment recorded before the purchase must not produce negative time"""
    assert elapsed_months(date(2024, 5, 1), date(2024, 4, 1)) == 0.0
    assert days_360(date(2025, 1, 1), date(2024, 12, 31)) == 0


def test_elapsed_months_open_window_uses_as_of():
    """No end date: measure up to the supplied evaluation date"""
    assert elapsed_months(date(2024, 1, 1), None, as_of=date(2024, 1, 16)) == 0.5


def test_elapsed_months_open_window_requires_as_of():
    with pytest.raises(ValueError):
        elapsed_months(date(2024, 1, 1))


def test_elapsed_months_end_date_wins_over_as_of():
    assert elapsed_months(date(2024, 1, 1), date(2024, 2, 1), as_of=date(2030, 1, 1)) == 1.0


def test_elapsed_months_monotonic():
    """Months never decrease as the end date moves forward"""
    start = date(2024, 1, 31)
    previous = -1.0
    for offset in range(0, 400):
        months = elapsed_months(start, start + timedelta(days=offset))
        assert months >= previous
        previous = months


def test_interest_amount_three_months():
    """$1000 at 3%/month for 3 months = $90"""
    interest = interest_amount(Decimal("1000"), Decimal("3"), date(2024, 1, 1), date(2024, 4, 1))
    assert interest == Decimal("90")

    total = total_with_interest(Decimal("1000"), Decimal("3"), date(2024, 1, 1), date(2024, 4, 1))
    assert total == Decimal("1090")


def test_interest_amount_half_month_as_of_today():
    """$500 at 3% evaluated half a month in = $7.50"""
    interest = interest_amount(Decimal("500"), Decimal("3"), date(2024, 1, 1), as_of=date(2024, 1, 16))
    assert interest == Decimal("7.5")


def test_interest_amount_is_not_rounded():
    """Full precision is kept; rounding is for display"""
    interest = interest_amount(Decimal("100"), Decimal("3"), date(2024, 1, 1), date(2024, 1, 2))
    # 100 * 3% * 1/30 = 0.1
    assert interest == Decimal("0.1")

    interest = interest_amount(Decimal("10"), Decimal("1"), date(2024, 1, 1), date(2024, 1, 2))
    assert interest != interest.quantize(Decimal("0.01"))


def test_interest_amount_zero_when_paid_before_purchase():
    interest = interest_amount(Decimal("1000"), Decimal("3"), date(2024, 4, 1), date(2024, 1, 1))
    assert interest == 0
    assert total_with_interest(Decimal("1000"), Decimal("3"), date(2024, 4, 1), date(2024, 1, 1)) == Decimal("1000")


def test_interest_amount_zero_rate():
    assert interest_amount(Decimal("1000"), Decimal("0"), date(2024, 1, 1), date(2025, 1, 1)) == 0


def test_interest_amount_accepts_plain_numbers():
    """ints and floats are converted without binary noise"""
    assert interest_amount(1000, 3, date(2024, 1, 1), date(2024, 4, 1)) == Decimal("90")
    assert interest_amount(0.1, 100.0, date(2024, 1, 1), date(2024, 2, 1)) == Decimal("0.1")


def test_interest_amount_computes_out_of_range_inputs():
    """Validation is the caller's job: negative principal is computed as given"""
    interest = interest_amount(Decimal("-1000"), Decimal("3"), date(2024, 1, 1), date(2024, 2, 1))
    assert interest == Decimal("-30")

    interest = interest_amount(Decimal("1000"), Decimal("150"), date(2024, 1, 1), date(2024, 2, 1))
    assert interest == Decimal("1500")


@pytest.mark.parametrize(
    "principal,rate,start,end",
    [
        (Decimal("1000"), Decimal("3"), date(2024, 1, 1), date(2024, 4, 1)),
        (Decimal("59.99"), Decimal("2.5"), date(2023, 2, 28), date(2024, 2, 29)),
        (Decimal("12000"), Decimal("0.75"), date(2022, 12, 31), date(2023, 1, 31)),
        (Decimal("1"), Decimal("100"), date(2024, 7, 4), date(2024, 7, 4)),
    ],
)
def test_total_is_principal_plus_interest(principal, rate, start, end):
    interest = interest_amount(principal, rate, start, end)
    assert interest >= 0
    assert total_with_interest(principal, rate, start, end) == principal + interest


def test_fixed_end_date_results_are_repeatable():
    """Paid purchases give identical results on every call"""
    args = (Decimal("733.33"), Decimal("3"), date(2023, 3, 17), date(2024, 1, 9))
    first = interest_amount(*args)
    assert all(interest_amount(*args) == first for _ in range(10))
    assert all(elapsed_months(args[2], args[3]) == elapsed_months(args[2], args[3]) for _ in range(10))


def test_accrual_end_date_rules():
    """Test where the accrual window closes for each purchase state"""
    buy = date(2024, 1, 1)
    paid = date(2024, 2, 10)

    assert accrual_end_date(buy, immediate=False, paid_date=None) is None
    assert accrual_end_date(buy, immediate=True, paid_date=None) == buy
    assert accrual_end_date(buy, immediate=True, paid_date=paid) == paid
    assert accrual_end_date(buy, immediate=False, paid_date=paid) == paid


def test_accrue_open_purchase():
    terms = PurchaseTerms(
        principal=Decimal("500"),
        monthly_rate_percent=Decimal("3"),
        start_date=date(2024, 1, 1),
        end_date=None,
    )

    accrual = accrue(terms, as_of=date(2024, 1, 16))

    assert accrual.elapsed_months == 0.5
    assert accrual.interest_amount == Decimal("7.5")
    assert accrual.total_with_interest == Decimal("507.5")


def test_accrue_closed_purchase_ignores_as_of():
    terms = PurchaseTerms(
        principal=Decimal("1000"),
        monthly_rate_percent=Decimal("3"),
        start_date=date(2024, 1, 1),
        end_date=date(2024, 4, 1),
    )

    early = accrue(terms, as_of=date(2024, 1, 2))
    late = accrue(terms, as_of=date(2030, 1, 1))

    assert early == late
    assert early.elapsed_months == 3.0
    assert early.interest_amount == Decimal("90")
