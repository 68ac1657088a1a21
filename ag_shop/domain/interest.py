"""Credit-purchase interest accrual - core business logic for purchase balances"""

from datetime import date
from decimal import Decimal
from typing import Optional, Union
from ag_shop.domain.models import PurchaseTerms, InterestAccrual

Number = Union[Decimal, int, float, str]

DAYS_PER_MONTH = 30


def to_decimal(value: Number) -> Decimal:
    # str() keeps 0.1 as 0.1 instead of its binary expansion
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _resolve_end_date(end_date: Optional[date], as_of: Optional[date]) -> date:
    if end_date is not None:
        return end_date
    if as_of is None:
        raise ValueError("as_of is required when end_date is None")
    return as_of


def days_360(start_date: date, end_date: date) -> int:
    """
    Count days between two dates under the 30/360 (US bond-basis) convention.

    Every month counts as 30 days and every year as 360. Day 31 is treated as
    day 30 on both ends. Elapsed time before the start date is clamped to 0.
    """
    d1 = start_date.day
    d2 = end_date.day
    if d1 == 31:
        d1 = 30
    if d2 == 31:
        d2 = 30

    total = (
        (end_date.year - start_date.year) * 360
        + (end_date.month - start_date.month) * DAYS_PER_MONTH
        + (d2 - d1)
    )
    return max(total, 0)


def elapsed_months(
    start_date: date,
    end_date: Optional[date] = None,
    *,
    as_of: Optional[date] = None,
) -> float:
    """
    Elapsed accrual time in (fractional, unrounded) 30/360 months.

    Args:
        start_date: Date the purchase began accruing
        end_date: Date the purchase was paid, or None while still accruing
        as_of: Evaluation date used when end_date is None. Callers supply
            "today" here; the calculator never reads the clock itself.

    Example:
        2024-01-15 -> 2024-02-15 = 30 days = 1.0 month
        2024-01-01 -> 2024-01-16 = 15 days = 0.5 month
    """
    end = _resolve_end_date(end_date, as_of)
    return days_360(start_date, end) / float(DAYS_PER_MONTH)


def interest_amount(
    principal: Number,
    monthly_rate_percent: Number,
    start_date: date,
    end_date: Optional[date] = None,
    *,
    as_of: Optional[date] = None,
) -> Decimal:
    """
    Simple (non-compounding) interest accrued on the principal.

    interest = principal * rate / 100 * months

    The result is full precision; rounding to cents belongs to whoever
    displays or exports it. Inputs are not validated: a negative principal
    or an out-of-range rate is computed as given.
    """
    end = _resolve_end_date(end_date, as_of)
    days = days_360(start_date, end)
    return (
        to_decimal(principal)
        * to_decimal(monthly_rate_percent)
        / Decimal(100)
        * Decimal(days)
        / Decimal(DAYS_PER_MONTH)
    )


def total_with_interest(
    principal: Number,
    monthly_rate_percent: Number,
    start_date: date,
    end_date: Optional[date] = None,
    *,
    as_of: Optional[date] = None,
) -> Decimal:
    """Principal plus accrued interest"""
    interest = interest_amount(principal, monthly_rate_percent, start_date, end_date, as_of=as_of)
    return to_decimal(principal) + interest


def accrual_end_date(buy_date: date, immediate: bool, paid_date: Optional[date]) -> Optional[date]:
    """
    Determine where a purchase's accrual window closes.

    - Recorded payment date: accrual stops there (final interest)
    - Immediate purchase with no payment date: paid at the till, nothing accrues
    - Open credit purchase: None, accrues up to the evaluation date
    """
    if paid_date is not None:
        return paid_date
    if immediate:
        return buy_date
    return None


def accrue(terms: PurchaseTerms, as_of: date) -> InterestAccrual:
    """
    Main entry point: evaluate one purchase's interest as of a given date.

    Returns months, interest and total together so callers rendering a row
    do the date math once.
    """
    end = _resolve_end_date(terms.end_date, as_of)
    interest = interest_amount(terms.principal, terms.monthly_rate_percent, terms.start_date, end)

    return InterestAccrual(
        elapsed_months=elapsed_months(terms.start_date, end),
        interest_amount=interest,
        total_with_interest=to_decimal(terms.principal) + interest,
    )
