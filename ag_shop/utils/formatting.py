"""Presentation formatting for money, months and dates"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from ag_shop.domain.interest import Number, to_decimal

CENTS = Decimal("0.01")


def money(value: Number) -> Decimal:
    """Quantize an amount to exactly 2 decimal places (half-up)"""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def money_text(value: Number) -> str:
    """Amount as display text, e.g. $1,090.00"""
    return f"${money(value):,.2f}"


def months(value: float, places: int = 2) -> float:
    """Round elapsed months to a fixed number of places for display"""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def display_date(value: Optional[date]) -> str:
    """Date as 'Jan 05, 2024', or '-' when absent"""
    if value is None:
        return "-"
    return value.strftime("%b %d, %Y")
