"""Deposit split for purchases paid partly upfront"""

from decimal import Decimal
from typing import Optional
from ag_shop.domain.interest import Number, to_decimal
from ag_shop.domain.models import DepositBreakdown


def deposit_amount(total: Number, deposit_percentage: Number) -> Decimal:
    """Portion of the total paid upfront"""
    return to_decimal(total) * to_decimal(deposit_percentage) / Decimal(100)


def remaining_amount(total: Number, deposit_percentage: Number) -> Decimal:
    """Portion of the total still owed after the deposit"""
    return to_decimal(total) - deposit_amount(total, deposit_percentage)


def split_deposit(total: Number, deposit_percentage: Number, immediate: bool) -> Optional[DepositBreakdown]:
    """
    Deposit breakdown for a purchase.

    Immediate purchases are settled in full at the till and have no deposit
    split, so they return None.
    """
    if immediate:
        return None
    return DepositBreakdown(
        deposit_amount=deposit_amount(total, deposit_percentage),
        remaining_amount=remaining_amount(total, deposit_percentage),
    )
