"""Domain models - pure Python dataclasses representing business values"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class PurchaseTerms:
    """Inputs to the interest calculation for one purchase"""

    principal: Decimal
    monthly_rate_percent: Decimal
    start_date: date
    end_date: Optional[date]  # None while the purchase is still accruing


@dataclass(frozen=True)
class InterestAccrual:
    """Full-precision output of the interest calculation"""

    elapsed_months: float
    interest_amount: Decimal
    total_with_interest: Decimal


@dataclass(frozen=True)
class DepositBreakdown:
    """Upfront deposit and outstanding balance of a deposit purchase"""

    deposit_amount: Decimal
    remaining_amount: Decimal
