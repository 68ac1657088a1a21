"""Build API representations of stored purchases, including derived amounts"""

from datetime import date
from typing import Type, TypeVar
from ag_shop.config import settings
from ag_shop.api.schemas import PurchaseResponse, PurchaseDetailResponse
from ag_shop.domain.deposits import split_deposit
from ag_shop.domain.interest import accrual_end_date, accrue
from ag_shop.domain.models import PurchaseTerms
from ag_shop.infrastructure.database.models import Purchase
from ag_shop.infrastructure.observability.metrics import record_interest_evaluation
from ag_shop.utils import formatting

ResponseT = TypeVar("ResponseT", bound=PurchaseResponse)


def purchase_terms(purchase: Purchase) -> PurchaseTerms:
    """Map a stored purchase onto the calculator's inputs"""
    return PurchaseTerms(
        principal=purchase.total_amount,
        monthly_rate_percent=purchase.monthly_rate_percent,
        start_date=purchase.buy_date,
        end_date=accrual_end_date(purchase.buy_date, purchase.immediate, purchase.paid_date),
    )


def to_purchase_response(
    purchase: Purchase,
    today: date,
    response_cls: Type[ResponseT] = PurchaseResponse,
) -> ResponseT:
    """
    Evaluate a purchase as of `today` and round for display.

    Amounts stay at full precision through the calculation and are only
    quantized to cents here.
    """
    terms = purchase_terms(purchase)
    accrual = accrue(terms, as_of=today)
    record_interest_evaluation(open_ended=terms.end_date is None)

    deposit = split_deposit(purchase.total_amount, purchase.deposit_percentage, purchase.immediate)
    user = purchase.user

    fields = dict(
        id=purchase.id,
        user_id=purchase.user_id,
        user_name=user.name if user else None,
        buy_date=purchase.buy_date,
        due_date=purchase.due_date,
        paid_date=purchase.paid_date,
        immediate=purchase.immediate,
        payment_type="immediate" if purchase.immediate else "deposit",
        total_amount=formatting.money(purchase.total_amount),
        deposit_percentage=purchase.deposit_percentage,
        deposit_amount=formatting.money(deposit.deposit_amount) if deposit else None,
        remaining_amount=formatting.money(deposit.remaining_amount) if deposit else None,
        monthly_rate_percent=purchase.monthly_rate_percent,
        accruing=terms.end_date is None,
        elapsed_months=formatting.months(accrual.elapsed_months, settings.months_decimal_places),
        interest_amount=formatting.money(accrual.interest_amount),
        total_with_interest=formatting.money(accrual.total_with_interest),
        created_at=purchase.created_at,
        updated_at=purchase.updated_at,
    )

    if issubclass(response_cls, PurchaseDetailResponse) and user is not None:
        fields.update(
            user_email=user.email,
            user_phone=user.phone,
            user_address=user.address,
        )

    return response_cls(**fields)
