"""Unit tests for spreadsheet export"""

from datetime import date
from decimal import Decimal
from ag_shop.api.export import PURCHASE_COLUMNS, purchases_frame, to_xlsx, users_frame
from ag_shop.api.schemas import PurchaseResponse, UserResponse


def _purchase(**overrides) -> PurchaseResponse:
    fields = dict(
        id=1,
        user_id=1,
        user_name="Alice Moreau",
        buy_date=date(2024, 1, 1),
        due_date=date(2024, 3, 1),
        immediate=False,
        payment_type="deposit",
        total_amount=Decimal("1000.00"),
        deposit_percentage=Decimal("20.00"),
        deposit_amount=Decimal("200.00"),
        remaining_amount=Decimal("800.00"),
        monthly_rate_percent=Decimal("3.00"),
        accruing=True,
        elapsed_months=1.03,
        interest_amount=Decimal("31.00"),
        total_with_interest=Decimal("1031.00"),
    )
    fields.update(overrides)
    return PurchaseResponse(**fields)


def test_purchases_frame_deposit_row():
    df = purchases_frame([_purchase()])

    assert list(df.columns) == PURCHASE_COLUMNS
    row = df.iloc[0]
    assert row["Customer"] == "Alice Moreau"
    assert row["Buy Date"] == "Jan 01, 2024"
    assert row["Due Date"] == "Mar 01, 2024"
    assert row["Total Amount"] == "$1,000.00"
    assert row["Payment Method"] == "Deposit"
    assert row["Deposit %"] == "20%"
    assert row["Remaining"] == "$800.00"
    assert row["Months"] == "1.03"
    assert row["Interest Amount"] == "$31.00"
    assert row["Total with Interest"] == "$1,031.00"


def test_purchases_frame_immediate_row():
    df = purchases_frame([
        _purchase(
            immediate=True,
            payment_type="immediate",
            due_date=None,
            deposit_percentage=Decimal("0.00"),
            deposit_amount=None,
            remaining_amount=None,
            accruing=False,
            elapsed_months=0.0,
            interest_amount=Decimal("0.00"),
            total_with_interest=Decimal("1000.00"),
        )
    ])

    row = df.iloc[0]
    assert row["Payment Method"] == "Paid"
    assert row["Due Date"] == "-"
    assert row["Deposit %"] == "-"
    assert row["Remaining"] == "-"
    assert row["Months"] == "0.00"


def test_empty_frames_keep_headers():
    assert list(purchases_frame([]).columns) == PURCHASE_COLUMNS
    assert list(users_frame([]).columns) == ["Name", "Email", "Phone", "Address"]


def test_users_frame_fills_missing_contact_fields():
    df = users_frame([UserResponse(id=1, name="Bob Stone", email="bob@example.com")])

    assert df.iloc[0]["Phone"] == "-"
    assert df.iloc[0]["Address"] == "-"


def test_to_xlsx_produces_workbook():
    content = to_xlsx(purchases_frame([_purchase()]), sheet_name="Purchases")

    # .xlsx is a zip archive
    assert content[:2] == b"PK"
    assert len(content) > 0
