"""Spreadsheet export of purchase and user lists (pandas + xlsxwriter)"""

import io
from typing import Iterable
import pandas as pd
from ag_shop.config import settings
from ag_shop.api.schemas import PurchaseResponse, UserResponse
from ag_shop.utils import formatting

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

PURCHASE_COLUMNS = [
    "Customer",
    "Buy Date",
    "Due Date",
    "Total Amount",
    "Payment Method",
    "Deposit %",
    "Remaining",
    "Months",
    "Interest Amount",
    "Total with Interest",
]

USER_COLUMNS = ["Name", "Email", "Phone", "Address"]


def purchases_frame(purchases: Iterable[PurchaseResponse]) -> pd.DataFrame:
    """One row per purchase, money as exact two-decimal text"""
    places = settings.months_decimal_places
    rows = []
    for p in purchases:
        rows.append({
            "Customer": p.user_name or "-",
            "Buy Date": formatting.display_date(p.buy_date),
            "Due Date": formatting.display_date(p.due_date),
            "Total Amount": formatting.money_text(p.total_amount),
            "Payment Method": "Paid" if p.immediate else "Deposit",
            "Deposit %": "-" if p.immediate else f"{p.deposit_percentage.normalize():f}%",
            "Remaining": "-" if p.remaining_amount is None else formatting.money_text(p.remaining_amount),
            "Months": f"{p.elapsed_months:.{places}f}",
            "Interest Amount": formatting.money_text(p.interest_amount),
            "Total with Interest": formatting.money_text(p.total_with_interest),
        })

    return pd.DataFrame(rows, columns=PURCHASE_COLUMNS)


def users_frame(users: Iterable[UserResponse]) -> pd.DataFrame:
    rows = [
        {
            "Name": u.name,
            "Email": u.email or "-",
            "Phone": u.phone or "-",
            "Address": u.address or "-",
        }
        for u in users
    ]
    return pd.DataFrame(rows, columns=USER_COLUMNS)


def to_xlsx(df: pd.DataFrame, sheet_name: str) -> bytes:
    """Render a DataFrame as an .xlsx workbook in memory with a formatted header"""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="xlsxwriter") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
        workbook = writer.book
        worksheet = writer.sheets[sheet_name]

        header_fmt = workbook.add_format({"bold": True, "border": 1, "bg_color": "#D7E4BC"})
        for col_num, value in enumerate(df.columns.values):
            worksheet.write(0, col_num, value, header_fmt)

        worksheet.set_column(0, 0, 25)
        worksheet.set_column(1, max(len(df.columns) - 1, 1), 18)

    return buffer.getvalue()
