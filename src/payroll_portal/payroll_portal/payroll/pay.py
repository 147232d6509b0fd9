from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

from .model import EmployeeRecord

ZERO = Decimal(0)


def parse_amount(value) -> Decimal:
    """Read an amount typed as free text; anything non-numeric counts as zero."""
    if value is None:
        return ZERO
    text = str(value).strip()
    if not text:
        return ZERO
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return ZERO
    if not amount.is_finite():
        return ZERO
    return amount


def net_pay(record: EmployeeRecord) -> Decimal:
    return parse_amount(record.gross_pay) - parse_amount(record.tax)


def as_number(amount: Decimal) -> Union[int, float]:
    """Plain int/float for spreadsheets and templates."""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def format_amount(amount: Decimal) -> str:
    value = as_number(amount)
    if isinstance(value, int):
        return f"{value:,}"
    return f"{value:,.2f}"
