"""Display formatting for currency and percentages (AUD, 2 decimal places)"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal]

CENTS = Decimal("0.01")


def to_money(value: Number) -> Decimal:
    """Round to cents, half away from zero"""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(amount: Number) -> str:
    """$12,345.68 style, negatives as -$1.00"""
    money = to_money(amount)
    sign = "-" if money < 0 else ""
    return f"{sign}${abs(money):,.2f}"


def format_percentage(value: Number, decimals: int = 2) -> str:
    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:.{decimals}f}%"


def format_number(value: Number) -> str:
    """Thousands separators, up to 3 decimals with trailing zeros dropped"""
    rounded = Decimal(str(value)).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    text = f"{rounded:,.3f}".rstrip("0").rstrip(".")
    return text
