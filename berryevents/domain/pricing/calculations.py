"""Money helpers shared by checkout and the orders read model"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from ...config import PLATFORM_COMMISSION_RATE

CENTS = Decimal("0.01")

MoneyLike = Union[Decimal, str, int, float, None]


def to_decimal(value: MoneyLike) -> Decimal:
    """
    Coerce a stored or submitted amount to Decimal.
    None and empty strings are zero; floats go through str() to avoid binary artefacts.
    """
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid monetary amount: {value!r}") from e


def quantize_money(value: MoneyLike) -> Decimal:
    """Round to cents, half-up"""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(value: MoneyLike) -> str:
    """Two-decimal string used on the wire, e.g. "230.00" """
    return str(quantize_money(value))


def platform_fee(subtotal: MoneyLike, rate: Optional[Decimal] = None) -> Decimal:
    """Platform commission on a service subtotal (tips are not passed in here)"""
    if rate is None:
        rate = PLATFORM_COMMISSION_RATE
    return quantize_money(to_decimal(subtotal) * rate)


def order_number(booking_id: str, created_at: datetime) -> str:
    """BE-<year>-<last 6 chars of booking id>"""
    return f"BE-{created_at.year}-{booking_id[-6:]}"
