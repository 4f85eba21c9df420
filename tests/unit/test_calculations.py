from datetime import datetime
from decimal import Decimal

import pytest

from berryevents.domain.pricing.calculations import (
    format_money,
    order_number,
    platform_fee,
    quantize_money,
    to_decimal,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, Decimal("0")),
        ("", Decimal("0")),
        ("200.00", Decimal("200.00")),
        (12, Decimal("12")),
        (0.1, Decimal("0.1")),
    ],
)
def test_to_decimal_coerces_wire_values(value, expected):
    assert to_decimal(value) == expected


def test_to_decimal_rejects_garbage():
    with pytest.raises(ValueError):
        to_decimal("twelve dollars")


def test_quantize_rounds_half_up():
    assert quantize_money("2.675") == Decimal("2.68")
    assert quantize_money("0.005") == Decimal("0.01")
    assert quantize_money("0.004") == Decimal("0.00")


def test_format_money_always_two_decimals():
    assert format_money(230) == "230.00"
    assert format_money("4.5") == "4.50"
    assert format_money(None) == "0.00"


def test_platform_fee_is_fifteen_percent_of_subtotal():
    assert platform_fee("200.00") == Decimal("30.00")
    assert platform_fee("0") == Decimal("0.00")


def test_platform_fee_rounds_to_cents():
    # 33.33 * 0.15 = 4.9995
    assert platform_fee("33.33") == Decimal("5.00")
    # 10.10 * 0.15 = 1.515
    assert platform_fee("10.10") == Decimal("1.52")


def test_platform_fee_accepts_custom_rate():
    assert platform_fee("100", rate=Decimal("0.2")) == Decimal("20.00")


def test_order_number_uses_year_and_id_suffix():
    booking_id = "8c1f4a52-0d3e-4b6e-9a8f-1b2c3dabc123"
    created_at = datetime(2024, 12, 31, 23, 59)
    assert order_number(booking_id, created_at) == "BE-2024-abc123"


def test_order_number_is_stable():
    created_at = datetime(2025, 1, 1)
    assert order_number("booking-xyz987", created_at) == order_number("booking-xyz987", created_at)
