"""Tests for money parsing and rounding."""

from decimal import Decimal

import pytest

from cashier.money import floor_money, parse_amount, parse_quantity, to_money


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("12,50", Decimal("12.50")),
        ("12.5", Decimal("12.50")),
        (7, Decimal("7.00")),
        (2.675, Decimal("2.68")),
        (Decimal("0.005"), Decimal("0.01")),
    ],
)
def test_parse_amount_accepts_common_shapes(raw, expected):
    parsed = parse_amount(raw)
    assert parsed.valid
    assert parsed.value == expected


@pytest.mark.parametrize(
    "raw", [None, True, "abc", "-1", float("nan"), float("inf"), Decimal("NaN"), [], "1,000.5,0"]
)
def test_parse_amount_flags_unusable_input_as_zero(raw):
    parsed = parse_amount(raw)
    assert not parsed.valid
    assert parsed.value == Decimal("0.00")


def test_parse_quantity_rejects_fractions_and_values_below_minimum():
    assert parse_quantity("3", minimum=1).value == 3
    assert not parse_quantity(1.5).valid
    assert not parse_quantity(0, minimum=1).valid
    assert not parse_quantity(-2).valid
    assert parse_quantity(Decimal("4.0")).value == 4


def test_rounding_modes():
    assert to_money(Decimal("1.005")) == Decimal("1.01")
    assert floor_money(Decimal("1.009")) == Decimal("1.00")
