"""Tests for line pricing and totals."""

from datetime import timedelta
from decimal import Decimal

from conftest import NOW, burger, promo_payload

from cashier._types import IngredientId, ProductId
from cashier.pricing import (
    CartItem,
    Extra,
    Modification,
    price_line,
    resolve_order_total,
    subtotal,
    unit_discount,
)
from cashier.promotions import PromotionDescriptor


def promo(product_id: int = 10, **kwargs) -> PromotionDescriptor:
    descriptor = PromotionDescriptor.from_payload(ProductId(product_id), promo_payload(**kwargs))
    assert descriptor is not None
    return descriptor


def test_percentage_promotion_on_two_units():
    line = price_line(burger(), promo(percentage=20), at=NOW)

    assert line.original_total == Decimal("60.00")
    assert line.discounted_total == Decimal("48.00")
    assert line.discount == Decimal("12.00")
    assert line.promotion is not None


def test_fixed_discount_is_capped_at_base_price():
    assert unit_discount(Decimal("3.00"), promo(value=5)) == Decimal("3.00")

    line = price_line(burger(price="3.00", quantity=1), promo(value=5), at=NOW)
    assert line.discounted_total == Decimal("0.00")


def test_extras_and_positive_modifications_are_billed():
    item = burger(
        quantity=1,
        extras=(Extra(IngredientId(1), "2.50", quantity=2),),
        modifications=(
            Modification(IngredientId(2), delta=1, unit_price="1.00"),
            Modification(IngredientId(3), delta=-1, unit_price="4.00"),
        ),
    )
    line = price_line(item)

    # 30 + 2 × 2.50 + 1 × 1.00; removals are free
    assert line.original_total == Decimal("36.00")
    assert not line.excluded


def test_unknown_extra_price_falls_back_to_catalog_then_zero():
    item = burger(quantity=1, extras=(Extra(IngredientId(1), None), Extra(IngredientId(2), None)))

    line = price_line(item, ingredient_prices={IngredientId(1): Decimal("4.00")})

    assert line.original_total == Decimal("34.00")
    assert not line.excluded


def test_discount_applies_to_base_only():
    item = burger(quantity=1, extras=(Extra(IngredientId(1), "10.00"),))

    line = price_line(item, promo(percentage=50), at=NOW)

    assert line.original_total == Decimal("40.00")
    assert line.discounted_total == Decimal("25.00")


def test_malformed_numbers_exclude_the_line_instead_of_producing_nan():
    line = price_line(burger(price="abc", quantity=float("nan")))

    assert line.excluded
    assert line.original_total == Decimal("0.00")
    assert line.discounted_total == Decimal("0.00")
    assert len(line.problems) == 2


def test_promotion_for_another_product_or_outside_window_is_ignored():
    other = promo(product_id=11, percentage=50)
    assert price_line(burger(), other, at=NOW).discounted_total == Decimal("60.00")

    later = NOW + timedelta(days=5)
    assert price_line(burger(), promo(percentage=50), at=later).promotion is None


def test_discounted_total_never_leaves_original_range():
    for pct in (0, 1, 33, 99, 100):
        line = price_line(burger(price="9.99", quantity=3), promo(percentage=pct or 1), at=NOW)
        assert Decimal(0) <= line.discounted_total <= line.original_total


def test_subtotal_skips_excluded_lines():
    lines = [
        price_line(burger("1")),
        price_line(burger("2", price=None)),
        price_line(burger("3", price="5.00", quantity=1)),
    ]
    assert subtotal(lines) == Decimal("65.00")


def test_cart_item_from_payload():
    item = CartItem.from_payload(
        {
            "id": 55,
            "product_id": 10,
            "quantity": 2,
            "product": {"name": "X-Burger", "price": 25.9, "preparation_time_minutes": 18},
            "extras": [{"ingredient_id": 3, "quantity": 1, "price": 2}],
            "base_modifications": [{"ingredient_id": 4, "delta": -1}],
        }
    )

    assert item.line_ref == "55"
    assert item.name == "X-Burger"
    assert item.preparation_minutes == 18
    assert price_line(item).original_total == Decimal("53.80")


def test_resolve_order_total_precedence():
    assert resolve_order_total({"total_amount": "10", "total": 20}) == Decimal("10.00")
    assert resolve_order_total({"total_amount": "bad", "total": 20}) == Decimal("20.00")
    assert resolve_order_total({"amount": 7.5}) == Decimal("7.50")
    assert resolve_order_total(
        {"subtotal": "40", "delivery_fee": "5", "discount": "10"}
    ) == Decimal("35.00")
    assert resolve_order_total({}) == Decimal("0.00")
