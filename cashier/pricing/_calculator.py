"""
Price calculator — per-line totals with promotion discounts.

    line = price_line(item, promo)
    line.original_total     # base × qty + extras + billed modifications
    line.discounted_total   # original − unit discount × qty, never below 0
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from cashier._types import IngredientId
from cashier.log import get_logger
from cashier.money import (
    ZERO,
    parse_amount,
    parse_delta,
    parse_quantity,
    to_money,
)
from cashier.pricing._types import CartItem, PricedLine

if TYPE_CHECKING:
    from cashier.promotions import PromotionDescriptor

log = get_logger("pricing")

type IngredientPrices = Mapping[IngredientId, Decimal]


# ═══════════════════════════════════════════════════════════════════════════════
# Discounts
# ═══════════════════════════════════════════════════════════════════════════════


def unit_discount(base: Decimal, promotion: PromotionDescriptor) -> Decimal:
    """Discount per unit. Fixed values are capped at the base price."""
    if promotion.fixed_value is not None:
        return to_money(min(max(promotion.fixed_value, ZERO), base))
    percentage = min(max(promotion.percentage or ZERO, ZERO), Decimal(100))
    return to_money(base * percentage / 100)


def _applicable(
    item: CartItem, promotion: PromotionDescriptor | None, at: datetime
) -> PromotionDescriptor | None:
    if promotion is None:
        return None
    if promotion.product_id != item.product_id or not promotion.is_active(at):
        return None
    return promotion


# ═══════════════════════════════════════════════════════════════════════════════
# Line Pricing
# ═══════════════════════════════════════════════════════════════════════════════


def _unit_price(
    raw: object,
    ingredient_id: IngredientId,
    prices: IngredientPrices,
    problems: list[str],
    label: str,
) -> Decimal:
    if raw is None:
        return prices.get(ingredient_id, ZERO)
    parsed = parse_amount(raw)
    if not parsed.valid:
        problems.append(f"{label} price {raw!r} is invalid")
    return parsed.value


def price_line(
    item: CartItem,
    promotion: PromotionDescriptor | None = None,
    *,
    at: datetime | None = None,
    ingredient_prices: IngredientPrices | None = None,
) -> PricedLine:
    """
    Price one cart line.

    Unusable numbers are treated as 0 and the line comes back excluded
    with the reasons listed; it is never priced as NaN.
    """
    prices = ingredient_prices or {}
    problems: list[str] = []

    base = parse_amount(item.base_price)
    if not base.valid:
        problems.append(f"base price {item.base_price!r} is invalid")
    qty = parse_quantity(item.quantity, minimum=1)
    if not qty.valid:
        problems.append(f"quantity {item.quantity!r} is invalid")

    extras = ZERO
    for extra in item.extras:
        price = _unit_price(extra.unit_price, extra.ingredient_id, prices, problems, "extra")
        count = parse_quantity(extra.quantity, minimum=1)
        if not count.valid:
            problems.append(f"extra quantity {extra.quantity!r} is invalid")
        extras += price * count.value

    mods = ZERO
    for mod in item.modifications:
        delta = parse_delta(mod.delta)
        if not delta.valid:
            problems.append(f"modification delta {mod.delta!r} is invalid")
        if delta.value > 0:
            price = _unit_price(mod.unit_price, mod.ingredient_id, prices, problems, "modification")
            mods += price * delta.value

    original = to_money(base.value * qty.value + extras + mods)

    applied = _applicable(item, promotion, at or datetime.now(UTC))
    if applied is not None:
        off = unit_discount(base.value, applied) * qty.value
        discounted = to_money(max(original - off, ZERO))
    else:
        discounted = original

    if problems:
        log.warning(
            "line_flagged",
            line_ref=item.line_ref,
            product_id=item.product_id.value,
            problems=problems,
        )

    return PricedLine(
        item=item,
        original_total=original,
        discounted_total=discounted,
        quantity=qty.value,
        promotion=applied,
        excluded=bool(problems),
        problems=tuple(problems),
    )


def subtotal(lines: Iterable[PricedLine]) -> Decimal:
    """Sum of discounted totals over lines that are not excluded."""
    return to_money(sum((line.discounted_total for line in lines if not line.excluded), ZERO))


# ═══════════════════════════════════════════════════════════════════════════════
# Order Totals From Payloads
# ═══════════════════════════════════════════════════════════════════════════════

_TOTAL_KEYS = ("total_amount", "total", "amount")
ORDER_TOTAL_FIELDS = frozenset((*_TOTAL_KEYS, "subtotal"))


def resolve_order_total(payload: Mapping[str, Any]) -> Decimal:
    """
    Read an order total from any order-shaped payload.

    Precedence: total_amount, total, amount, then
    subtotal + delivery_fee − discount, else 0. Unparseable candidates
    are skipped.
    """
    for key in _TOTAL_KEYS:
        if key in payload:
            parsed = parse_amount(payload[key])
            if parsed.valid:
                return parsed.value

    if "subtotal" in payload:
        sub = parse_amount(payload["subtotal"])
        if sub.valid:
            fee = parse_amount(payload.get("delivery_fee"))
            discount = parse_amount(payload.get("discount"))
            return to_money(max(sub.value + fee.value - discount.value, ZERO))

    return ZERO


__all__ = (
    "unit_discount",
    "price_line",
    "subtotal",
    "resolve_order_total",
    "ORDER_TOTAL_FIELDS",
)
