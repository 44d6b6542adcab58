"""
Points earned on an order.
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal

from cashier.loyalty._types import LoyaltyPolicy
from cashier.money import ZERO


def points_earned(
    subtotal: Decimal,
    delivery_fee: Decimal,
    discount: Decimal,
    policy: LoyaltyPolicy,
) -> int:
    """
    Points are earned on products only, never on the delivery fee.

    A points discount is spread across subtotal and fee in proportion, so
    only the subtotal's share of it reduces the earning base.
    """
    if subtotal <= 0 or policy.gain_rate <= 0:
        return 0
    gross = subtotal + max(delivery_fee, ZERO)
    base = subtotal - max(discount, ZERO) * subtotal / gross
    if base <= 0:
        return 0
    return int((base / policy.gain_rate).to_integral_value(rounding=ROUND_FLOOR))


__all__ = ("points_earned",)
