"""
Loyalty — redemption limits and earnings.

    from cashier import loyalty as LY

    decision = LY.validate(balance, requested, subtotal + fee, LY.LoyaltyPolicy())
    if decision.clamped:
        notify(decision.reason)
"""

from cashier.loyalty._types import LoyaltyPolicy, RedemptionDecision
from cashier.loyalty._validator import points_to_discount, max_points_for, validate
from cashier.loyalty._earn import points_earned

__all__ = (
    "LoyaltyPolicy",
    "RedemptionDecision",
    "validate",
    "points_to_discount",
    "max_points_for",
    "points_earned",
)
