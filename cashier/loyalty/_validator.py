"""
Redemption validation — how many points an order may consume.

    decision = validate(available=1000, requested=1000,
                        pre_discount_total=Decimal("5.00"), policy=LoyaltyPolicy())
    decision.accepted   # 500
    decision.discount   # Decimal("5.00")
"""

from __future__ import annotations

from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal

from cashier.loyalty._types import LoyaltyPolicy, RedemptionDecision
from cashier.money import ZERO, floor_money, parse_amount, parse_quantity


def points_to_discount(points: int, policy: LoyaltyPolicy) -> Decimal:
    """Currency value of `points`, rounded down to the cent."""
    return floor_money(Decimal(max(points, 0)) * policy.redemption_rate)


def max_points_for(total: Decimal, policy: LoyaltyPolicy) -> int:
    """Most points that may be spent on an order worth `total`."""
    if total <= 0 or policy.redemption_rate <= 0:
        return 0
    limit = total * policy.max_fraction / policy.redemption_rate
    return int(limit.to_integral_value(rounding=ROUND_FLOOR))


def _min_points_for(total: Decimal, policy: LoyaltyPolicy) -> int:
    if total <= 0 or policy.min_fraction <= 0 or policy.redemption_rate <= 0:
        return 0
    floor = total * policy.min_fraction / policy.redemption_rate
    return int(floor.to_integral_value(rounding=ROUND_CEILING))


def validate(
    available: object,
    requested: object,
    pre_discount_total: object,
    policy: LoyaltyPolicy,
) -> RedemptionDecision:
    """
    Clamp a redemption request to balance and policy.

    accepted = min(requested, available, policy maximum). The policy maximum
    keeps the discount at or below the pre-discount total and never exceeds
    the per-order cap. Requests, or clamped amounts, under the policy minimum
    are dropped to 0. Negative or fractional inputs count as 0.
    """
    balance = parse_quantity(available).value
    wanted = parse_quantity(requested).value
    total = parse_amount(pre_discount_total).value

    fraction_max = max_points_for(total, policy)
    per_order = max(policy.max_points_per_order, 0)
    policy_max = min(fraction_max, per_order)
    allowed = min(balance, policy_max)

    if wanted == 0:
        return RedemptionDecision(0, 0, allowed, ZERO)

    minimum = _min_points_for(total, policy)
    accepted = min(wanted, allowed)
    if accepted < minimum:
        return RedemptionDecision(
            wanted,
            0,
            allowed,
            ZERO,
            reason=f"at least {minimum} points must be redeemed on this order",
        )

    reason: str | None = None
    if accepted < wanted:
        if accepted == balance and balance < policy_max:
            reason = f"only {balance} points available"
        elif per_order < fraction_max:
            reason = f"at most {per_order} points per order"
        else:
            reason = f"at most {policy_max} points can be used on this order"

    return RedemptionDecision(
        requested=wanted,
        accepted=accepted,
        max_allowed=allowed,
        discount=points_to_discount(accepted, policy),
        reason=reason,
    )


__all__ = ("points_to_discount", "max_points_for", "validate")
