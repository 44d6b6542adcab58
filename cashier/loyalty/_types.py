"""
Loyalty types.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cashier.wire import LoyaltyRates


@dataclass(frozen=True, slots=True)
class LoyaltyPolicy:
    """
    Account rules.

    redemption_rate: currency one point is worth (0.01 → 100 points = R$1).
    gain_rate: currency spent per point earned (0.10 → 10 points per R$1).
    min/max_fraction: share of the order value points may pay for.
    max_points_per_order: hard cap on points spent on one order.
    """

    redemption_rate: Decimal = Decimal("0.01")
    gain_rate: Decimal = Decimal("0.10")
    min_fraction: Decimal = Decimal(0)
    max_fraction: Decimal = Decimal(1)
    max_points_per_order: int = 10_000

    def with_rates(self, rates: LoyaltyRates) -> LoyaltyPolicy:
        """Overlay the store's published rates; invalid ones keep the current value."""

        def pick(value: Decimal | None, current: Decimal, *, upper: Decimal | None = None) -> Decimal:
            if value is None or not value.is_finite() or value < 0:
                return current
            if upper is not None and value > upper:
                return current
            return value

        redemption = pick(rates.redemption_rate, self.redemption_rate)
        gain = pick(rates.gain_rate, self.gain_rate)
        return LoyaltyPolicy(
            redemption_rate=redemption if redemption > 0 else self.redemption_rate,
            gain_rate=gain if gain > 0 else self.gain_rate,
            min_fraction=pick(rates.min_redemption_fraction, self.min_fraction, upper=Decimal(1)),
            max_fraction=pick(rates.max_redemption_fraction, self.max_fraction, upper=Decimal(1)),
            max_points_per_order=self.max_points_per_order,
        )


@dataclass(frozen=True, slots=True)
class RedemptionDecision:
    """Outcome of a redemption request. Never a failure, at worst a clamp."""

    requested: int
    accepted: int
    max_allowed: int
    discount: Decimal
    reason: str | None = None

    @property
    def clamped(self) -> bool:
        return self.accepted < self.requested


__all__ = ("LoyaltyPolicy", "RedemptionDecision")
