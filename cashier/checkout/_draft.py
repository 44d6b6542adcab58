"""
Order draft — the immutable order being checked out.

Totals are derived, never stored, so every change re-clamps redemption
and recomputes the total:

    draft = draft.evolve(order_type=OrderType.PICKUP)
    draft.delivery_fee   # 0.00
    draft.total          # max(0, subtotal + fee − discount)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from uuid import uuid4

from cashier._types import AddressId, OrderType
from cashier.checkout._payment import PaymentMethodState, Pix, change_due
from cashier.delivery import DeliveryFeeResolver, ReadyWindow, estimate_ready_window
from cashier.loyalty import LoyaltyPolicy, RedemptionDecision, points_earned, validate
from cashier.money import ZERO, to_money
from cashier.pricing import PricedLine, subtotal
from cashier.wire import DeliveryTimings


def _attempt_key() -> str:
    return uuid4().hex


@dataclass(frozen=True, slots=True)
class OrderDraft:
    lines: tuple[PricedLine, ...]
    order_type: OrderType
    configured_fee: Decimal
    available_points: int
    policy: LoyaltyPolicy = field(default_factory=LoyaltyPolicy)
    timings: DeliveryTimings = field(default_factory=DeliveryTimings)
    address_id: AddressId | None = None
    requested_points: int = 0
    payment: PaymentMethodState = Pix()
    cpf: str | None = None
    notes: str | None = None
    notice: str | None = None
    attempt_key: str = field(default_factory=_attempt_key)

    def evolve(self, **changes: object) -> OrderDraft:
        """Copy with changes. A changed order gets a fresh attempt key."""
        changes.setdefault("attempt_key", _attempt_key())
        return replace(self, **changes)

    # ─────────────────────────────────────────────────────────────────────────
    # Derived
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def subtotal(self) -> Decimal:
        return subtotal(self.lines)

    @property
    def delivery_fee(self) -> Decimal:
        return DeliveryFeeResolver.resolve(self.order_type, self.configured_fee)

    @property
    def pre_discount_total(self) -> Decimal:
        return self.subtotal + self.delivery_fee

    @property
    def redemption(self) -> RedemptionDecision:
        return validate(
            self.available_points,
            self.requested_points,
            self.pre_discount_total,
            self.policy,
        )

    @property
    def accepted_points(self) -> int:
        return self.redemption.accepted

    @property
    def discount(self) -> Decimal:
        return self.redemption.discount

    @property
    def total(self) -> Decimal:
        return to_money(max(self.pre_discount_total - self.discount, ZERO))

    @property
    def points_earned(self) -> int:
        return points_earned(self.subtotal, self.delivery_fee, self.discount, self.policy)

    @property
    def change_due(self) -> Decimal | None:
        return change_due(self.payment, self.total)

    @property
    def ready_window(self) -> ReadyWindow:
        return estimate_ready_window((line.item for line in self.lines), self.order_type, self.timings)

    @property
    def excluded_lines(self) -> tuple[PricedLine, ...]:
        return tuple(line for line in self.lines if line.excluded)

    @property
    def is_empty(self) -> bool:
        return not self.lines


__all__ = ("OrderDraft",)
