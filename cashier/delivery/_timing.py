"""
Ready-time window shown next to the total.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from cashier._types import OrderType
from cashier.pricing import CartItem
from cashier.wire import DeliveryTimings

WINDOW_MINUTES = 15


@dataclass(frozen=True, slots=True)
class ReadyWindow:
    min_minutes: int
    max_minutes: int


def estimate_ready_window(
    items: Iterable[CartItem],
    order_type: OrderType,
    timings: DeliveryTimings | None = None,
) -> ReadyWindow:
    """
    initiation + preparation + dispatch (+ delivery for delivery orders).

    Preparation is the slowest product in the cart; products without an
    estimate fall back to the store default.
    """
    t = timings or DeliveryTimings()
    slowest = max((max(item.preparation_minutes, 0) for item in items), default=0)
    preparation = slowest if slowest > 0 else t.preparation_minutes
    total = t.initiation_minutes + preparation + t.dispatch_minutes
    if order_type is OrderType.DELIVERY:
        total += t.delivery_minutes
    return ReadyWindow(min_minutes=total, max_minutes=total + WINDOW_MINUTES)


__all__ = ("ReadyWindow", "estimate_ready_window")
