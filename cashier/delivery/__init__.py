"""
Delivery — fee by order type and the ready-time estimate.

    from cashier import delivery as D

    fee = D.DeliveryFeeResolver.resolve(OrderType.PICKUP, Decimal("7.00"))  # 0.00
"""

from cashier.delivery._fee import DeliveryFeeResolver
from cashier.delivery._timing import ReadyWindow, estimate_ready_window

__all__ = ("DeliveryFeeResolver", "ReadyWindow", "estimate_ready_window")
