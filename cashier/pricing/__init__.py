"""
Pricing — cart lines to money.

    from cashier import pricing as P

    line = P.price_line(item, promotion, at=now)
    total = P.subtotal(lines)
"""

from cashier.pricing._types import (
    Extra,
    Modification,
    CartItem,
    PricedLine,
)
from cashier.pricing._calculator import (
    unit_discount,
    price_line,
    subtotal,
    resolve_order_total,
    ORDER_TOTAL_FIELDS,
)

__all__ = (
    "Extra",
    "Modification",
    "CartItem",
    "PricedLine",
    "unit_discount",
    "price_line",
    "subtotal",
    "resolve_order_total",
    "ORDER_TOTAL_FIELDS",
)
