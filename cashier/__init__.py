"""
cashier — checkout pricing & redemption for a food-ordering storefront.

    from cashier import pricing as P     # Line totals and promotions
    from cashier import loyalty as LY    # Points redemption and earnings
    from cashier import checkout as CO   # Draft, payment, state machine
"""

from cashier import pricing
from cashier import promotions
from cashier import delivery
from cashier import loyalty
from cashier import stock
from cashier import checkout
from cashier import lift
from cashier._types import (
    Lazy,
    Pure,
    ProductId,
    IngredientId,
    AddressId,
    UserId,
    OrderType,
)
from cashier.config import CheckoutConfig
from cashier.errors import CheckoutError, CheckoutErrorKind, CheckoutErrors

__version__ = "0.1.0"

__all__ = (
    "pricing",
    "promotions",
    "delivery",
    "loyalty",
    "stock",
    "checkout",
    "lift",
    "Lazy",
    "Pure",
    "ProductId",
    "IngredientId",
    "AddressId",
    "UserId",
    "OrderType",
    "CheckoutConfig",
    "CheckoutError",
    "CheckoutErrorKind",
    "CheckoutErrors",
)
