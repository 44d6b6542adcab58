"""
Delivery fee resolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from cashier._types import OrderType
from cashier.log import get_logger
from cashier.money import ZERO, parse_amount

if TYPE_CHECKING:
    from cashier.session import SettingsSnapshot

log = get_logger("delivery")


@dataclass(frozen=True, slots=True)
class DeliveryFeeResolver:
    """
    Pickup is always free. Delivery uses the store's configured fee, or
    `fallback_fee` when the settings service could not be reached.
    """

    fallback_fee: Decimal = Decimal("5.00")

    @staticmethod
    def resolve(order_type: OrderType, configured_fee: object) -> Decimal:
        if order_type is OrderType.PICKUP:
            return ZERO
        parsed = parse_amount(configured_fee)
        if not parsed.valid and configured_fee is not None:
            log.warning("invalid_delivery_fee", configured_fee=repr(configured_fee))
        return parsed.value

    def configured_fee(self, snapshot: SettingsSnapshot) -> Decimal:
        """The delivery fee a settings read yields."""
        if not snapshot.reachable:
            log.info("delivery_fee_fallback", fee=str(self.fallback_fee))
            return self.fallback_fee
        fee = snapshot.settings.delivery_fee
        return ZERO if fee is None else parse_amount(fee).value


__all__ = ("DeliveryFeeResolver",)
