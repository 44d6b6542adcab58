"""
Services — the narrow interfaces checkout depends on.

Implementations raise TransportFailure for network trouble and
BusinessRejection when the backend refuses; nothing else is expected to
escape. `cashier.http.HttpBackend` implements all of them.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from cashier._types import ProductId, UserId
from cashier.errors import BusinessRejection, TransportFailure
from cashier.wire import (
    CapacityReport,
    OrderSubmission,
    PublicSettings,
    SubmissionReceipt,
)

if TYPE_CHECKING:
    from cashier.pricing import Extra, Modification


class PromotionSource(Protocol):
    async def active_promotion(
        self, product_id: ProductId, at: datetime
    ) -> Mapping[str, Any] | None:
        """Raw promotion payload for the product, or None when it has none."""
        ...


class LoyaltySource(Protocol):
    async def current_balance(self, user_id: UserId) -> int: ...


class SettingsSource(Protocol):
    async def public_settings(self) -> PublicSettings: ...


class CapacitySimulator(Protocol):
    async def max_quantity(
        self,
        product_id: ProductId,
        extras: Sequence[Extra],
        modifications: Sequence[Modification],
    ) -> CapacityReport:
        """Largest quantity of this exact configuration current stock can fulfil."""
        ...


class OrderGateway(Protocol):
    async def submit(
        self, request: OrderSubmission, idempotency_key: str
    ) -> SubmissionReceipt: ...


class CartSync(Protocol):
    """Server-side cart; kept in step with line edits made during checkout."""

    async def remove_item(self, line_ref: str) -> None: ...

    async def update_quantity(self, line_ref: str, quantity: int) -> None: ...


__all__ = (
    "TransportFailure",
    "BusinessRejection",
    "PromotionSource",
    "LoyaltySource",
    "SettingsSource",
    "CapacitySimulator",
    "OrderGateway",
    "CartSync",
)
