"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any

from cashier._types import ProductId, UserId
from cashier.errors import TransportFailure
from cashier.pricing import CartItem, Extra, Modification
from cashier.wire import (
    CapacityReport,
    OrderSubmission,
    PublicSettings,
    SubmissionReceipt,
)


# Menu
def menu_item(
    line_ref: str,
    product_id: int,
    name: str,
    price: str,
    quantity: int = 1,
    *,
    extras: tuple[Extra, ...] = (),
    prep: int = 0,
) -> CartItem:
    return CartItem(
        line_ref=line_ref,
        product_id=ProductId(product_id),
        name=name,
        base_price=Decimal(price),
        quantity=quantity,
        extras=extras,
        preparation_minutes=prep,
    )


def promotion(promotion_id: int, *, percentage: int | None = None, value: str | None = None) -> dict[str, Any]:
    now = datetime.now(UTC)
    return {
        "id": promotion_id,
        "discount_percentage": percentage,
        "discount_value": value,
        "created_at": (now - timedelta(days=1)).isoformat(),
        "expires_at": (now + timedelta(days=1)).isoformat(),
    }


# Fake storefront
@dataclass(slots=True)
class FakeStore:
    """In-memory storefront; every service protocol in one object."""

    promotions: dict[int, dict[str, Any]] = field(default_factory=dict)
    balances: dict[int, int] = field(default_factory=dict)
    settings: PublicSettings = field(
        default_factory=lambda: PublicSettings(delivery_fee=Decimal("6.00"))
    )
    stock: dict[int, CapacityReport] = field(default_factory=dict)
    flaky_submits: int = 0
    orders: list[OrderSubmission] = field(default_factory=list)
    _submits: int = 0

    async def active_promotion(self, product_id: ProductId, at: datetime) -> Mapping[str, Any] | None:
        await asyncio.sleep(0.01)
        return self.promotions.get(product_id.value)

    async def current_balance(self, user_id: UserId) -> int:
        await asyncio.sleep(0.01)
        return self.balances.get(user_id.value, 0)

    async def public_settings(self) -> PublicSettings:
        await asyncio.sleep(0.01)
        return self.settings

    async def max_quantity(
        self,
        product_id: ProductId,
        extras: Sequence[Extra],
        modifications: Sequence[Modification],
    ) -> CapacityReport:
        await asyncio.sleep(0.01)
        return self.stock.get(product_id.value, CapacityReport(max_quantity=50))

    async def submit(self, request: OrderSubmission, idempotency_key: str) -> SubmissionReceipt:
        self._submits += 1
        print(f"  [API] POST /api/orders/ key={idempotency_key[:8]} (call #{self._submits})")
        await asyncio.sleep(0.02)
        if self._submits <= self.flaky_submits:
            raise TransportFailure("gateway timeout")
        self.orders.append(request)
        return SubmissionReceipt(order_id=500 + len(self.orders), confirmation_code="K7Q2")

    async def remove_item(self, line_ref: str) -> None:
        print(f"  [API] DELETE /api/cart/items/{line_ref}")

    async def update_quantity(self, line_ref: str, quantity: int) -> None:
        print(f"  [API] PUT /api/cart/items/{line_ref} quantity={quantity}")


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
