"""Shared fakes for checkout tests."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any

import pytest
from kungfu import Error, Ok, Result

from cashier._types import ProductId, UserId
from cashier.checkout import CheckoutOrchestrator
from cashier.config import CheckoutConfig
from cashier.errors import BusinessRejection, CheckoutError, TransportFailure
from cashier.pricing import CartItem, Extra, Modification
from cashier.promotions import PromotionResolver
from cashier.retry import Retry
from cashier.session import SessionReads
from cashier.stock import StockValidator
from cashier.wire import (
    CapacityReport,
    OrderSubmission,
    PublicSettings,
    SubmissionReceipt,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def run[T](awaitable: Awaitable[T]) -> T:
    async def main() -> T:
        return await awaitable
    return asyncio.run(main())


def unwrap[T](result: Result[T, object]) -> T:
    match result:
        case Ok(value):
            return value
        case Error(err):
            pytest.fail(f"unexpected error: {err}")


def error_of(result: Result[object, CheckoutError]) -> CheckoutError:
    match result:
        case Error(err):
            return err
        case Ok(value):
            pytest.fail(f"expected an error, got {value!r}")


def burger(
    line_ref: str = "1",
    *,
    product_id: int = 10,
    price: object = Decimal("30.00"),
    quantity: object = 2,
    extras: tuple[Extra, ...] = (),
    modifications: tuple[Modification, ...] = (),
    prep: int = 0,
) -> CartItem:
    return CartItem(
        line_ref=line_ref,
        product_id=ProductId(product_id),
        name=f"Burger {product_id}",
        base_price=price,
        quantity=quantity,
        extras=extras,
        modifications=modifications,
        preparation_minutes=prep,
    )


def promo_payload(
    *, percentage: object = None, value: object = None, days: int = 1, promotion_id: int = 99
) -> dict[str, Any]:
    return {
        "id": promotion_id,
        "discount_percentage": percentage,
        "discount_value": value,
        "created_at": (NOW - timedelta(days=days)).isoformat(),
        "expires_at": (NOW + timedelta(days=days)).isoformat(),
    }


# ═══════════════════════════════════════════════════════════════════════════════
# Fake Backend
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class FakeBackend:
    """In-memory storefront implementing every service protocol."""

    promotions: dict[int, dict[str, Any]] = field(default_factory=dict)
    balance: int = 0
    settings: PublicSettings = field(
        default_factory=lambda: PublicSettings(delivery_fee=Decimal("7.00"))
    )
    capacity: dict[int, CapacityReport] = field(default_factory=dict)

    # failure scripting: number of leading calls that fail
    settings_failures: int = 0
    promotion_failures: int = 0
    capacity_failures: int = 0
    submit_failures: int = 0
    submit_rejection: BusinessRejection | None = None
    submit_delay: float = 0.0
    receipt_total: Decimal | None = None

    calls: dict[str, int] = field(default_factory=dict)
    submitted: list[tuple[OrderSubmission, str]] = field(default_factory=list)
    cart_removed: list[str] = field(default_factory=list)
    cart_updated: list[tuple[str, int]] = field(default_factory=list)

    def _count(self, name: str) -> int:
        self.calls[name] = self.calls.get(name, 0) + 1
        return self.calls[name]

    async def active_promotion(
        self, product_id: ProductId, at: datetime
    ) -> Mapping[str, Any] | None:
        if self._count("promotion") <= self.promotion_failures:
            raise TransportFailure("promotions down")
        return self.promotions.get(product_id.value)

    async def current_balance(self, user_id: UserId) -> int:
        self._count("balance")
        return self.balance

    async def public_settings(self) -> PublicSettings:
        if self._count("settings") <= self.settings_failures:
            raise TransportFailure("settings down")
        return self.settings

    async def max_quantity(
        self,
        product_id: ProductId,
        extras: Sequence[Extra],
        modifications: Sequence[Modification],
    ) -> CapacityReport:
        if self._count("capacity") <= self.capacity_failures:
            raise TransportFailure("simulator down")
        return self.capacity.get(product_id.value, CapacityReport(max_quantity=99))

    async def submit(self, request: OrderSubmission, idempotency_key: str) -> SubmissionReceipt:
        attempt = self._count("submit")
        if self.submit_delay:
            await asyncio.sleep(self.submit_delay)
        if attempt <= self.submit_failures:
            raise TransportFailure("gateway timeout")
        if self.submit_rejection is not None:
            raise self.submit_rejection
        self.submitted.append((request, idempotency_key))
        return SubmissionReceipt(
            order_id=1000 + len(self.submitted),
            confirmation_code="ABC123",
            total=self.receipt_total,
        )

    async def remove_item(self, line_ref: str) -> None:
        self.cart_removed.append(line_ref)

    async def update_quantity(self, line_ref: str, quantity: int) -> None:
        self.cart_updated.append((line_ref, quantity))


FAST = Retry(times=3, backoff_initial=0.0, backoff_max=0.0)


def make_checkout(
    backend: FakeBackend,
    *,
    user_id: UserId | None = UserId(1),
    clock: Callable[[], datetime] = lambda: NOW,
) -> CheckoutOrchestrator:
    config = (
        CheckoutConfig()
        .with_read_retry(FAST)
        .with_submit_retry(FAST)
    )
    return CheckoutOrchestrator(
        reads=SessionReads(backend, backend, user_id, retry=FAST),
        promotions=PromotionResolver(backend, retry=FAST),
        stock=StockValidator(backend, retry=FAST),
        gateway=backend,
        cart=backend,
        config=config,
        clock=clock,
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()
