"""
HTTP backend — the storefront REST API behind every service interface.

    async with HttpBackend.from_config(config, token=jwt) as api:
        reads = SessionReads(api, api, UserId(3))
        ...

Network errors, timeouts and 5xx raise TransportFailure; other non-2xx
responses raise BusinessRejection carrying the backend's category.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, Self

import httpx
from pydantic import BaseModel, ValidationError

from cashier._types import ProductId, UserId
from cashier.config import CheckoutConfig
from cashier.errors import BusinessRejection, TransportFailure
from cashier.log import get_logger
from cashier.money import parse_delta, parse_quantity
from cashier.pricing import ORDER_TOTAL_FIELDS, CartItem, Extra, Modification, resolve_order_total
from cashier.wire import (
    CapacityReport,
    LoyaltyBalance,
    OrderSubmission,
    PublicSettings,
    SubmissionReceipt,
)

log = get_logger("http")


def _category(status: int, payload: Mapping[str, Any]) -> str:
    if category := payload.get("category") or payload.get("error_code"):
        return str(category)
    if status == 422:
        return "insufficient_stock"
    if status == 404:
        return "not_found"
    return "business_rule"


def _message(response: httpx.Response, payload: Mapping[str, Any]) -> str:
    for key in ("error", "message", "msg", "detail"):
        if isinstance(value := payload.get(key), str) and value:
            return value
    return f"HTTP {response.status_code}"


class HttpBackend:
    """httpx implementation of every service protocol."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_config(
        cls,
        config: CheckoutConfig,
        *,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> HttpBackend:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        client = httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=config.request_timeout,
            headers=headers,
            transport=transport,
        )
        return cls(client)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    # ═══════════════════════════════════════════════════════════════════════
    # Transport
    # ═══════════════════════════════════════════════════════════════════════

    async def _request(
        self,
        method: str,
        path: str,
        *,
        allow_404: bool = False,
        **kwargs: Any,
    ) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            log.warning("http_transport_error", method=method, path=path, error=str(exc))
            raise TransportFailure(f"{method} {path}: {exc}") from exc

        if response.status_code == 404 and allow_404:
            return None
        if response.status_code >= 500:
            log.warning("http_server_error", method=method, path=path, status=response.status_code)
            raise TransportFailure(f"{method} {path}: HTTP {response.status_code}")
        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = {}
            if not isinstance(payload, dict):
                payload = {}
            raise BusinessRejection(
                category=_category(response.status_code, payload),
                message=_message(response, payload),
                status=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise BusinessRejection("malformed_response", f"{method} {path}: not JSON") from exc

    @staticmethod
    def _parse[M: BaseModel](model: type[M], data: Any, path: str) -> M:
        try:
            return model.model_validate(data or {})
        except ValidationError as exc:
            raise BusinessRejection("malformed_response", f"{path}: {exc.error_count()} invalid fields") from exc

    # ═══════════════════════════════════════════════════════════════════════
    # Reads
    # ═══════════════════════════════════════════════════════════════════════

    async def active_promotion(
        self, product_id: ProductId, at: datetime
    ) -> Mapping[str, Any] | None:
        # expired ones are returned too; the resolver decides against `at`
        data = await self._request(
            "GET",
            f"/api/promotions/product/{product_id.value}",
            params={"include_expired": "true"},
            allow_404=True,
        )
        if isinstance(data, dict) and isinstance(data.get("promotion"), dict):
            return data["promotion"]
        return data if isinstance(data, dict) and data else None

    async def current_balance(self, user_id: UserId) -> int:
        path = f"/api/loyalty/balance/{user_id.value}"
        data = await self._request("GET", path)
        return self._parse(LoyaltyBalance, data, path).current_balance

    async def public_settings(self) -> PublicSettings:
        path = "/api/settings/public"
        data = await self._request("GET", path)
        return self._parse(PublicSettings, data, path)

    async def max_quantity(
        self,
        product_id: ProductId,
        extras: Sequence[Extra],
        modifications: Sequence[Modification],
    ) -> CapacityReport:
        path = f"/api/products/{product_id.value}/capacity"
        body = {
            "extras": [
                {
                    "ingredient_id": e.ingredient_id.value,
                    "quantity": parse_quantity(e.quantity, minimum=1).value or 1,
                }
                for e in extras
            ],
            "base_modifications": [
                {"ingredient_id": m.ingredient_id.value, "delta": delta.value}
                for m in modifications
                if (delta := parse_delta(m.delta)).valid
            ],
        }
        data = await self._request("POST", path, json=body)
        return self._parse(CapacityReport, data, path)

    async def cart_items(self) -> list[CartItem]:
        """The signed-in user's cart, ready for CheckoutOrchestrator.prepare()."""
        data = await self._request("GET", "/api/cart/me")
        if not isinstance(data, dict):
            return []
        cart = data.get("cart") if isinstance(data.get("cart"), dict) else data
        return [CartItem.from_payload(item) for item in cart.get("items") or () if isinstance(item, dict)]

    # ═══════════════════════════════════════════════════════════════════════
    # Writes
    # ═══════════════════════════════════════════════════════════════════════

    async def submit(self, request: OrderSubmission, idempotency_key: str) -> SubmissionReceipt:
        path = "/api/orders/"
        data = await self._request(
            "POST",
            path,
            json=request.to_payload(),
            headers={"Idempotency-Key": idempotency_key},
        )
        if isinstance(data, dict) and isinstance(data.get("order"), dict):
            data = {**data["order"], **{k: v for k, v in data.items() if k != "order"}}
        if isinstance(data, dict) and ORDER_TOTAL_FIELDS & data.keys():
            data = {**data, "total": resolve_order_total(data)}
        return self._parse(SubmissionReceipt, data, path)

    async def remove_item(self, line_ref: str) -> None:
        await self._request("DELETE", f"/api/cart/items/{line_ref}")

    async def update_quantity(self, line_ref: str, quantity: int) -> None:
        await self._request("PUT", f"/api/cart/items/{line_ref}", json={"quantity": quantity})


__all__ = ("HttpBackend",)
