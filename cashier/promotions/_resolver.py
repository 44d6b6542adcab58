"""
Promotion resolver — which promotion applies to a product right now.

Lookups never fail: transport errors and malformed payloads degrade to
"no promotion" and are logged.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

import combinators as C
from kungfu import Error, LazyCoroResult, Ok, Result

from cashier import lift as L
from cashier._types import Pure, ProductId
from cashier.errors import CheckoutError
from cashier.log import get_logger
from cashier.promotions._types import PromotionDescriptor
from cashier.retry import Retry, retrying
from cashier.services import PromotionSource

log = get_logger("promotions")


class PromotionResolver:
    def __init__(self, source: PromotionSource, retry: Retry = Retry(times=2)) -> None:
        self._source = source
        self._retry = retry

    def resolve(
        self, product_id: ProductId, at: datetime | None = None
    ) -> Pure[PromotionDescriptor | None]:
        """
        Promotion active for `product_id` at `at` (default: now).

        Pass an explicit `at` to re-display historical orders.
        """
        moment = at or datetime.now(UTC)
        source = self._source

        async def fetch() -> PromotionDescriptor | None:
            payload = await source.active_promotion(product_id, moment)
            if payload is None:
                return None
            return PromotionDescriptor.from_payload(product_id, payload)

        lookup = retrying(L.service_call(fetch), self._retry, retry_on=lambda e: e.retryable)

        async def execute() -> Result[PromotionDescriptor | None, CheckoutError]:
            match await lookup:
                case Ok(descriptor):
                    if descriptor is not None and not descriptor.is_active(moment):
                        return Ok(None)
                    return Ok(descriptor)
                case Error(err):
                    log.warning(
                        "promotion_lookup_failed",
                        product_id=product_id.value,
                        code=err.code,
                        error=err.message,
                    )
                    return Ok(None)

        return LazyCoroResult(execute)

    def resolve_many(
        self, product_ids: Iterable[ProductId], at: datetime | None = None
    ) -> Pure[dict[ProductId, PromotionDescriptor | None]]:
        """Resolve every distinct product concurrently."""
        moment = at or datetime.now(UTC)
        unique = list(dict.fromkeys(product_ids))
        resolve = self.resolve

        async def execute() -> Result[dict[ProductId, PromotionDescriptor | None], CheckoutError]:
            if not unique:
                return Ok({})
            match await C.traverse_par(unique, lambda pid: resolve(pid, moment))():
                case Ok(found):
                    return Ok(dict(zip(unique, found)))
                case Error(_):
                    # resolve() never fails
                    return Ok({pid: None for pid in unique})

        return LazyCoroResult(execute)


__all__ = ("PromotionResolver",)
