"""
HTTP Example — the REST backend against a scripted transport.

Run: uv run python examples/http_example.py
"""

import httpx
from kungfu import Error, Ok

from cashier import CheckoutConfig
from cashier._types import ProductId
from cashier.http import HttpBackend
from cashier.promotions import PromotionResolver
from cashier.retry import Retry
from examples._infra import banner, promotion, run


# ═══════════════════════════════════════════════════════════════════════════════
# Scripted API
# ═══════════════════════════════════════════════════════════════════════════════

hits: dict[str, int] = {}


def handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    hits[path] = hits.get(path, 0) + 1
    print(f"  [API] {request.method} {path} (call #{hits[path]})")

    match path:
        case "/api/promotions/product/1":
            # first call fails, retry succeeds
            if hits[path] == 1:
                return httpx.Response(503)
            return httpx.Response(200, json={"promotion": promotion(4, value="3.50")})
        case "/api/promotions/product/2":
            return httpx.Response(404, json={"error": "Promoção não encontrada"})
        case _:
            return httpx.Response(404)


# ═══════════════════════════════════════════════════════════════════════════════
# Demo
# ═══════════════════════════════════════════════════════════════════════════════


async def main() -> None:
    banner("HTTP backend")
    config = CheckoutConfig().with_api("http://store.local")

    async with HttpBackend.from_config(config, transport=httpx.MockTransport(handler)) as api:
        resolver = PromotionResolver(api, retry=Retry(times=2, backoff_initial=0.05))

        for pid in (1, 2):
            print(f"\nProduct {pid}:")
            match await resolver.resolve(ProductId(pid)):
                case Ok(None):
                    print("   no promotion")
                case Ok(promo):
                    print(f"   promotion #{promo.promotion_id}: fixed={promo.fixed_value} pct={promo.percentage}")
                case Error(e):
                    print(f"   error: {e.message}")


if __name__ == "__main__":
    run(main)
