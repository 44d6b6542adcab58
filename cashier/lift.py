"""
Lift — Helpers for lifting values into cashier results.

Re-exports from combinators.lift with checkout-specific additions.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from kungfu import LazyCoroResult, Result

# Re-export from combinators.lift
from combinators.lift import catching_async

from cashier.errors import CheckoutError, from_exception


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout-specific helpers
# ═══════════════════════════════════════════════════════════════════════════════

def from_result[T, E](result: Result[T, E]) -> LazyCoroResult[T, E]:
    """Lift a Result into LazyCoroResult."""
    async def _run() -> Result[T, E]:
        return result
    return LazyCoroResult(_run)


def service_call[T](
    call: Callable[[], Awaitable[T]],
) -> LazyCoroResult[T, CheckoutError]:
    """Run an adapter call, mapping raised exceptions onto CheckoutError."""
    return catching_async(call, on_error=from_exception)


__all__ = (
    # From combinators.lift
    "catching_async",
    # Cashier additions
    "from_result",
    "service_call",
)
