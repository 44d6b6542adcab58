"""
Stock validator — can current stock fulfil every cart line?

Runs immediately before submission, never cached. Each line is simulated
for its exact extras and modifications; simulations run concurrently and
retry only on transport failure.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import combinators as C
from kungfu import Error, LazyCoroResult, Ok, Result

from cashier import lift as L
from cashier.errors import CheckoutError
from cashier.log import get_logger
from cashier.pricing import PricedLine
from cashier.retry import Retry, retrying
from cashier.services import CapacitySimulator
from cashier.stock._types import LineAvailability

log = get_logger("stock")


class StockValidator:
    def __init__(self, simulator: CapacitySimulator, retry: Retry = Retry()) -> None:
        self._simulator = simulator
        self._retry = retry

    def check_line(self, line: PricedLine) -> LazyCoroResult[LineAvailability, CheckoutError]:
        simulator = self._simulator
        item = line.item

        async def simulate() -> LineAvailability:
            report = await simulator.max_quantity(
                item.product_id, item.extras, item.modifications
            )
            return LineAvailability(
                line_ref=item.line_ref,
                product_id=item.product_id,
                product_name=item.name,
                requested=line.quantity,
                max_quantity=report.max_quantity,
                limiting_ingredient=report.limiting_ingredient,
            )

        return retrying(L.service_call(simulate), self._retry, retry_on=lambda e: e.retryable)

    def validate_all(
        self, lines: Iterable[PricedLine]
    ) -> LazyCoroResult[list[LineAvailability], CheckoutError]:
        """Availability for every non-excluded line, in cart order."""
        candidates = [line for line in lines if not line.excluded]
        check_line = self.check_line

        async def execute() -> Result[list[LineAvailability], CheckoutError]:
            if not candidates:
                return Ok([])
            result = await C.traverse_par(candidates, check_line)()
            match result:
                case Ok(report):
                    short = shortfalls(report)
                    log.info(
                        "stock_validated",
                        lines=len(report),
                        short=[a.line_ref for a in short],
                    )
                    return Ok(list(report))
                case Error(err):
                    log.warning("stock_validation_failed", code=err.code, error=err.message)
                    return Error(err)

        return LazyCoroResult(execute)


def shortfalls(report: Sequence[LineAvailability]) -> list[LineAvailability]:
    return [a for a in report if not a.available]


__all__ = ("StockValidator", "shortfalls")
