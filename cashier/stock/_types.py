"""
Stock types.
"""

from __future__ import annotations

from dataclasses import dataclass

from cashier._types import ProductId
from cashier.wire import CapacityReport


@dataclass(frozen=True, slots=True)
class LineAvailability:
    """Whether one cart line can be fulfilled at its requested quantity."""

    line_ref: str
    product_id: ProductId
    product_name: str
    requested: int
    max_quantity: int
    limiting_ingredient: str | None = None

    @property
    def available(self) -> bool:
        return self.max_quantity >= self.requested


__all__ = ("LineAvailability", "CapacityReport")
