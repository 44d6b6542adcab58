"""
Stock — pre-submission availability check.

    from cashier import stock as S

    match await S.StockValidator(backend).validate_all(lines):
        case Ok(report) if S.shortfalls(report): ...
"""

from cashier.stock._types import LineAvailability, CapacityReport
from cashier.stock._validator import StockValidator, shortfalls

__all__ = ("LineAvailability", "CapacityReport", "StockValidator", "shortfalls")
