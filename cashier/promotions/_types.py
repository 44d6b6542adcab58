"""
Promotion types.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from cashier._types import ProductId
from cashier.money import parse_amount


def _aware(value: datetime) -> datetime:
    # naive timestamps from the backend are UTC
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _parse_datetime(raw: object) -> datetime | None:
    if isinstance(raw, datetime):
        return _aware(raw)
    if not isinstance(raw, str) or not raw.strip():
        return None
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return _aware(datetime.fromisoformat(text))
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class PromotionDescriptor:
    """
    A per-product promotion with exactly one of percentage / fixed value.

    Active iff starts_at ≤ at ≤ ends_at.
    """

    product_id: ProductId
    promotion_id: int | str
    percentage: Decimal | None
    fixed_value: Decimal | None
    starts_at: datetime
    ends_at: datetime

    def __post_init__(self) -> None:
        if (self.percentage is None) == (self.fixed_value is None):
            raise ValueError("promotion needs exactly one of percentage or fixed_value")

    def is_active(self, at: datetime) -> bool:
        moment = _aware(at)
        return _aware(self.starts_at) <= moment <= _aware(self.ends_at)

    @classmethod
    def from_payload(
        cls, product_id: ProductId, data: Mapping[str, Any]
    ) -> PromotionDescriptor | None:
        """
        Parse a backend promotion. Returns None when it carries no usable
        discount or no end date.

        A positive discount_value wins over discount_percentage.
        """
        value = parse_amount(data.get("discount_value"))
        pct = parse_amount(data.get("discount_percentage"))
        percentage: Decimal | None = None
        fixed: Decimal | None = None
        if value.valid and value.value > 0:
            fixed = value.value
        elif pct.valid and 0 < pct.value <= 100:
            percentage = pct.value
        else:
            return None

        ends_at = _parse_datetime(data.get("expires_at") or data.get("end_date"))
        if ends_at is None:
            return None
        starts_at = (
            _parse_datetime(data.get("starts_at") or data.get("start_date"))
            or _parse_datetime(data.get("created_at"))
            or datetime.min.replace(tzinfo=UTC)
        )

        return cls(
            product_id=product_id,
            promotion_id=data.get("id", data.get("promotion_id", "")),
            percentage=percentage,
            fixed_value=fixed,
            starts_at=starts_at,
            ends_at=ends_at,
        )


__all__ = ("PromotionDescriptor",)
