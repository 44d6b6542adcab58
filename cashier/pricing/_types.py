"""
Pricing types.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from cashier._types import IngredientId, ProductId

if TYPE_CHECKING:
    from cashier.promotions import PromotionDescriptor


# ═══════════════════════════════════════════════════════════════════════════════
# Cart Input
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Extra:
    """An added ingredient. unit_price None means unknown (billed as 0)."""

    ingredient_id: IngredientId
    unit_price: Decimal | int | float | str | None
    quantity: int | float | str = 1
    name: str = ""


@dataclass(frozen=True, slots=True)
class Modification:
    """A change to the base recipe. Only positive deltas are billed."""

    ingredient_id: IngredientId
    delta: int | float | str
    unit_price: Decimal | int | float | str | None = None
    name: str = ""


@dataclass(frozen=True, slots=True)
class CartItem:
    """
    One cart line as the storefront holds it.

    Numeric fields are kept as received; pricing parses them and flags the
    line when any of them is unusable.
    """

    line_ref: str
    product_id: ProductId
    name: str
    base_price: Decimal | int | float | str | None
    quantity: int | float | str
    extras: tuple[Extra, ...] = ()
    modifications: tuple[Modification, ...] = ()
    note: str = ""
    preparation_minutes: int = 0

    def with_quantity(self, quantity: int) -> CartItem:
        return replace(self, quantity=quantity)

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> CartItem:
        """Build from a cart API item (`product`, `extras`, `base_modifications`)."""
        product = data.get("product") or {}
        extras = tuple(
            Extra(
                ingredient_id=IngredientId(int(e.get("ingredient_id", e.get("id", 0)))),
                unit_price=e.get("price", e.get("additional_price")),
                quantity=e.get("quantity", 1),
                name=str(e.get("name", "")),
            )
            for e in data.get("extras") or ()
        )
        mods = tuple(
            Modification(
                ingredient_id=IngredientId(int(m.get("ingredient_id", m.get("id", 0)))),
                delta=m.get("delta", 0),
                unit_price=m.get("price", m.get("additional_price")),
                name=str(m.get("name", "")),
            )
            for m in data.get("base_modifications") or ()
        )
        return cls(
            line_ref=str(data.get("id", "")),
            product_id=ProductId(int(data.get("product_id", product.get("id", 0)))),
            name=str(product.get("name") or data.get("name") or ""),
            base_price=product.get("price", data.get("price")),
            quantity=data.get("quantity", 1),
            extras=extras,
            modifications=mods,
            note=str(data.get("notes") or ""),
            preparation_minutes=int(product.get("preparation_time_minutes") or 0),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Priced Output
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PricedLine:
    """
    A priced cart line.

    excluded lines keep their coerced totals and carry the reasons in
    `problems`; subtotal() skips them.
    """

    item: CartItem
    original_total: Decimal
    discounted_total: Decimal
    quantity: int = 0
    promotion: PromotionDescriptor | None = None
    excluded: bool = False
    problems: tuple[str, ...] = ()

    @property
    def discount(self) -> Decimal:
        return self.original_total - self.discounted_total

    @property
    def line_ref(self) -> str:
        return self.item.line_ref


__all__ = ("Extra", "Modification", "CartItem", "PricedLine")
