"""
Core types for cashier.

Re-exports from kungfu + identity types shared by every checkout module.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Never

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Lazy Computation Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Lazy[T, E] = LazyCoroResult[T, E]
"""Lazy async computation that may fail."""

type Pure[T] = Lazy[T, Never]
"""Lazy computation that cannot fail (reads that degrade to a fallback)."""

# ═══════════════════════════════════════════════════════════════════════════════
# Identity
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ProductId:
    value: int


@dataclass(frozen=True, slots=True)
class IngredientId:
    value: int


@dataclass(frozen=True, slots=True)
class AddressId:
    value: int


@dataclass(frozen=True, slots=True)
class UserId:
    value: int


# ═══════════════════════════════════════════════════════════════════════════════
# Order Type
# ═══════════════════════════════════════════════════════════════════════════════


class OrderType(Enum):
    """How the order reaches the customer."""

    DELIVERY = "delivery"
    PICKUP = "pickup"


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Type aliases
    "Lazy",
    "Pure",
    # Identity
    "ProductId",
    "IngredientId",
    "AddressId",
    "UserId",
    "OrderType",
)
