"""
Money — currency and quantity parsing.

Every number that reaches pricing passes through here first. Malformed,
negative or non-finite input never becomes NaN/Infinity downstream: it is
replaced by zero and flagged, so the caller decides what to exclude.

    parsed = parse_amount("12,50")
    parsed.value   # Decimal("12.50")
    parsed.valid   # True
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_FLOOR, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True, slots=True)
class Parsed[T]:
    """A parsed value plus whether the raw input was acceptable."""

    value: T
    valid: bool


# ═══════════════════════════════════════════════════════════════════════════════
# Rounding
# ═══════════════════════════════════════════════════════════════════════════════


def to_money(value: Decimal | int) -> Decimal:
    """Round half-up to the currency minor unit."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def floor_money(value: Decimal | int) -> Decimal:
    """Round down to the currency minor unit."""
    return Decimal(value).quantize(CENT, rounding=ROUND_FLOOR)


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing
# ═══════════════════════════════════════════════════════════════════════════════


def _to_decimal(raw: object) -> Decimal | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        return raw
    if isinstance(raw, int):
        return Decimal(raw)
    if isinstance(raw, float):
        return Decimal(repr(raw))
    if isinstance(raw, str):
        text = raw.strip()
        # "12,50" is how amounts are typed in pt-BR
        if "," in text and "." not in text:
            text = text.replace(",", ".")
        try:
            return Decimal(text)
        except InvalidOperation:
            return None
    return None


def parse_amount(raw: object) -> Parsed[Decimal]:
    """Parse a currency amount. Invalid or negative input → Parsed(0, False)."""
    candidate = _to_decimal(raw)
    if candidate is None or not candidate.is_finite() or candidate < 0:
        return Parsed(ZERO, False)
    return Parsed(to_money(candidate), True)


def parse_quantity(raw: object, *, minimum: int = 0) -> Parsed[int]:
    """Parse an integral count. Fractions, non-finite values and values below minimum are invalid."""
    candidate = _to_decimal(raw)
    if candidate is None or not candidate.is_finite():
        return Parsed(0, False)
    if candidate != candidate.to_integral_value() or candidate < minimum:
        return Parsed(0, False)
    return Parsed(int(candidate), True)


def parse_delta(raw: object) -> Parsed[int]:
    """Parse a signed recipe delta."""
    candidate = _to_decimal(raw)
    if candidate is None or not candidate.is_finite():
        return Parsed(0, False)
    if candidate != candidate.to_integral_value():
        return Parsed(0, False)
    return Parsed(int(candidate), True)


__all__ = (
    "CENT",
    "ZERO",
    "Parsed",
    "to_money",
    "floor_money",
    "parse_amount",
    "parse_quantity",
    "parse_delta",
)
