"""
CPF — Brazilian individual tax id, printed on the invoice when requested.
"""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")


def normalize_cpf(raw: str) -> str:
    """Strip punctuation: "529.982.247-25" → "52998224725"."""
    return _NON_DIGITS.sub("", raw)


def _check_digit(digits: str, weight: int) -> int:
    total = sum(int(d) * (weight - i) for i, d in enumerate(digits))
    rest = (total * 10) % 11
    return 0 if rest == 10 else rest


def validate_cpf(raw: str) -> bool:
    """Eleven digits, not all equal, both check digits correct."""
    digits = normalize_cpf(raw)
    if len(digits) != 11 or digits == digits[0] * 11:
        return False
    if _check_digit(digits[:9], 10) != int(digits[9]):
        return False
    return _check_digit(digits[:10], 11) == int(digits[10])


__all__ = ("normalize_cpf", "validate_cpf")
