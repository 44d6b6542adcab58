"""
Local (no I/O) checks run by review() before stock validation.
"""

from __future__ import annotations

from collections.abc import Callable

from cashier._types import OrderType
from cashier.checkout._draft import OrderDraft
from cashier.checkout._payment import payment_problem
from cashier.cpf import validate_cpf
from cashier.errors import CheckoutError, CheckoutErrors

type Check = Callable[[OrderDraft], CheckoutError | None]


def check_address(draft: OrderDraft) -> CheckoutError | None:
    if draft.order_type is not OrderType.DELIVERY:
        return None
    if draft.address_id is None or draft.address_id.value <= 0:
        return CheckoutErrors.address_required()
    return None


def check_payment(draft: OrderDraft) -> CheckoutError | None:
    return payment_problem(draft.payment, draft.total, draft.order_type)


def check_cpf(draft: OrderDraft) -> CheckoutError | None:
    if draft.cpf is not None and not validate_cpf(draft.cpf):
        return CheckoutErrors.invalid_cpf()
    return None


def check_cart(draft: OrderDraft) -> CheckoutError | None:
    if draft.is_empty:
        return CheckoutErrors.empty_cart()
    if excluded := draft.excluded_lines:
        return CheckoutErrors.invalid_lines(tuple(line.line_ref for line in excluded))
    return None


CHECKS: tuple[Check, ...] = (check_address, check_payment, check_cpf, check_cart)


def first_problem(draft: OrderDraft) -> CheckoutError | None:
    """The first failing check, in CHECKS order."""
    for check in CHECKS:
        if (problem := check(draft)) is not None:
            return problem
    return None


__all__ = (
    "check_address",
    "check_payment",
    "check_cpf",
    "check_cart",
    "CHECKS",
    "first_problem",
)
