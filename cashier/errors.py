"""
Errors — checkout error taxonomy.

Service adapters raise plain exceptions (TransportFailure, BusinessRejection).
Engine components catch them at the boundary and carry a CheckoutError
inside kungfu.Error from there on.

    match await orchestrator.review():
        case Ok(draft): ...
        case Error(err) if err.kind is CheckoutErrorKind.STOCK:
            show(err.lines)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cashier.stock import LineAvailability


# ═══════════════════════════════════════════════════════════════════════════════
# Adapter Exceptions
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class TransportFailure(Exception):
    """Network failure, timeout or 5xx. Safe to retry."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class BusinessRejection(Exception):
    """The backend understood the request and refused it."""

    category: str
    message: str
    status: int | None = None

    def __str__(self) -> str:
        return f"{self.category}: {self.message}"


# ═══════════════════════════════════════════════════════════════════════════════
# CheckoutError
# ═══════════════════════════════════════════════════════════════════════════════


class CheckoutErrorKind(Enum):
    VALIDATION = "validation"
    REDEMPTION = "redemption"
    STOCK = "stock"
    BUSINESS_RULE = "business_rule"
    TRANSPORT = "transport"


@dataclass(frozen=True, slots=True)
class CheckoutError:
    """
    One user-facing problem.

    field: which input to highlight (e.g. "payment.card_subtype").
    lines: per-line availability for STOCK errors.
    """

    kind: CheckoutErrorKind
    code: str
    message: str
    field: str | None = None
    lines: tuple[LineAvailability, ...] = ()

    @property
    def retryable(self) -> bool:
        return self.kind is CheckoutErrorKind.TRANSPORT and self.code == "transport"


class CheckoutErrors:
    @staticmethod
    def empty_cart() -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION, "empty_cart", "cart is empty", field="cart"
        )

    @staticmethod
    def invalid_lines(refs: tuple[str, ...]) -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION,
            "invalid_lines",
            f"lines with invalid prices must be removed: {', '.join(refs)}",
            field="cart",
        )

    @staticmethod
    def address_required() -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION,
            "address_required",
            "delivery address required",
            field="address_id",
        )

    @staticmethod
    def card_subtype_required() -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION,
            "card_subtype_required",
            "card subtype required",
            field="payment.card_subtype",
        )

    @staticmethod
    def payment_not_card() -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION,
            "payment_not_card",
            "select card payment before choosing credit or debit",
            field="payment.card_subtype",
        )

    @staticmethod
    def payment_not_cash() -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION,
            "payment_not_cash",
            "select cash payment before entering the amount tendered",
            field="payment.tendered",
        )

    @staticmethod
    def cash_amount_required() -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION,
            "cash_amount_required",
            "amount tendered required for cash payment",
            field="payment.tendered",
        )

    @staticmethod
    def cash_insufficient(tendered: Decimal, total: Decimal) -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION,
            "cash_insufficient",
            f"amount tendered {tendered} is less than the total {total}",
            field="payment.tendered",
        )

    @staticmethod
    def invalid_amount(field: str) -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION,
            "invalid_amount",
            f"{field} must be a non-negative number",
            field=field,
        )

    @staticmethod
    def invalid_quantity() -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION,
            "invalid_quantity",
            "quantity must be a positive whole number",
            field="quantity",
        )

    @staticmethod
    def unknown_line(line_ref: str) -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION,
            "unknown_line",
            f"no cart line {line_ref}",
            field="cart",
        )

    @staticmethod
    def invalid_choice(field: str, raw: object) -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION,
            "invalid_choice",
            f"{raw!r} is not a valid {field}",
            field=field,
        )

    @staticmethod
    def invalid_request(message: str) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.VALIDATION, "invalid_request", message)

    @staticmethod
    def invalid_cpf() -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION, "invalid_cpf", "CPF is invalid", field="cpf"
        )

    @staticmethod
    def redemption_clamped(reason: str) -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.REDEMPTION, "redemption_clamped", reason, field="points"
        )

    @staticmethod
    def stock_shortfall(lines: tuple[LineAvailability, ...]) -> CheckoutError:
        short = [line for line in lines if not line.available]
        parts = []
        for line in short:
            part = f"{line.product_name}: {line.max_quantity} of {line.requested} available"
            if line.limiting_ingredient:
                part += f" (out of {line.limiting_ingredient})"
            parts.append(part)
        return CheckoutError(
            CheckoutErrorKind.STOCK,
            "insufficient_stock",
            "; ".join(parts) or "insufficient stock",
            field="cart",
            lines=lines,
        )

    @staticmethod
    def business_rule(code: str, message: str) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.BUSINESS_RULE, code, message)

    @staticmethod
    def transport(message: str) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.TRANSPORT, "transport", message)

    @staticmethod
    def unexpected(message: str) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.TRANSPORT, "unexpected", message)

    @staticmethod
    def invalid_state(operation: str, state: str) -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION,
            "invalid_state",
            f"cannot {operation} while {state}",
        )

    @staticmethod
    def no_draft() -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION, "no_draft", "checkout has not been prepared"
        )

    @staticmethod
    def submission_in_flight() -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION,
            "submission_in_flight",
            "order is already being submitted",
        )

    @staticmethod
    def cancelled() -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.VALIDATION, "cancelled", "checkout was cancelled"
        )


def from_exception(exc: Exception) -> CheckoutError:
    """Map an adapter exception onto the taxonomy."""
    match exc:
        case BusinessRejection(category="insufficient_stock", message=message):
            return CheckoutError(CheckoutErrorKind.STOCK, "insufficient_stock", message)
        case BusinessRejection(category=category, message=message):
            return CheckoutErrors.business_rule(category, message)
        case TransportFailure(message=message):
            return CheckoutErrors.transport(message)
        case _:
            return CheckoutErrors.unexpected(f"{type(exc).__name__}: {exc}")


__all__ = (
    "TransportFailure",
    "BusinessRejection",
    "CheckoutErrorKind",
    "CheckoutError",
    "CheckoutErrors",
    "from_exception",
)
