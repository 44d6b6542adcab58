"""
Payment method state.

    state = Card()                         # not submittable yet
    state = Card(CardSubtype.CREDIT)       # wire: "credit"
    state = Cash(tendered=Decimal("50"))   # wire: "money"
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from cashier._types import OrderType
from cashier.errors import CheckoutError, CheckoutErrors
from cashier.money import ZERO, to_money


class CardSubtype(Enum):
    CREDIT = "credit"
    DEBIT = "debit"


@dataclass(frozen=True, slots=True)
class Pix:
    pass


@dataclass(frozen=True, slots=True)
class Card:
    subtype: CardSubtype | None = None


@dataclass(frozen=True, slots=True)
class Cash:
    tendered: Decimal | None = None


type PaymentMethodState = Pix | Card | Cash


def wire_method(state: PaymentMethodState) -> str | None:
    """The only place payment state becomes a wire value. None: not submittable."""
    match state:
        case Pix():
            return "pix"
        case Card(subtype=CardSubtype.CREDIT):
            return "credit"
        case Card(subtype=CardSubtype.DEBIT):
            return "debit"
        case Card(subtype=None):
            return None
        case Cash():
            return "money"


_ALIASES: dict[str, PaymentMethodState] = {
    "pix": Pix(),
    "card": Card(),
    "cartao": Card(),
    "credit": Card(CardSubtype.CREDIT),
    "credit_card": Card(CardSubtype.CREDIT),
    "credito": Card(CardSubtype.CREDIT),
    "debit": Card(CardSubtype.DEBIT),
    "debit_card": Card(CardSubtype.DEBIT),
    "debito": Card(CardSubtype.DEBIT),
    "cash": Cash(),
    "money": Cash(),
    "dinheiro": Cash(),
}


def parse_payment_method(raw: str) -> PaymentMethodState | None:
    """Accept current and legacy method names ("cartao", "dinheiro", ...)."""
    key = raw.strip().lower().replace("-", "_").replace("ã", "a").replace("é", "e")
    return _ALIASES.get(key)


def change_due(state: PaymentMethodState, total: Decimal) -> Decimal | None:
    """Change to hand back for cash payments; None when not applicable."""
    match state:
        case Cash(tendered=Decimal() as tendered) if tendered >= total:
            return to_money(tendered - total)
        case _:
            return None


def payment_problem(
    state: PaymentMethodState, total: Decimal, order_type: OrderType
) -> CheckoutError | None:
    """First reason the payment is not submittable, if any."""
    match state:
        case Card(subtype=None):
            return CheckoutErrors.card_subtype_required()
        case Cash(tendered=tendered):
            # nothing to collect, or paid at the counter
            if total <= ZERO or order_type is OrderType.PICKUP:
                return None
            if tendered is None:
                return CheckoutErrors.cash_amount_required()
            if tendered < total:
                return CheckoutErrors.cash_insufficient(tendered, total)
            return None
        case _:
            return None


__all__ = (
    "CardSubtype",
    "Pix",
    "Card",
    "Cash",
    "PaymentMethodState",
    "wire_method",
    "parse_payment_method",
    "change_due",
    "payment_problem",
)
