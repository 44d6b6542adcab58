"""
Checkout — the draft, its payment state and the orchestrating state machine.

    from cashier import checkout as CO

    checkout = CO.CheckoutOrchestrator(reads, promotions, stock, backend, backend)
    await checkout.prepare(items, OrderType.PICKUP)
    checkout.select_payment(CO.Pix())
    await checkout.review()
    await checkout.submit()
"""

from cashier.cpf import validate_cpf
from cashier.checkout._payment import (
    CardSubtype,
    Pix,
    Card,
    Cash,
    PaymentMethodState,
    wire_method,
    parse_payment_method,
    change_due,
    payment_problem,
)
from cashier.checkout._draft import OrderDraft
from cashier.checkout._state import CheckoutState, TRANSITIONS, can_transition
from cashier.checkout._validation import first_problem
from cashier.checkout._submission import build_submission
from cashier.checkout._guard import AttemptState, SubmissionGuard
from cashier.checkout._orchestrator import CheckoutOrchestrator

__all__ = (
    # Payment
    "CardSubtype",
    "Pix",
    "Card",
    "Cash",
    "PaymentMethodState",
    "wire_method",
    "parse_payment_method",
    "change_due",
    "payment_problem",
    "validate_cpf",
    # Draft
    "OrderDraft",
    "first_problem",
    "build_submission",
    # Lifecycle
    "CheckoutState",
    "TRANSITIONS",
    "can_transition",
    "AttemptState",
    "SubmissionGuard",
    "CheckoutOrchestrator",
)
