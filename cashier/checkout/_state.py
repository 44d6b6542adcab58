"""
Checkout lifecycle states.
"""

from __future__ import annotations

from enum import Enum


class CheckoutState(Enum):
    DRAFT = "draft"
    VALIDATING = "validating"
    READY_TO_SUBMIT = "ready_to_submit"
    SUBMITTING = "submitting"
    CONFIRMED = "confirmed"
    FAILED_RECOVERABLE = "failed_recoverable"
    FAILED_FATAL = "failed_fatal"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self in (CheckoutState.CONFIRMED, CheckoutState.CANCELLED)

    @property
    def editable(self) -> bool:
        """States from which a mutation is accepted (and returns to DRAFT)."""
        return self in _EDITABLE


_EDITABLE = frozenset({
    CheckoutState.DRAFT,
    CheckoutState.READY_TO_SUBMIT,
    CheckoutState.FAILED_RECOVERABLE,
    CheckoutState.FAILED_FATAL,
})

TRANSITIONS: dict[CheckoutState, frozenset[CheckoutState]] = {
    CheckoutState.DRAFT: frozenset({
        CheckoutState.VALIDATING,
        CheckoutState.CANCELLED,
    }),
    CheckoutState.VALIDATING: frozenset({
        CheckoutState.READY_TO_SUBMIT,
        CheckoutState.DRAFT,
        CheckoutState.CANCELLED,
    }),
    CheckoutState.READY_TO_SUBMIT: frozenset({
        CheckoutState.VALIDATING,
        CheckoutState.SUBMITTING,
        CheckoutState.DRAFT,
        CheckoutState.CANCELLED,
    }),
    CheckoutState.SUBMITTING: frozenset({
        CheckoutState.CONFIRMED,
        CheckoutState.READY_TO_SUBMIT,
        CheckoutState.FAILED_RECOVERABLE,
        CheckoutState.FAILED_FATAL,
        CheckoutState.CANCELLED,
    }),
    CheckoutState.FAILED_RECOVERABLE: frozenset({
        CheckoutState.DRAFT,
        CheckoutState.VALIDATING,
        CheckoutState.CANCELLED,
    }),
    CheckoutState.FAILED_FATAL: frozenset({
        CheckoutState.DRAFT,
        CheckoutState.VALIDATING,
        CheckoutState.CANCELLED,
    }),
    CheckoutState.CONFIRMED: frozenset(),
    CheckoutState.CANCELLED: frozenset(),
}


def can_transition(source: CheckoutState, target: CheckoutState) -> bool:
    return target in TRANSITIONS[source]


__all__ = ("CheckoutState", "TRANSITIONS", "can_transition")
