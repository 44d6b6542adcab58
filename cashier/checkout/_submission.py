"""
Draft → order creation request.
"""

from __future__ import annotations

from cashier._types import OrderType
from cashier.checkout._draft import OrderDraft
from cashier.checkout._payment import Cash, wire_method
from cashier.wire import OrderSubmission, PromotionLine


def _promotions(draft: OrderDraft) -> list[PromotionLine] | None:
    promos = [
        PromotionLine(
            product_id=line.item.product_id.value,
            promotion_id=line.promotion.promotion_id,
            discount_percentage=line.promotion.percentage,
            discount_value=line.promotion.fixed_value,
        )
        for line in draft.lines
        if line.promotion is not None and not line.excluded
    ]
    return promos or None


def build_submission(draft: OrderDraft) -> OrderSubmission:
    """
    Build the request body. Assumes the draft passed review.

    Pickup orders never carry an address; amount_paid is only sent for
    cash on a delivery order with something to pay.
    """
    method = wire_method(draft.payment)
    if method is None:
        raise ValueError("payment method is incomplete")

    delivery = draft.order_type is OrderType.DELIVERY
    amount_paid = None
    if isinstance(draft.payment, Cash) and delivery and draft.total > 0:
        amount_paid = draft.payment.tendered

    return OrderSubmission(
        payment_method=method,
        order_type=draft.order_type.value,
        address_id=draft.address_id.value if delivery and draft.address_id else None,
        amount_paid=amount_paid,
        points_to_redeem=draft.accepted_points,
        cpf_on_invoice=draft.cpf,
        notes=draft.notes,
        promotions=_promotions(draft),
    )


__all__ = ("build_submission",)
