"""Tests for payment state, CPF and the submission body."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from conftest import burger

from cashier._types import AddressId, OrderType
from cashier.checkout import (
    Card,
    CardSubtype,
    Cash,
    OrderDraft,
    Pix,
    build_submission,
    change_due,
    parse_payment_method,
    payment_problem,
    validate_cpf,
    wire_method,
)
from cashier.pricing import price_line
from cashier.wire import OrderSubmission


def test_wire_mapping():
    assert wire_method(Pix()) == "pix"
    assert wire_method(Card(CardSubtype.CREDIT)) == "credit"
    assert wire_method(Card(CardSubtype.DEBIT)) == "debit"
    assert wire_method(Cash()) == "money"
    assert wire_method(Card()) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("cartao", Card()), ("Dinheiro", Cash()), ("credit_card", Card(CardSubtype.CREDIT)), ("PIX", Pix())],
)
def test_legacy_method_names(raw, expected):
    assert parse_payment_method(raw) == expected


def test_card_needs_subtype():
    problem = payment_problem(Card(), Decimal("10"), OrderType.DELIVERY)
    assert problem is not None
    assert problem.message == "card subtype required"
    assert payment_problem(Card(CardSubtype.DEBIT), Decimal("10"), OrderType.DELIVERY) is None


def test_cash_rules():
    total = Decimal("42.00")
    assert payment_problem(Cash(), total, OrderType.DELIVERY).code == "cash_amount_required"
    assert payment_problem(Cash(Decimal("40")), total, OrderType.DELIVERY).code == "cash_insufficient"
    assert payment_problem(Cash(Decimal("50")), total, OrderType.DELIVERY) is None
    assert payment_problem(Cash(), total, OrderType.PICKUP) is None
    assert payment_problem(Cash(), Decimal("0"), OrderType.DELIVERY) is None


def test_change_due():
    assert change_due(Cash(Decimal("50")), Decimal("42.30")) == Decimal("7.70")
    assert change_due(Cash(), Decimal("42.30")) is None
    assert change_due(Pix(), Decimal("42.30")) is None


@pytest.mark.parametrize(
    ("cpf", "valid"),
    [("529.982.247-25", True), ("52998224725", True), ("52998224724", False), ("111.111.111-11", False), ("123", False)],
)
def test_cpf_check_digits(cpf, valid):
    assert validate_cpf(cpf) is valid


def _draft(**changes) -> OrderDraft:
    base = OrderDraft(
        lines=(price_line(burger()),),
        order_type=OrderType.DELIVERY,
        configured_fee=Decimal("5.00"),
        available_points=0,
        address_id=AddressId(7),
    )
    return base.evolve(**changes)


def test_submission_for_cash_delivery():
    payload = build_submission(_draft(payment=Cash(Decimal("100")), notes="  no onions ")).to_payload()

    assert payload == {
        "payment_method": "money",
        "order_type": "delivery",
        "address_id": 7,
        "amount_paid": 100.0,
        "points_to_redeem": 0,
        "notes": "no onions",
        "use_cart": True,
    }


def test_pickup_submission_drops_address_and_cash_amount():
    payload = build_submission(
        _draft(order_type=OrderType.PICKUP, payment=Cash(Decimal("100")), cpf="52998224725")
    ).to_payload()

    assert "address_id" not in payload
    assert "amount_paid" not in payload
    assert payload["cpf_on_invoice"] == "52998224725"


def test_submission_model_enforces_address_rule():
    with pytest.raises(ValidationError):
        OrderSubmission(payment_method="pix", order_type="delivery")
    with pytest.raises(ValidationError):
        OrderSubmission(payment_method="pix", order_type="pickup", cpf_on_invoice="12345678900")
