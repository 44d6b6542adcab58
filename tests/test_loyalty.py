"""Tests for loyalty redemption and earnings."""

from decimal import Decimal

import pytest

from cashier.loyalty import (
    LoyaltyPolicy,
    max_points_for,
    points_earned,
    points_to_discount,
    validate,
)
from cashier.wire import LoyaltyRates

POLICY = LoyaltyPolicy()


def test_redemption_is_clamped_to_order_value():
    decision = validate(1000, 1000, Decimal("5.00"), POLICY)

    assert decision.accepted == 500
    assert decision.discount == Decimal("5.00")
    assert decision.clamped
    assert "500" in (decision.reason or "")


def test_redemption_is_clamped_to_balance():
    decision = validate(120, 300, Decimal("50.00"), POLICY)

    assert decision.accepted == 120
    assert decision.max_allowed == 120
    assert decision.reason == "only 120 points available"


def test_request_within_limits_is_accepted_without_notice():
    decision = validate(1000, 250, Decimal("50.00"), POLICY)

    assert decision.accepted == 250
    assert decision.discount == Decimal("2.50")
    assert decision.reason is None
    assert not decision.clamped


@pytest.mark.parametrize("requested", [-5, 2.5, "lots", None])
def test_bad_requests_count_as_zero(requested):
    decision = validate(1000, requested, Decimal("50.00"), POLICY)

    assert decision.accepted == 0
    assert decision.discount == Decimal("0.00")


def test_below_minimum_fraction_is_rejected_with_reason():
    policy = LoyaltyPolicy(min_fraction=Decimal("0.10"))

    decision = validate(1000, 100, Decimal("50.00"), policy)

    assert decision.accepted == 0
    assert decision.reason == "at least 500 points must be redeemed on this order"


def test_balance_below_minimum_fraction_redeems_nothing():
    policy = LoyaltyPolicy(min_fraction=Decimal("0.10"))

    decision = validate(500, 2000, Decimal("100.00"), policy)

    assert decision.accepted == 0
    assert decision.discount == Decimal("0.00")
    assert decision.reason == "at least 1000 points must be redeemed on this order"


def test_redemption_is_capped_per_order():
    decision = validate(20_000, 15_000, Decimal("500.00"), POLICY)

    assert decision.accepted == 10_000
    assert decision.max_allowed == 10_000
    assert decision.discount == Decimal("100.00")
    assert decision.reason == "at most 10000 points per order"


def test_per_order_cap_survives_published_rates():
    policy = LoyaltyPolicy(max_points_per_order=300).with_rates(LoyaltyRates(redemption_rate=Decimal("0.02")))

    assert policy.max_points_per_order == 300
    assert validate(1000, 1000, Decimal("50.00"), policy).accepted == 300


def test_max_fraction_limits_policy_maximum():
    policy = LoyaltyPolicy(max_fraction=Decimal("0.5"))
    assert max_points_for(Decimal("10.00"), policy) == 500
    assert max_points_for(Decimal("0"), policy) == 0


def test_discount_never_exceeds_total():
    for total in ("0.01", "0.99", "3.33", "12.34"):
        decision = validate(10_000, 10_000, Decimal(total), POLICY)
        assert decision.discount <= Decimal(total)


def test_points_to_discount_rounds_down():
    policy = LoyaltyPolicy(redemption_rate=Decimal("0.015"))
    assert points_to_discount(3, policy) == Decimal("0.04")


def test_points_earned_excludes_fee_share_of_discount():
    # base = 40 − 10 × 40 / 50 = 32 → 320 points at R$0.10 per point
    assert points_earned(Decimal("40"), Decimal("10"), Decimal("10"), POLICY) == 320
    assert points_earned(Decimal("40"), Decimal("0"), Decimal("0"), POLICY) == 400
    assert points_earned(Decimal("0"), Decimal("5"), Decimal("0"), POLICY) == 0


def test_policy_takes_published_rates_and_ignores_bad_ones():
    policy = POLICY.with_rates(
        LoyaltyRates(redemption_rate=Decimal("0.02"), gain_rate=Decimal("-1"), max_redemption_fraction=Decimal("2"))
    )

    assert policy.redemption_rate == Decimal("0.02")
    assert policy.gain_rate == Decimal("0.10")
    assert policy.max_fraction == Decimal(1)
