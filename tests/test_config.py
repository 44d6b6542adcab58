"""Tests for checkout configuration."""

from decimal import Decimal

from cashier.config import CheckoutConfig
from cashier.loyalty import LoyaltyPolicy
from cashier.retry import Retry


def test_defaults():
    config = CheckoutConfig()

    assert config.fallback_delivery_fee == Decimal("5.00")
    assert config.submit_retry.times == 3
    assert config.log_json


def test_fluent_builders_return_new_configs():
    base = CheckoutConfig()
    config = (
        base
        .with_api("https://loja.example.com/", timeout=3.0)
        .with_fallback_fee(Decimal("8.00"))
        .with_loyalty(LoyaltyPolicy(redemption_rate=Decimal("0.02")))
        .with_submit_retry(Retry(times=5))
        .with_logging(json=False, level="debug")
    )

    assert config.api_base_url == "https://loja.example.com"
    assert config.request_timeout == 3.0
    assert config.fallback_delivery_fee == Decimal("8.00")
    assert config.loyalty.redemption_rate == Decimal("0.02")
    assert config.submit_retry.times == 5
    assert not config.log_json
    assert base == CheckoutConfig()


def test_from_env_reads_cashier_variables():
    config = CheckoutConfig.from_env({
        "CASHIER_API_BASE_URL": "http://api.local:8000/",
        "CASHIER_REQUEST_TIMEOUT": "2.5",
        "CASHIER_DELIVERY_FEE": "6,00",
        "CASHIER_SUBMIT_RETRIES": "4",
        "CASHIER_LOG_JSON": "no",
        "CASHIER_LOG_LEVEL": "DEBUG",
    })

    assert config.api_base_url == "http://api.local:8000"
    assert config.request_timeout == 2.5
    assert config.fallback_delivery_fee == Decimal("6.00")
    assert config.submit_retry.times == 4
    assert not config.log_json
    assert config.log_level == "debug"


def test_from_env_ignores_malformed_values():
    config = CheckoutConfig.from_env({
        "CASHIER_REQUEST_TIMEOUT": "soon",
        "CASHIER_DELIVERY_FEE": "-1",
        "CASHIER_SUBMIT_RETRIES": "0",
    })

    assert config == CheckoutConfig()
