"""
Config — checkout configuration.

Frozen, built fluently or from the environment:

    config = (
        CheckoutConfig()
        .with_api("https://loja.example.com", timeout=5.0)
        .with_submit_retry(Retry(times=5))
    )
    config = CheckoutConfig.from_env()
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal

from cashier.loyalty import LoyaltyPolicy
from cashier.money import parse_amount
from cashier.retry import Retry

_TRUE = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class CheckoutConfig:
    """
    Everything tunable about a checkout session.

    fallback_delivery_fee: used when the settings service is unreachable.
    read_retry: promotions, settings and balance reads (silent).
    submit_retry: stock simulation and order submission (transport errors only).
    """

    api_base_url: str = "http://127.0.0.1:5000"
    request_timeout: float = 10.0
    fallback_delivery_fee: Decimal = Decimal("5.00")
    loyalty: LoyaltyPolicy = field(default_factory=LoyaltyPolicy)
    read_retry: Retry = Retry(times=2, backoff_initial=0.05)
    submit_retry: Retry = Retry(times=3)
    log_json: bool = True
    log_level: str = "info"

    def with_api(self, base_url: str, *, timeout: float | None = None) -> CheckoutConfig:
        return replace(
            self,
            api_base_url=base_url.rstrip("/"),
            request_timeout=self.request_timeout if timeout is None else timeout,
        )

    def with_fallback_fee(self, fee: Decimal) -> CheckoutConfig:
        return replace(self, fallback_delivery_fee=fee)

    def with_loyalty(self, policy: LoyaltyPolicy) -> CheckoutConfig:
        return replace(self, loyalty=policy)

    def with_read_retry(self, policy: Retry) -> CheckoutConfig:
        return replace(self, read_retry=policy)

    def with_submit_retry(self, policy: Retry) -> CheckoutConfig:
        return replace(self, submit_retry=policy)

    def with_logging(self, *, json: bool, level: str = "info") -> CheckoutConfig:
        return replace(self, log_json=json, log_level=level)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CheckoutConfig:
        """Read CASHIER_* variables; unset or malformed values keep defaults."""
        env = os.environ if environ is None else environ
        config = cls()

        if url := env.get("CASHIER_API_BASE_URL"):
            config = config.with_api(url)
        if timeout := env.get("CASHIER_REQUEST_TIMEOUT"):
            parsed = parse_amount(timeout)
            if parsed.valid and parsed.value > 0:
                config = replace(config, request_timeout=float(parsed.value))
        if fee := env.get("CASHIER_DELIVERY_FEE"):
            parsed = parse_amount(fee)
            if parsed.valid:
                config = config.with_fallback_fee(parsed.value)
        if retries := env.get("CASHIER_SUBMIT_RETRIES"):
            if retries.isdigit() and int(retries) > 0:
                config = config.with_submit_retry(
                    replace(config.submit_retry, times=int(retries))
                )
        if json := env.get("CASHIER_LOG_JSON"):
            config = replace(config, log_json=json.strip().lower() in _TRUE)
        if level := env.get("CASHIER_LOG_LEVEL"):
            config = replace(config, log_level=level.strip().lower())

        return config


__all__ = ("CheckoutConfig",)
