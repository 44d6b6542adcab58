"""
Wire — pydantic models for storefront payloads.

Inbound (settings, balance, capacity, receipt) tolerate extra keys.
Outbound (OrderSubmission) is strict and validated before it is sent.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from cashier.cpf import normalize_cpf, validate_cpf

# ═══════════════════════════════════════════════════════════════════════════════
# Inbound
# ═══════════════════════════════════════════════════════════════════════════════


class LoyaltyRates(BaseModel):
    model_config = ConfigDict(extra="ignore")

    gain_rate: Decimal | None = None
    redemption_rate: Decimal | None = None
    expiration_days: int | None = None
    min_redemption_fraction: Decimal | None = None
    max_redemption_fraction: Decimal | None = None


class DeliveryTimings(BaseModel):
    """Minutes; defaults mirror the store's out-of-the-box settings."""

    model_config = ConfigDict(extra="ignore")

    initiation_minutes: int = Field(default=5, ge=0)
    preparation_minutes: int = Field(default=20, ge=0)
    dispatch_minutes: int = Field(default=5, ge=0)
    delivery_minutes: int = Field(default=15, ge=0)


class PublicSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    delivery_fee: Decimal | None = None
    loyalty_rates: LoyaltyRates = Field(default_factory=LoyaltyRates)
    estimated_delivery_time: DeliveryTimings = Field(default_factory=DeliveryTimings)

    @field_validator("delivery_fee", mode="before")
    @classmethod
    def _blank_fee(cls, v: object) -> object:
        return None if v == "" else v


class LoyaltyBalance(BaseModel):
    model_config = ConfigDict(extra="ignore")

    current_balance: int = Field(default=0, ge=0)


class CapacityReport(BaseModel):
    """Result of a capacity simulation for one exact item configuration."""

    model_config = ConfigDict(extra="ignore")

    max_quantity: int = Field(ge=0)
    limiting_ingredient: str | None = None

    @field_validator("limiting_ingredient", mode="before")
    @classmethod
    def _ingredient_name(cls, v: object) -> object:
        # the backend sends either a name or {"name": ..., "id": ...}
        if isinstance(v, dict):
            return v.get("name")
        return v


class SubmissionReceipt(BaseModel):
    model_config = ConfigDict(extra="ignore")

    order_id: int | str = Field(validation_alias=AliasChoices("order_id", "id"))
    confirmation_code: str | None = None
    total: Decimal | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Outbound
# ═══════════════════════════════════════════════════════════════════════════════


class PromotionLine(BaseModel):
    product_id: int
    promotion_id: int | str
    discount_percentage: Decimal | None = None
    discount_value: Decimal | None = None

    @field_serializer("discount_percentage", "discount_value")
    def _as_number(self, v: Decimal | None) -> float | None:
        return None if v is None else float(v)


class OrderSubmission(BaseModel):
    """The order creation request body."""

    model_config = ConfigDict(extra="forbid")

    payment_method: Literal["pix", "credit", "debit", "money"]
    order_type: Literal["delivery", "pickup"]
    address_id: int | None = Field(default=None, gt=0)
    amount_paid: Decimal | None = Field(default=None, ge=0)
    points_to_redeem: int = Field(default=0, ge=0)
    cpf_on_invoice: str | None = None
    notes: str | None = None
    use_cart: Literal[True] = True
    promotions: list[PromotionLine] | None = None

    @field_validator("cpf_on_invoice")
    @classmethod
    def _cpf(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not validate_cpf(v):
            raise ValueError("invalid CPF")
        return normalize_cpf(v)

    @field_validator("notes")
    @classmethod
    def _notes(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @model_validator(mode="after")
    def _order_type_rules(self) -> OrderSubmission:
        if self.order_type == "delivery" and self.address_id is None:
            raise ValueError("address_id is required for delivery")
        if self.order_type == "pickup" and self.address_id is not None:
            raise ValueError("address_id must be omitted for pickup")
        if self.payment_method != "money" and self.amount_paid is not None:
            raise ValueError("amount_paid is only sent for cash payment")
        return self

    @field_serializer("amount_paid")
    def _amount(self, v: Decimal | None) -> float | None:
        return None if v is None else float(v)

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(mode="json", exclude_none=True)


__all__ = (
    "LoyaltyRates",
    "DeliveryTimings",
    "PublicSettings",
    "LoyaltyBalance",
    "CapacityReport",
    "SubmissionReceipt",
    "PromotionLine",
    "OrderSubmission",
)
