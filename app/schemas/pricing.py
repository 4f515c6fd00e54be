from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, field_validator,
)

from app.util.money import ZERO, to_decimal

# Backend amounts arrive as numbers or strings; unparsable ones become 0.
# JSON output goes back out as plain numbers, which is what the storefront reads.
Money = Annotated[
    Decimal,
    BeforeValidator(to_decimal),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class DeliveryMode(str, Enum):
    DELIVERY = "delivery"
    COLLECTION = "collection"


class DiscountKind(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


# ── Upstream data ───────────────────────────────────────────────────────────
class FeeSchedule(BaseModel):
    model_config = ConfigDict(frozen=True)
    delivery_fee_amount: Money = Field(
        ZERO, validation_alias=AliasChoices("delivery_fee_amount", "deliveryFeeAmount", "delivery_fee"))
    free_delivery_limit: Money = Field(
        ZERO, validation_alias=AliasChoices("free_delivery_limit", "freeDeliveryLimit"))
    service_fee_amount: Money = Field(
        ZERO, validation_alias=AliasChoices("service_fee_amount", "serviceFeeAmount", "service_fee"))
    minimum_order_value: Money = Field(
        ZERO, validation_alias=AliasChoices("minimum_order_value", "minimumOrderValue", "min_order"))


class DiscountRule(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: Optional[int | str] = None
    name: str = ""
    kind: DiscountKind = Field(validation_alias=AliasChoices("kind", "discount_type"))
    value: Money = Field(ZERO, validation_alias=AliasChoices("value", "discount_value"))
    # null and 0 both mean "no minimum"
    minimum_purchase_amount: Money = Field(
        ZERO, validation_alias=AliasChoices("minimum_purchase_amount", "minimumPurchaseAmount"))
    days_of_week: Optional[tuple[str, ...]] = Field(
        None, validation_alias=AliasChoices("days_of_week", "daysOfWeek"))

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class BasketLine(BaseModel):
    model_config = ConfigDict(extra="ignore")
    total_price: Money = Field(ZERO, validation_alias=AliasChoices("total_price", "totalPrice"))
    name: Optional[str] = None
    quantity: Optional[int] = None


# ── Derived ─────────────────────────────────────────────────────────────────
class PricingResult(BaseModel):
    delivery_fee: Money
    service_fee: Money
    discount_amount: Money
    total: Money
    fallback_fees: bool = False  # True when the fallback constants priced this, not a real schedule


class DiscountSelection(BaseModel):
    discount: Optional[DiscountRule] = None
    discount_amount: Money = ZERO


class DiscountEligibility(BaseModel):
    rule: DiscountRule
    meets_requirement: bool
    amount_needed: Money


class MinimumOrderCheck(BaseModel):
    can_proceed_to_checkout: bool
    minimum_order_value: Money
    amount_needed: Money


class Quote(BaseModel):
    subtotal: Money
    mode: DeliveryMode
    day_of_week: str
    discount: Optional[DiscountRule] = None
    discount_amount: Money
    delivery_fee: Money
    service_fee: Money
    total: Money
    fallback_fees: bool
    available_discounts: list[DiscountEligibility]
    qualifies_for_free_delivery: bool
    free_delivery_amount_needed: Money
    minimum_order: MinimumOrderCheck


# ── Requests ────────────────────────────────────────────────────────────────
class BasketIn(BaseModel):
    lines: list[BasketLine] = []
    mode: DeliveryMode = DeliveryMode.DELIVERY
    selected_date: Optional[str] = None  # checkout picker label, e.g. "24/10 - Tomorrow"


class QuoteIn(BasketIn):
    day_of_week: Optional[str] = None  # wins over selected_date when given


class CheckoutIn(BasketIn):
    # no day_of_week: the discount day always comes from the fulfilment date
    total: Money
    discount: Money = ZERO
    phone_number: str
    address: Optional[str] = None
    area_code: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None


class CheckoutOut(BaseModel):
    ok: bool = True
    quote: Quote
