from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, Field, PlainSerializer, field_validator, model_validator

from app.schemas.pricing import DiscountKind

# admin input is validated strictly; only upstream reads are forgiving
Amount = Annotated[
    Decimal,
    Field(ge=0, max_digits=10, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _check_days(v: Optional[list[str]]) -> Optional[list[str]]:
    if v is None:
        return v
    bad = [d for d in v if d.strip().lower() not in WEEKDAYS]
    if bad:
        raise ValueError(f"unknown weekday(s): {', '.join(bad)}")
    return [d.strip().capitalize() for d in v]


class FeeScheduleIn(BaseModel):
    delivery_fee_amount: Amount
    free_delivery_limit: Amount
    service_fee_amount: Amount = Decimal("0.99")
    minimum_order_value: Amount


class FeeScheduleOut(FeeScheduleIn):
    id: str


class DiscountRuleIn(BaseModel):
    name: str
    kind: DiscountKind
    value: Amount
    minimum_purchase_amount: Optional[Amount] = None
    days_of_week: Optional[list[str]] = None
    is_active: bool = True
    position: int = 0

    @field_validator("days_of_week")
    @classmethod
    def known_days(cls, v):
        return _check_days(v)

    @model_validator(mode="after")
    def percent_range(self):
        if self.kind == DiscountKind.PERCENTAGE and self.value > 100:
            raise ValueError("percentage discount cannot exceed 100")
        return self


class DiscountRulePatch(BaseModel):
    """Partial update; `kind` is fixed once a rule exists."""
    name: Optional[str] = None
    value: Optional[Amount] = None
    minimum_purchase_amount: Optional[Amount] = None
    days_of_week: Optional[list[str]] = None
    is_active: Optional[bool] = None
    position: Optional[int] = None

    @field_validator("days_of_week")
    @classmethod
    def known_days(cls, v):
        return _check_days(v)


class DiscountRuleOut(DiscountRuleIn):
    id: str
