from decimal import Decimal
from typing import Iterable

from app.schemas.pricing import BasketLine, DeliveryMode, FeeSchedule, PricingResult
from app.util.money import ZERO, money, to_decimal

# Used while the fee schedule is loading or when it could not be fetched.
FALLBACK_SCHEDULE = FeeSchedule(
    delivery_fee_amount="3.00",
    free_delivery_limit="12.00",
    service_fee_amount="0.99",
    minimum_order_value="10.00",
)


def resolve_schedule(schedule: FeeSchedule | None) -> tuple[FeeSchedule, bool]:
    """Return (effective schedule, used_fallback)."""
    if schedule is None:
        return FALLBACK_SCHEDULE, True
    return schedule, False


def basket_subtotal(lines: Iterable[BasketLine | dict]) -> Decimal:
    subtotal = ZERO
    for l in lines or ():
        price = l.get("total_price", l.get("totalPrice")) if isinstance(l, dict) else l.total_price
        subtotal += to_decimal(price)
    return subtotal


def delivery_fee_for(schedule: FeeSchedule, subtotal: Decimal, mode: DeliveryMode) -> Decimal:
    mode = DeliveryMode(mode)
    if mode is DeliveryMode.COLLECTION:
        return ZERO
    if mode is DeliveryMode.DELIVERY:
        # free-delivery threshold is inclusive
        if subtotal >= schedule.free_delivery_limit:
            return ZERO
        return schedule.delivery_fee_amount
    raise ValueError(f"unhandled delivery mode: {mode!r}")


def compute_fees(
    schedule: FeeSchedule | None,
    subtotal,
    mode: DeliveryMode,
    discount_amount=ZERO,
) -> PricingResult:
    """Price a basket.

    The discount is taken as given; pick it with
    `app.services.discounts.select_applicable_discount` for the same
    subtotal and day. Only the discounted subtotal is clamped at zero, so
    fees still apply to a fully discounted order. The service fee is charged
    even on an empty basket; callers guard against checking out with one.
    """
    effective, fallback = resolve_schedule(schedule)
    subtotal = to_decimal(subtotal)
    discount = to_decimal(discount_amount)

    delivery = delivery_fee_for(effective, subtotal, mode)
    service = effective.service_fee_amount
    total = max(subtotal - discount, ZERO) + delivery + service

    return PricingResult(
        delivery_fee=money(delivery),
        service_fee=money(service),
        discount_amount=money(discount),
        total=money(total),
        fallback_fees=fallback,
    )


def free_delivery_status(schedule: FeeSchedule | None, subtotal) -> tuple[bool, Decimal]:
    """(qualifies, amount still needed) for the "spend X more for free delivery" hint."""
    effective, _ = resolve_schedule(schedule)
    subtotal = to_decimal(subtotal)
    needed = max(effective.free_delivery_limit - subtotal, ZERO)
    return subtotal >= effective.free_delivery_limit, money(needed)
