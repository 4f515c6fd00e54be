"""Shared pricing path for every storefront surface.

The basket sidebar, the mobile basket, the checkout summary and checkout
submission all go through `build_quote`, so they can never disagree on a
fee, a discount or the minimum-order gate.
"""
import logging
import re
from datetime import date, datetime
from typing import Iterable, Sequence
from zoneinfo import ZoneInfo

from app.schemas.pricing import (
    BasketLine, CheckoutIn, DeliveryMode, DiscountRule, DiscountSelection, FeeSchedule,
    MinimumOrderCheck, Quote,
)
from app.services.billing import basket_subtotal, compute_fees, free_delivery_status, resolve_schedule
from app.services.discounts import list_discount_availability, select_applicable_discount
from app.util.money import ZERO, money, to_decimal

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_PHONE_RE = re.compile(r"^[\d\s\-\+\(\)]+$")


def weekday_name(d: date) -> str:
    return WEEKDAY_NAMES[d.weekday()]


def shop_today(tz: str) -> date:
    return datetime.now(ZoneInfo(tz)).date()


def resolve_day_of_week(selected_date: str | None, today: date) -> str:
    """Weekday the order will be fulfilled on.

    `selected_date` is the checkout picker value ("24/10 - Tomorrow",
    "24.10 - Friday", "24/10") or an ISO date. Day/month labels are read in
    today's year. No selection or an unreadable one means today.
    """
    if not selected_date or not selected_date.strip():
        return weekday_name(today)

    raw = selected_date.strip()
    try:
        return weekday_name(date.fromisoformat(raw))
    except ValueError:
        pass

    parts = raw.split(" - ")[0].strip().replace(".", "/").split("/")
    if len(parts) != 2:
        logger.debug("unrecognised fulfilment date %r, using today", selected_date)
        return weekday_name(today)
    try:
        fulfil = date(today.year, int(parts[1]), int(parts[0]))
    except ValueError:
        logger.debug("invalid fulfilment date %r, using today", selected_date)
        return weekday_name(today)
    return weekday_name(fulfil)


def check_minimum_order(schedule: FeeSchedule | None, subtotal, mode: DeliveryMode) -> MinimumOrderCheck:
    """Collection is exempt; delivery needs subtotal >= minimum_order_value."""
    effective, _ = resolve_schedule(schedule)
    subtotal = to_decimal(subtotal)
    minimum = effective.minimum_order_value
    if DeliveryMode(mode) is DeliveryMode.COLLECTION:
        return MinimumOrderCheck(can_proceed_to_checkout=True, minimum_order_value=minimum, amount_needed=ZERO)
    return MinimumOrderCheck(
        can_proceed_to_checkout=subtotal >= minimum,
        minimum_order_value=minimum,
        amount_needed=money(max(minimum - subtotal, ZERO)),
    )


def build_quote(
    schedule: FeeSchedule | None,
    rules: Sequence[DiscountRule] | None,
    lines: Iterable[BasketLine | dict],
    mode: DeliveryMode,
    day_of_week: str,
) -> Quote:
    subtotal = basket_subtotal(lines)
    mode = DeliveryMode(mode)
    rules = rules or []

    # an empty basket gets no discount and no upsell
    if subtotal > 0:
        selection = select_applicable_discount(rules, subtotal, day_of_week)
        available = list_discount_availability(rules, subtotal, day_of_week)
    else:
        selection = DiscountSelection()
        available = []

    pricing = compute_fees(schedule, subtotal, mode, selection.discount_amount)
    if pricing.fallback_fees:
        logger.warning("fee schedule unavailable, pricing with FALLBACK fees "
                       "(delivery=%s service=%s)", pricing.delivery_fee, pricing.service_fee)

    free_delivery, free_delivery_needed = free_delivery_status(schedule, subtotal)

    return Quote(
        subtotal=money(subtotal),
        mode=mode,
        day_of_week=day_of_week,
        discount=selection.discount,
        discount_amount=pricing.discount_amount,
        delivery_fee=pricing.delivery_fee,
        service_fee=pricing.service_fee,
        total=pricing.total,
        fallback_fees=pricing.fallback_fees,
        available_discounts=available,
        qualifies_for_free_delivery=free_delivery,
        free_delivery_amount_needed=free_delivery_needed,
        minimum_order=check_minimum_order(schedule, subtotal, mode),
    )


def validate_phone(phone: str | None) -> bool:
    if not phone or not _PHONE_RE.match(phone):
        return False
    return len(re.sub(r"\D", "", phone)) >= 8


def validate_checkout(quote: Quote, body: CheckoutIn) -> str | None:
    """Return why this submission cannot be placed, or None if it can.

    `quote` must be the server-side recomputation for the same basket, mode
    and fulfilment day.
    """
    delivery = quote.mode is DeliveryMode.DELIVERY

    if not body.lines or quote.subtotal <= 0:
        return "Your basket is empty"
    if not validate_phone(body.phone_number):
        return "Invalid phone number"
    if delivery and not (body.area_code or "").strip():
        return "Area code is required for delivery"
    if not body.date or not body.time:
        return "Please select delivery date and time"

    gate = quote.minimum_order
    if not gate.can_proceed_to_checkout:
        return (f"Minimum order value for delivery is €{gate.minimum_order_value:.2f}. "
                f"Your order total is €{quote.subtotal:.2f}. "
                f"Please add €{gate.amount_needed:.2f} more to proceed.")

    if delivery and not (body.address or "").strip():
        return "Delivery address is required. Please enter your delivery address."

    if money(body.discount) != quote.discount_amount or money(body.total) != quote.total:
        return "Prices have changed since your basket was loaded. Please review your order."
    return None
