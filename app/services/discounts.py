import logging
from decimal import Decimal
from typing import Iterable, Sequence

from pydantic import ValidationError

from app.schemas.pricing import DiscountEligibility, DiscountKind, DiscountRule, DiscountSelection
from app.util.money import ZERO, money, to_decimal

logger = logging.getLogger(__name__)


def parse_rules(raw: Iterable[dict]) -> list[DiscountRule]:
    """Build rules from an upstream list, keeping its order.

    A rule that does not validate (e.g. an unknown discount kind) is skipped
    instead of failing the whole list.
    """
    rules: list[DiscountRule] = []
    for i, item in enumerate(raw or ()):
        try:
            rules.append(DiscountRule.model_validate(item))
        except ValidationError as e:
            logger.warning("skipping malformed discount rule #%d (id=%s): %s",
                           i, item.get("id") if isinstance(item, dict) else None, e.errors()[0]["msg"])
    return rules


def is_day_eligible(rule: DiscountRule, day_of_week: str) -> bool:
    if not rule.days_of_week:
        return True
    wanted = (day_of_week or "").strip().lower()
    return any(d.strip().lower() == wanted for d in rule.days_of_week)


def minimum_for(rule: DiscountRule) -> Decimal:
    return rule.minimum_purchase_amount or ZERO


def discount_amount_for(rule: DiscountRule, subtotal: Decimal) -> Decimal:
    if rule.kind is DiscountKind.PERCENTAGE:
        amount = subtotal * rule.value / Decimal(100)
    elif rule.kind is DiscountKind.FIXED:
        # never discount more than the subtotal
        amount = min(rule.value, subtotal)
    else:
        raise ValueError(f"unhandled discount kind: {rule.kind!r}")
    return money(amount)


def select_applicable_discount(
    rules: Sequence[DiscountRule] | None,
    subtotal,
    day_of_week: str,
) -> DiscountSelection:
    """First day-eligible rule whose minimum spend is met, in list order.

    List order is the priority: a later rule is never preferred even if it
    would give a larger discount.
    """
    subtotal = to_decimal(subtotal)
    for rule in rules or ():
        if not is_day_eligible(rule, day_of_week):
            continue
        if subtotal >= minimum_for(rule):
            return DiscountSelection(discount=rule, discount_amount=discount_amount_for(rule, subtotal))
    return DiscountSelection(discount=None, discount_amount=ZERO)


def list_discount_availability(
    rules: Sequence[DiscountRule] | None,
    subtotal,
    day_of_week: str,
) -> list[DiscountEligibility]:
    """Every rule that applies on `day_of_week`, with how far the basket is from it."""
    subtotal = to_decimal(subtotal)
    out: list[DiscountEligibility] = []
    for rule in rules or ():
        if not is_day_eligible(rule, day_of_week):
            continue
        minimum = minimum_for(rule)
        out.append(DiscountEligibility(
            rule=rule,
            meets_requirement=subtotal >= minimum,
            amount_needed=money(max(minimum - subtotal, ZERO)),
        ))
    return out
