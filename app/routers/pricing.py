from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.db import get_db
from app.schemas.pricing import DiscountEligibility, Quote, QuoteIn
from app.services.checkout import build_quote, resolve_day_of_week, shop_today
from app.services.discounts import list_discount_availability
from app.services.billing import basket_subtotal
from app.services.store import load_discount_rules, load_fee_schedule

router = APIRouter(prefix="/pricing", tags=["pricing"])


def day_for(day_of_week: str | None, selected_date: str | None) -> str:
    """Explicit weekday, else the chosen fulfilment date, else today in the shop's time zone."""
    if day_of_week and day_of_week.strip():
        return day_of_week.strip()
    return resolve_day_of_week(selected_date, shop_today(settings.SHOP_TZ))


@router.post("/quote", response_model=Quote)
def quote(body: QuoteIn, db: Session = Depends(get_db)):
    """
    Full basket pricing used by the basket sidebar, the mobile basket and
    the checkout summary: discount, fees, total, upsell list, free-delivery
    hint and the minimum-order gate.
    """
    return build_quote(
        load_fee_schedule(db),
        load_discount_rules(db),
        body.lines,
        body.mode,
        day_for(body.day_of_week, body.selected_date),
    )


@router.post("/availability", response_model=list[DiscountEligibility])
def availability(body: QuoteIn, db: Session = Depends(get_db)):
    subtotal = basket_subtotal(body.lines)
    if subtotal <= 0:
        return []
    return list_discount_availability(
        load_discount_rules(db), subtotal, day_for(body.day_of_week, body.selected_date))
