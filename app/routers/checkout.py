import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.config import settings
from app.db import get_db
from app.schemas.pricing import CheckoutIn, CheckoutOut
from app.services.checkout import build_quote, resolve_day_of_week, shop_today, validate_checkout
from app.services.store import load_discount_rules, load_fee_schedule

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("/validate", response_model=CheckoutOut)
def validate(body: CheckoutIn, request: Request, db: Session = Depends(get_db)):
    """
    Re-price the submitted basket for the selected fulfilment date and check
    it can be placed. The storefront sends the totals it displayed; they must
    match the recomputation to the cent.
    """
    # the fulfilment date decides the discount day; a client weekday is not trusted here
    day = resolve_day_of_week(body.selected_date or body.date, shop_today(settings.SHOP_TZ))
    quote = build_quote(
        load_fee_schedule(db),
        load_discount_rules(db),
        body.lines,
        body.mode,
        day,
    )
    problem = validate_checkout(quote, body)
    if problem:
        logger.info("checkout rejected rid=%s: %s", getattr(request.state, "request_id", None), problem)
        raise HTTPException(422, detail=problem)
    return CheckoutOut(quote=quote)
