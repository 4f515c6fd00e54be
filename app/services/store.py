import json
import logging
from sqlalchemy.orm import Session

from app.models.core import FeeSchedule as FeeScheduleRow, DiscountRule as DiscountRuleRow
from app.schemas.pricing import FeeSchedule, DiscountRule
from app.services.discounts import parse_rules

logger = logging.getLogger(__name__)


def current_fee_row(db: Session) -> FeeScheduleRow | None:
    return (db.query(FeeScheduleRow)
              .filter(FeeScheduleRow.deleted_at.is_(None))
              .order_by(FeeScheduleRow.created_at.asc())
              .first())


def load_fee_schedule(db: Session) -> FeeSchedule | None:
    """None means "no schedule configured"; pricing then uses the fallback fees."""
    row = current_fee_row(db)
    if not row:
        return None
    return FeeSchedule(
        delivery_fee_amount=row.delivery_fee_amount,
        free_delivery_limit=row.free_delivery_limit,
        service_fee_amount=row.service_fee_amount,
        minimum_order_value=row.minimum_order_value,
    )


def decode_days(raw: str | None) -> list[str] | None:
    if not raw:
        return None
    try:
        days = json.loads(raw)
    except ValueError:
        logger.warning("ignoring unreadable days_of_week %r", raw)
        return None
    return [str(d) for d in days] if isinstance(days, list) else None


def rule_to_dict(r: DiscountRuleRow) -> dict:
    return {
        "id": r.id,
        "name": r.name,
        "kind": r.kind.value,
        "value": float(r.value or 0),
        "minimum_purchase_amount": float(r.minimum_purchase_amount) if r.minimum_purchase_amount is not None else None,
        "days_of_week": decode_days(r.days_of_week),
        "is_active": bool(r.is_active),
        "position": r.position,
    }


def active_rule_rows(db: Session) -> list[DiscountRuleRow]:
    # position is the priority; creation time keeps equal positions stable
    return (db.query(DiscountRuleRow)
              .filter(DiscountRuleRow.deleted_at.is_(None), DiscountRuleRow.is_active.is_(True))
              .order_by(DiscountRuleRow.position.asc(), DiscountRuleRow.created_at.asc())
              .all())


def load_discount_rules(db: Session) -> list[DiscountRule]:
    return parse_rules(rule_to_dict(r) for r in active_rule_rows(db))
