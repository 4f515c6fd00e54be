import json
import logging
from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps import require_auth
from app.models.common import utcnow
from app.models.core import DiscountRule as DiscountRuleRow
from app.schemas.settings import DiscountRuleIn, DiscountRuleOut, DiscountRulePatch
from app.services.store import active_rule_rows, rule_to_dict
from app.util.audit import audit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/discounts", tags=["discounts"])


def _columns(body: DiscountRuleIn) -> dict:
    data = body.model_dump()
    data["days_of_week"] = json.dumps(data["days_of_week"]) if data["days_of_week"] else None
    return data


def _get_rule(db: Session, rule_id: str) -> DiscountRuleRow:
    r = db.get(DiscountRuleRow, rule_id)
    if not r or r.deleted_at is not None:
        raise HTTPException(404, detail="discount not found")
    return r


@router.get("/active")
def list_active(db: Session = Depends(get_db)):
    """Active rules in priority order. An empty list means no discounts today."""
    return [rule_to_dict(r) for r in active_rule_rows(db)]


@router.get("/")
def list_all(db: Session = Depends(get_db), sub: str = Depends(require_auth)):
    rows = (db.query(DiscountRuleRow)
              .filter(DiscountRuleRow.deleted_at.is_(None))
              .order_by(DiscountRuleRow.position.asc(), DiscountRuleRow.created_at.asc())
              .all())
    return [rule_to_dict(r) for r in rows]


@router.post("/", response_model=DiscountRuleOut)
def create_rule(body: DiscountRuleIn, db: Session = Depends(get_db), sub: str = Depends(require_auth)):
    r = DiscountRuleRow(**_columns(body))
    db.add(r)
    db.flush()
    audit(db, sub, "DiscountRule", r.id, "CREATE", after=rule_to_dict(r))
    db.commit(); db.refresh(r)
    logger.info("discount %s (%s) created by %s", r.id, r.name, sub)
    return DiscountRuleOut(id=r.id, **body.model_dump())


@router.patch("/{rule_id}", response_model=DiscountRuleOut)
def update_rule(rule_id: str, body: DiscountRulePatch, db: Session = Depends(get_db), sub: str = Depends(require_auth)):
    r = _get_rule(db, rule_id)
    before = rule_to_dict(r)
    merged = {k: v for k, v in before.items() if k != "id"}
    merged.update(body.model_dump(exclude_unset=True))
    try:
        # re-check the whole rule, e.g. a percentage raised above 100
        full = DiscountRuleIn.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(422, detail=e.errors(include_url=False, include_context=False, include_input=False))
    for k, v in _columns(full).items():
        setattr(r, k, v)
    audit(db, sub, "DiscountRule", r.id, "UPDATE", before=before, after=full.model_dump(mode="json"))
    db.commit(); db.refresh(r)
    return DiscountRuleOut(id=r.id, **full.model_dump())


@router.delete("/{rule_id}")
def delete_rule(rule_id: str, db: Session = Depends(get_db), sub: str = Depends(require_auth)):
    r = _get_rule(db, rule_id)
    r.deleted_at = utcnow()
    audit(db, sub, "DiscountRule", r.id, "DELETE", before=rule_to_dict(r))
    db.commit()
    logger.info("discount %s deleted by %s", rule_id, sub)
    return {"ok": True}
