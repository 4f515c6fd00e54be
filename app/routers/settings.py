# app/routers/settings.py
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db import get_db
from app.deps import require_auth
from app.models.core import FeeSchedule as FeeScheduleRow
from app.schemas.settings import FeeScheduleIn, FeeScheduleOut
from app.services.store import current_fee_row, load_fee_schedule
from app.util.audit import audit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


def _fee_dict(row: FeeScheduleRow) -> dict:
    return {
        "delivery_fee_amount": float(row.delivery_fee_amount or 0),
        "free_delivery_limit": float(row.free_delivery_limit or 0),
        "service_fee_amount": float(row.service_fee_amount or 0),
        "minimum_order_value": float(row.minimum_order_value or 0),
    }


@router.get("/fees")
def get_fees(db: Session = Depends(get_db)):
    """Current fee schedule, or {} when none is configured (pricing falls back)."""
    fs = load_fee_schedule(db)
    if fs is None:
        return {}
    return fs.model_dump(mode="json")


@router.put("/fees", response_model=FeeScheduleOut)
def upsert_fees(body: FeeScheduleIn, db: Session = Depends(get_db), sub: str = Depends(require_auth)):
    row = current_fee_row(db)
    before = None
    if not row:
        row = FeeScheduleRow(**body.model_dump())
        db.add(row)
    else:
        before = _fee_dict(row)
        for k, v in body.model_dump().items():
            setattr(row, k, v)
    db.flush()
    audit(db, sub, "FeeSchedule", row.id, "UPSERT", before=before, after=body.model_dump(mode="json"))
    db.commit(); db.refresh(row)
    logger.info("fee schedule %s updated by %s", row.id, sub)
    return FeeScheduleOut(id=row.id, **body.model_dump())
