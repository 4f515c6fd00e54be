from sqlalchemy import String, Boolean, Numeric, Enum, Text, Integer
from sqlalchemy.orm import Mapped, mapped_column
from decimal import Decimal
from app.db import Base
from app.models.common import IdMixin, TSMixin
from app.schemas.pricing import DiscountKind

# ── Fees ────────────────────────────────────────────────────────────────────
class FeeSchedule(Base, IdMixin, TSMixin):
    __tablename__ = "fee_schedule"
    # single-row table; the storefront has one schedule
    delivery_fee_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    free_delivery_limit: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    service_fee_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    minimum_order_value: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)

# ── Discounts ───────────────────────────────────────────────────────────────
class DiscountRule(Base, IdMixin, TSMixin):
    __tablename__ = "discount_rule"
    name: Mapped[str] = mapped_column(String(160))
    kind: Mapped[DiscountKind] = mapped_column(Enum(DiscountKind))
    value: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    minimum_purchase_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    days_of_week: Mapped[str | None] = mapped_column(Text)  # JSON list of weekday names
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    position: Mapped[int] = mapped_column(Integer, default=0)  # lower wins ties

# ── Audit ───────────────────────────────────────────────────────────────────
class AuditLog(Base, IdMixin, TSMixin):
    __tablename__ = "audit_log"
    actor: Mapped[str] = mapped_column(String(120))
    entity: Mapped[str] = mapped_column(String(60))
    entity_id: Mapped[str] = mapped_column(String(36))
    action: Mapped[str] = mapped_column(String(60))
    before: Mapped[str | None] = mapped_column(Text)
    after: Mapped[str | None] = mapped_column(Text)
