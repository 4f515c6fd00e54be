# Importing the module registers tables with Base for create_all()
from .core import (  # noqa: F401
    FeeSchedule, DiscountRule, AuditLog,
)

__all__ = ["FeeSchedule", "DiscountRule", "AuditLog"]
