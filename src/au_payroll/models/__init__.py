"""SQLAlchemy ORM models."""

from au_payroll.models.base import Base, TimestampMixin
from au_payroll.models.stp import PayeeRecord, PayEventRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "PayEventRecord",
    "PayeeRecord",
]
