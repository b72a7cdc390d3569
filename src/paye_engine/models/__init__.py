"""ORM models."""

from paye_engine.models.base import Base, TimestampMixin
from paye_engine.models.settings import PayrollSettings

__all__ = ["Base", "PayrollSettings", "TimestampMixin"]
