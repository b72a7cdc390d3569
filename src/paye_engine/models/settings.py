"""Stored statutory settings versions."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, Date, Index, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from paye_engine.calculators.rules import load_rules_snapshot
from paye_engine.calculators.types import RulesSnapshot
from paye_engine.models.base import Base, TimestampMixin

_RATE = Numeric(9, 6)
_MONEY = Numeric(14, 2)


class PayrollSettings(Base, TimestampMixin):
    """One version of the statutory rules.

    At most one row is expected to be active; the service layer enforces
    that when a new version is activated.
    """

    __tablename__ = "payroll_settings"
    __table_args__ = (Index("ix_payroll_settings_active", "is_active", "effective_from"),)

    settings_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    personal_relief: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    nssf_employee_rate: Mapped[Decimal] = mapped_column(_RATE, nullable=False)
    nssf_employer_rate: Mapped[Decimal] = mapped_column(_RATE, nullable=False)
    nssf_max_contribution: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    shif_employee_rate: Mapped[Decimal] = mapped_column(_RATE, nullable=False)
    shif_employer_rate: Mapped[Decimal] = mapped_column(_RATE, nullable=False)
    ahl_employee_rate: Mapped[Decimal] = mapped_column(_RATE, nullable=False)
    ahl_employer_rate: Mapped[Decimal] = mapped_column(_RATE, nullable=False)
    # [{"min": "0", "max": "24000", "rate": "0.10"}, ...]
    paye_brackets: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    shif_is_pretax: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    ahl_is_pretax: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def to_payload(self) -> dict[str, Any]:
        """Return the row in the rules payload shape."""
        return {
            "version_id": str(self.settings_id),
            "personal_relief": self.personal_relief,
            "nssf_employee_rate": self.nssf_employee_rate,
            "nssf_employer_rate": self.nssf_employer_rate,
            "nssf_max_contribution": self.nssf_max_contribution,
            "shif_employee_rate": self.shif_employee_rate,
            "shif_employer_rate": self.shif_employer_rate,
            "ahl_employee_rate": self.ahl_employee_rate,
            "ahl_employer_rate": self.ahl_employer_rate,
            "paye_brackets": self.paye_brackets,
            "shif_is_pretax": self.shif_is_pretax,
            "ahl_is_pretax": self.ahl_is_pretax,
            "effective_from": self.effective_from,
            "effective_to": self.effective_to,
            "is_active": self.is_active,
        }

    def to_snapshot(self) -> RulesSnapshot:
        """Validate the row into an immutable snapshot for the calculator."""
        return load_rules_snapshot(self.to_payload())
