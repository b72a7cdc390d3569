"""Resolution and activation of stored payroll settings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from paye_engine.calculators.errors import ValidationError
from paye_engine.calculators.rules import load_rules_snapshot, snapshot_to_payload
from paye_engine.calculators.types import RulesSnapshot
from paye_engine.models import PayrollSettings

logger = logging.getLogger(__name__)


class ActiveSettingsNotFoundError(Exception):
    """Raised when no active settings row exists."""

    def __init__(self) -> None:
        super().__init__(
            "No active payroll settings found. Please configure settings first."
        )


_NUMERIC_FIELDS = (
    "personal_relief",
    "nssf_employee_rate",
    "nssf_employer_rate",
    "nssf_max_contribution",
    "shif_employee_rate",
    "shif_employer_rate",
    "ahl_employee_rate",
    "ahl_employer_rate",
)


def _check_storable(snapshot: RulesSnapshot) -> None:
    """Reject values the Numeric columns would round or overflow.

    A stored version must reload as exactly the snapshot that was validated.
    """
    for name in _NUMERIC_FIELDS:
        column_type = PayrollSettings.__table__.c[name].type
        value = getattr(snapshot, name)
        if value >= Decimal(10) ** (column_type.precision - column_type.scale):
            raise ValidationError(f"too large to store: {value}", field=name)
        exponent = value.normalize().as_tuple().exponent
        if value and -exponent > column_type.scale:
            raise ValidationError(
                f"at most {column_type.scale} decimal places, got {value}", field=name
            )


class SettingsService:
    """Decides which stored settings version is current.

    The calculator never asks this question itself; callers resolve a
    snapshot here and pass the value on.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active(self) -> PayrollSettings:
        """Get the active row with the latest effective_from.

        Raises:
            ActiveSettingsNotFoundError: If no row is active.
        """
        result = await self.session.execute(
            select(PayrollSettings)
            .where(PayrollSettings.is_active.is_(True))
            .order_by(
                PayrollSettings.effective_from.desc(),
                PayrollSettings.created_at.desc(),
            )
            .limit(1)
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise ActiveSettingsNotFoundError()
        return row

    async def get_active_snapshot(self) -> RulesSnapshot:
        """Get the active settings as a validated snapshot."""
        row = await self.get_active()
        return row.to_snapshot()

    async def list_versions(self) -> list[PayrollSettings]:
        """All stored versions, newest first."""
        result = await self.session.execute(
            select(PayrollSettings).order_by(
                PayrollSettings.effective_from.desc(),
                PayrollSettings.created_at.desc(),
            )
        )
        return list(result.scalars().all())

    async def activate(self, payload: Mapping[str, Any]) -> PayrollSettings:
        """Store a new version and make it the only active one.

        The payload is validated first, so a malformed bracket table never
        reaches storage. The caller commits.

        Raises:
            ValidationError: If the payload is not a valid rules snapshot, or
                holds more digits than the settings columns store.
        """
        data = dict(payload)
        if data.get("effective_from") is None:
            data["effective_from"] = date.today()
        snapshot = load_rules_snapshot(data)
        _check_storable(snapshot)
        stored = snapshot_to_payload(snapshot)

        await self.session.execute(
            update(PayrollSettings)
            .where(PayrollSettings.is_active.is_(True))
            .values(is_active=False)
            .execution_options(synchronize_session="fetch")
        )

        row = PayrollSettings(
            personal_relief=snapshot.personal_relief,
            nssf_employee_rate=snapshot.nssf_employee_rate,
            nssf_employer_rate=snapshot.nssf_employer_rate,
            nssf_max_contribution=snapshot.nssf_max_contribution,
            shif_employee_rate=snapshot.shif_employee_rate,
            shif_employer_rate=snapshot.shif_employer_rate,
            ahl_employee_rate=snapshot.ahl_employee_rate,
            ahl_employer_rate=snapshot.ahl_employer_rate,
            paye_brackets=stored["paye_brackets"],
            shif_is_pretax=snapshot.shif_is_pretax,
            ahl_is_pretax=snapshot.ahl_is_pretax,
            effective_from=snapshot.effective_from,
            effective_to=snapshot.effective_to,
            is_active=True,
        )
        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)

        logger.info(
            "Activated payroll settings %s effective %s",
            row.settings_id,
            row.effective_from,
        )
        return row
