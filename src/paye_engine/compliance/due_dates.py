"""Statutory filing deadlines.

- Monthly PAYE, NSSF, SHIF, AHL: due by the 9th of the following month
- Annual P9/P10 returns: due by the last day of February after the tax year
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum

from paye_engine.calculators.errors import ValidationError

MONTHLY_DUE_DAY = 9
MONTHLY_DUE_SOON_DAYS = 7
ANNUAL_DUE_SOON_DAYS = 30
LAST_PERIOD = (9999, 11)

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


class DeadlineKind(str, Enum):
    """Deadline classes."""

    MONTHLY = "monthly"
    ANNUAL = "annual"


@dataclass(frozen=True)
class RemittanceType:
    """A statutory remittance paid monthly."""

    name: str
    description: str
    due_rule: str


REMITTANCE_TYPES: tuple[RemittanceType, ...] = (
    RemittanceType("PAYE", "Pay As You Earn Tax", "9th of following month"),
    RemittanceType("NSSF", "National Social Security Fund", "9th of following month"),
    RemittanceType(
        "SHIF",
        "Social Health Insurance Fund (formerly NHIF)",
        "9th of following month",
    ),
    RemittanceType("AHL", "Affordable Housing Levy", "9th of following month"),
)


@dataclass(frozen=True)
class DueDateInfo:
    """Deadline and urgency as seen from a given day."""

    kind: DeadlineKind
    period: str  # "YYYY-MM" or "YYYY"
    due_date: date
    days_remaining: int  # negative once overdue
    is_overdue: bool
    is_due_soon: bool

    @property
    def formatted_due_date(self) -> str:
        """Due date as "9 February 2025"."""
        return f"{self.due_date.day} {self.due_date:%B %Y}"

    @property
    def message(self) -> str:
        return due_date_message(self)


def parse_period(period: str) -> tuple[int, int]:
    """Parse a "YYYY-MM" remittance period into (year, month).

    Raises:
        ValidationError: If the period is malformed.
    """
    match = _PERIOD_RE.match(period) if isinstance(period, str) else None
    if match is None:
        raise ValidationError(f"expected YYYY-MM, got {period!r}", field="period")

    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(f"month must be 01-12, got {period!r}", field="period")
    if year < 1:
        raise ValidationError(f"year must be positive, got {period!r}", field="period")
    if (year, month) > LAST_PERIOD:
        # Its deadline would fall in year 10000
        raise ValidationError(f"out of range: {period!r}", field="period")
    return year, month


def _validate_tax_year(tax_year: int) -> int:
    if isinstance(tax_year, bool) or not isinstance(tax_year, int):
        raise ValidationError(f"expected an integer year, got {tax_year!r}", field="tax_year")
    if not 1 <= tax_year <= 9998:
        raise ValidationError(f"out of range: {tax_year}", field="tax_year")
    return tax_year


def _build_info(
    kind: DeadlineKind, period: str, due: date, today: date | None, due_soon_days: int
) -> DueDateInfo:
    # Calendar dates carry no time part, so the delta is whole days
    days_remaining = (due - (today or date.today())).days
    return DueDateInfo(
        kind=kind,
        period=period,
        due_date=due,
        days_remaining=days_remaining,
        is_overdue=days_remaining < 0,
        is_due_soon=0 <= days_remaining <= due_soon_days,
    )


def monthly_due_date(period: str) -> date:
    """Return the remittance deadline for a "YYYY-MM" period."""
    year, month = parse_period(period)
    if month == 12:
        return date(year + 1, 1, MONTHLY_DUE_DAY)
    return date(year, month + 1, MONTHLY_DUE_DAY)


def annual_due_date(tax_year: int) -> date:
    """Return the P9/P10 deadline: last day of February of the next year."""
    due_year = _validate_tax_year(tax_year) + 1
    return date(due_year, 2, calendar.monthrange(due_year, 2)[1])


def get_monthly_due_date(period: str, today: date | None = None) -> DueDateInfo:
    """Deadline info for the monthly PAYE/NSSF/SHIF/AHL remittance.

    Due soon within 7 days of the deadline.
    """
    return _build_info(
        DeadlineKind.MONTHLY,
        period,
        monthly_due_date(period),
        today,
        MONTHLY_DUE_SOON_DAYS,
    )


def get_annual_due_date(tax_year: int, today: date | None = None) -> DueDateInfo:
    """Deadline info for the annual P9/P10 return.

    Due soon within 30 days of the deadline.
    """
    due = annual_due_date(tax_year)
    return _build_info(
        DeadlineKind.ANNUAL, str(tax_year), due, today, ANNUAL_DUE_SOON_DAYS
    )


def _days(n: int) -> str:
    return f"{n} day{'' if n == 1 else 's'}"


def due_date_message(info: DueDateInfo) -> str:
    """Human-readable status for a due-date badge.

    Urgency is carried by ``is_due_soon``; the wording only distinguishes
    overdue, due today and due later.
    """
    if info.is_overdue:
        return f"Overdue by {_days(abs(info.days_remaining))}"
    if info.days_remaining == 0:
        return "Due today"
    return f"Due in {_days(info.days_remaining)}"
