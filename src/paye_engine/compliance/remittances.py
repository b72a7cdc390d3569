"""Monthly remittance and annual (P9) aggregation of payroll results."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from paye_engine.calculators.errors import ValidationError
from paye_engine.calculators.types import ZERO, PayrollResult
from paye_engine.compliance.due_dates import (
    DueDateInfo,
    get_annual_due_date,
    get_monthly_due_date,
    parse_period,
)


@dataclass(frozen=True)
class AgencyRemittance:
    """Amount owed to one agency for a month."""

    agency: str
    employee_amount: Decimal
    employer_amount: Decimal

    @property
    def total(self) -> Decimal:
        return self.employee_amount + self.employer_amount


@dataclass(frozen=True)
class RemittanceSummary:
    """Everything the employer remits for one period."""

    period: str
    due: DueDateInfo
    agencies: tuple[AgencyRemittance, ...]
    employee_count: int
    total_gross: Decimal
    total_net_payroll: Decimal
    total_employer_cost: Decimal

    @property
    def total_government_remittances(self) -> Decimal:
        return sum((a.total for a in self.agencies), ZERO)

    def agency(self, name: str) -> AgencyRemittance:
        for remittance in self.agencies:
            if remittance.agency == name:
                return remittance
        raise KeyError(name)


def summarize_remittances(
    period: str,
    results: Iterable[PayrollResult],
    today: date | None = None,
) -> RemittanceSummary:
    """Aggregate one month of payroll results per agency.

    PAYE has no employer share; the other agencies carry both shares.
    """
    due = get_monthly_due_date(period, today)
    results = list(results)

    def total(attr: str) -> Decimal:
        return sum((getattr(r, attr) for r in results), ZERO)

    agencies = (
        AgencyRemittance("PAYE", total("paye_net"), ZERO),
        AgencyRemittance("NSSF", total("nssf_employee"), total("nssf_employer")),
        AgencyRemittance("SHIF", total("shif_employee"), total("shif_employer")),
        AgencyRemittance("AHL", total("ahl_employee"), total("ahl_employer")),
    )

    return RemittanceSummary(
        period=period,
        due=due,
        agencies=agencies,
        employee_count=len(results),
        total_gross=total("gross_pay"),
        total_net_payroll=total("net_pay"),
        total_employer_cost=total("total_employer_cost"),
    )


_ANNUAL_FIELDS = (
    "gross_pay",
    "basic_salary",
    "allowances_total",
    "nssf_employee",
    "nssf_employer",
    "shif_employee",
    "shif_employer",
    "ahl_employee",
    "ahl_employer",
    "helb",
    "voluntary_deductions_total",
    "paye_net",
    "net_pay",
    "total_employer_cost",
)


@dataclass(frozen=True)
class AnnualTaxSummary:
    """Annual totals for one employee (P9 form)."""

    tax_year: int
    employee_id: str | None
    months_count: int
    due: DueDateInfo
    gross_pay: Decimal
    basic_salary: Decimal
    allowances_total: Decimal
    nssf_employee: Decimal
    nssf_employer: Decimal
    shif_employee: Decimal
    shif_employer: Decimal
    ahl_employee: Decimal
    ahl_employer: Decimal
    helb: Decimal
    voluntary_deductions_total: Decimal
    paye_net: Decimal
    net_pay: Decimal
    total_employer_cost: Decimal


def summarize_tax_year(
    tax_year: int,
    monthly_results: Mapping[str, PayrollResult],
    employee_id: str | None = None,
    today: date | None = None,
) -> AnnualTaxSummary:
    """Aggregate up to twelve monthly results keyed by "YYYY-MM".

    Raises:
        ValidationError: If a period is malformed or outside the tax year.
    """
    due = get_annual_due_date(tax_year, today)
    for period in monthly_results:
        year, _ = parse_period(period)
        if year != tax_year:
            raise ValidationError(
                f"period {period} is outside tax year {tax_year}", field="period"
            )

    totals = {
        name: sum((getattr(r, name) for r in monthly_results.values()), ZERO)
        for name in _ANNUAL_FIELDS
    }
    return AnnualTaxSummary(
        tax_year=tax_year,
        employee_id=employee_id,
        months_count=len(monthly_results),
        due=due,
        **totals,
    )
