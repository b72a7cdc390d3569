"""Compliance due-date scheduling and remittance aggregation."""

from paye_engine.compliance.due_dates import (
    REMITTANCE_TYPES,
    DeadlineKind,
    DueDateInfo,
    RemittanceType,
    due_date_message,
    get_annual_due_date,
    get_monthly_due_date,
)
from paye_engine.compliance.remittances import (
    AgencyRemittance,
    AnnualTaxSummary,
    RemittanceSummary,
    summarize_remittances,
    summarize_tax_year,
)

__all__ = [
    "REMITTANCE_TYPES",
    "AgencyRemittance",
    "AnnualTaxSummary",
    "DeadlineKind",
    "DueDateInfo",
    "RemittanceSummary",
    "RemittanceType",
    "due_date_message",
    "get_annual_due_date",
    "get_monthly_due_date",
    "summarize_remittances",
    "summarize_tax_year",
]
