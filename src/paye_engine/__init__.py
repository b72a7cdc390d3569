"""Kenyan payroll computation and compliance scheduling engine."""

__version__ = "0.1.0"

from paye_engine.calculators import (  # noqa: E402
    CompensationInput,
    ConfigurationGap,
    PayrollResult,
    RulesSnapshot,
    ValidationError,
    compute_payroll,
    default_rules,
)
from paye_engine.compliance import (  # noqa: E402
    DueDateInfo,
    get_annual_due_date,
    get_monthly_due_date,
)

__all__ = [
    "CompensationInput",
    "ConfigurationGap",
    "DueDateInfo",
    "PayrollResult",
    "RulesSnapshot",
    "ValidationError",
    "compute_payroll",
    "default_rules",
    "get_annual_due_date",
    "get_monthly_due_date",
]
