"""Payroll calculation engine."""

from paye_engine.calculators.engine import PayrollEngine, compute_payroll
from paye_engine.calculators.errors import ConfigurationGap, ValidationError
from paye_engine.calculators.line_builder import LineItemBuilder
from paye_engine.calculators.rules import (
    default_rules,
    load_rules_snapshot,
    snapshot_to_payload,
)
from paye_engine.calculators.tax_calculator import TaxCalculator
from paye_engine.calculators.types import (
    CompensationInput,
    LineCandidate,
    LineType,
    PayeBracket,
    PayrollResult,
    RulesSnapshot,
)

__all__ = [
    "CompensationInput",
    "ConfigurationGap",
    "LineCandidate",
    "LineItemBuilder",
    "LineType",
    "PayeBracket",
    "PayrollEngine",
    "PayrollResult",
    "RulesSnapshot",
    "TaxCalculator",
    "ValidationError",
    "compute_payroll",
    "default_rules",
    "load_rules_snapshot",
    "snapshot_to_payload",
]
