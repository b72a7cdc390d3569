"""Pytest fixtures for payroll engine tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from paye_engine.calculators.rules import default_rules
from paye_engine.calculators.types import CompensationInput, RulesSnapshot


@pytest.fixture
def statutory_rules() -> RulesSnapshot:
    """Default statutory schedule."""
    return default_rules()


@pytest.fixture
def typical_employee() -> CompensationInput:
    """Basic 50,000 with housing and transport allowances."""
    return CompensationInput(
        basic_salary=Decimal("50000"),
        allowances={"housing": Decimal("10000"), "transport": Decimal("5000")},
        employee_id="EMP001",
    )
