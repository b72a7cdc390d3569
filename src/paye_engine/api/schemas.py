"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from paye_engine.calculators.types import CompensationInput, LineType
from paye_engine.compliance.due_dates import DeadlineKind


# ============================================================================
# Rules / settings schemas
# ============================================================================


class BracketSchema(BaseModel):
    """One PAYE band. ``max`` omitted or null means unbounded."""

    model_config = ConfigDict(from_attributes=True)

    min: Decimal = Decimal("0")
    max: Decimal | None = None
    rate: Decimal


class RulesPayload(BaseModel):
    """Statutory rules as supplied by a client or stored row."""

    model_config = ConfigDict(from_attributes=True)

    personal_relief: Decimal
    nssf_employee_rate: Decimal
    nssf_employer_rate: Decimal
    nssf_max_contribution: Decimal
    shif_employee_rate: Decimal
    shif_employer_rate: Decimal
    ahl_employee_rate: Decimal
    ahl_employer_rate: Decimal
    paye_brackets: list[BracketSchema]
    shif_is_pretax: bool = False
    ahl_is_pretax: bool = False
    effective_from: date | None = None
    effective_to: date | None = None


class SettingsResponse(RulesPayload):
    """Stored settings version."""

    settings_id: UUID
    effective_from: date
    is_active: bool
    created_at: datetime


# ============================================================================
# Payroll computation schemas
# ============================================================================


class EmployeeBasics(BaseModel):
    """Employee fields the calculator needs."""

    employee_id: str | None = None
    basic_salary: Decimal
    helb_amount: Decimal = Decimal("0")


class CompensationPayload(BaseModel):
    """Compensation inputs for one employee-month."""

    employee: EmployeeBasics
    allowances: dict[str, Decimal] = Field(default_factory=dict)
    voluntary_deductions: dict[str, Decimal] = Field(default_factory=dict)
    bonuses: Decimal = Decimal("0")
    overtime: Decimal = Decimal("0")

    def to_input(self) -> CompensationInput:
        """Build the validated calculator input."""
        return CompensationInput(
            basic_salary=self.employee.basic_salary,
            allowances=self.allowances,
            bonuses=self.bonuses,
            overtime=self.overtime,
            helb_amount=self.employee.helb_amount,
            voluntary_deductions=self.voluntary_deductions,
            employee_id=self.employee.employee_id,
        )


class PreviewRequest(CompensationPayload):
    """Preview request; without inline rules the active settings are used."""

    rules: RulesPayload | None = None


class LineItemResponse(BaseModel):
    """Payslip line item."""

    model_config = ConfigDict(from_attributes=True)

    line_type: LineType
    code: str
    amount: Decimal
    rate: Decimal | None = None
    explanation: str | None = None


class PayrollResultResponse(BaseModel):
    """Net-pay breakdown."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: str | None = None
    gross_pay: Decimal
    basic_salary: Decimal
    allowances_total: Decimal
    bonuses: Decimal
    overtime: Decimal
    taxable_pay: Decimal
    paye_gross: Decimal
    personal_relief_applied: Decimal
    paye_net: Decimal
    nssf_employee: Decimal
    nssf_employer: Decimal
    shif_employee: Decimal
    shif_employer: Decimal
    ahl_employee: Decimal
    ahl_employer: Decimal
    helb: Decimal
    voluntary_deductions_total: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    total_employer_cost: Decimal
    lines: list[LineItemResponse]
    rules_version_id: str | None = None
    inputs_fingerprint: str
    rules_fingerprint: str


class PreviewResponse(BaseModel):
    """Preview response."""

    calculation_id: UUID
    data: PayrollResultResponse


# ============================================================================
# Compliance schemas
# ============================================================================


class DueDateResponse(BaseModel):
    """Deadline and urgency flags."""

    model_config = ConfigDict(from_attributes=True)

    kind: DeadlineKind
    period: str
    due_date: date
    formatted_due_date: str
    days_remaining: int
    is_overdue: bool
    is_due_soon: bool
    message: str


class RemittanceTypeResponse(BaseModel):
    """Monthly statutory remittance."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str
    due_rule: str


class RemittanceRequest(BaseModel):
    """Employees paid in one period."""

    period: str
    employees: list[CompensationPayload]
    rules: RulesPayload | None = None


class AgencyRemittanceResponse(BaseModel):
    """Amount owed to one agency."""

    model_config = ConfigDict(from_attributes=True)

    agency: str
    employee_amount: Decimal
    employer_amount: Decimal
    total: Decimal


class RemittanceSummaryResponse(BaseModel):
    """Monthly remittance summary."""

    model_config = ConfigDict(from_attributes=True)

    period: str
    due: DueDateResponse
    agencies: list[AgencyRemittanceResponse]
    employee_count: int
    total_gross: Decimal
    total_net_payroll: Decimal
    total_employer_cost: Decimal
    total_government_remittances: Decimal


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
