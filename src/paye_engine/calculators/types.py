"""Type definitions for the payroll calculation pipeline."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType
from typing import Any

from paye_engine.calculators.errors import ConfigurationGap, ValidationError

ZERO = Decimal("0")
ONE = Decimal("1")


def to_decimal(value: Any, field_name: str) -> Decimal:
    """Coerce a numeric value to Decimal, rejecting non-finite input."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"expected a number, got {value!r}", field=field_name)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(
            f"expected a number, got {value!r}", field=field_name
        ) from None
    if not amount.is_finite():
        raise ValidationError("must be a finite number", field=field_name)
    return amount


def canonical_decimal(value: Decimal) -> str:
    """Plain-notation string without trailing zeros ("2400.00" -> "2400").

    Used for fingerprints, so equal amounts hash the same whatever scale
    they were stored at.
    """
    text = format(value.normalize(), "f")
    return "0" if text in ("-0", "0") else text


def non_negative_amount(value: Any, field_name: str) -> Decimal:
    amount = to_decimal(value, field_name)
    if amount < 0:
        raise ValidationError(f"must not be negative, got {amount}", field=field_name)
    return amount


def fraction(value: Any, field_name: str) -> Decimal:
    rate = to_decimal(value, field_name)
    if rate < 0 or rate > ONE:
        raise ValidationError(
            f"must be a fraction between 0 and 1, got {rate}", field=field_name
        )
    return rate


def _amount_mapping(values: Any, field_name: str) -> Mapping[str, Decimal]:
    if values is None:
        values = {}
    if not isinstance(values, Mapping):
        raise ValidationError("expected a mapping of name to amount", field=field_name)
    return MappingProxyType(
        {
            str(name): non_negative_amount(amount, f"{field_name}.{name}")
            for name, amount in values.items()
        }
    )


class LineType(str, Enum):
    """Payslip line item types."""

    EARNING = "EARNING"
    DEDUCTION = "DEDUCTION"
    TAX = "TAX"
    EMPLOYER_CONTRIBUTION = "EMPLOYER_CONTRIBUTION"
    ROUNDING = "ROUNDING"


@dataclass(frozen=True)
class LineCandidate:
    """A payslip line item, signed per the builder conventions."""

    line_type: LineType
    code: str  # BASIC, ALLOWANCE:housing, NSSF, PAYE, ...
    amount: Decimal
    rate: Decimal | None = None
    explanation: str | None = None

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "line_type": self.line_type.value,
            "code": self.code,
            "rate": str(self.rate) if self.rate is not None else None,
            "amount": str(self.amount),
        }


@dataclass(frozen=True)
class PayeBracket:
    """One band of the PAYE ladder. ``max_amount=None`` means unbounded."""

    min_amount: Decimal
    max_amount: Decimal | None
    rate: Decimal  # As decimal, e.g., 0.25 for 25%

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "min_amount", non_negative_amount(self.min_amount, "paye_brackets.min")
        )
        if self.max_amount is not None:
            object.__setattr__(
                self,
                "max_amount",
                non_negative_amount(self.max_amount, "paye_brackets.max"),
            )
        object.__setattr__(self, "rate", fraction(self.rate, "paye_brackets.rate"))

    @property
    def is_unbounded(self) -> bool:
        return self.max_amount is None


def validate_brackets(brackets: Sequence[PayeBracket]) -> None:
    """Check that brackets partition [0, inf) in ascending order.

    Raises:
        ConfigurationGap: On an empty table, a gap, an overlap, an empty band,
            an unbounded band that is not last, or a missing unbounded band.
    """
    if not brackets:
        raise ConfigurationGap("bracket table is empty", ())

    if brackets[0].min_amount != ZERO:
        raise ConfigurationGap("first bracket must start at 0", (0,))

    for i, bracket in enumerate(brackets):
        if bracket.max_amount is not None and bracket.max_amount <= bracket.min_amount:
            raise ConfigurationGap("bracket max must be greater than its min", (i,))
        if i == 0:
            continue

        prev = brackets[i - 1]
        if prev.max_amount is None:
            raise ConfigurationGap("only the last bracket may be unbounded", (i - 1, i))
        if bracket.min_amount > prev.max_amount:
            raise ConfigurationGap(
                f"gap between {prev.max_amount} and {bracket.min_amount}", (i - 1, i)
            )
        if bracket.min_amount < prev.max_amount:
            raise ConfigurationGap(
                f"bracket starting at {bracket.min_amount} overlaps one ending at "
                f"{prev.max_amount}",
                (i - 1, i),
            )

    if brackets[-1].max_amount is not None:
        raise ConfigurationGap(
            "top bracket must be unbounded", (len(brackets) - 1,)
        )


@dataclass(frozen=True)
class CompensationInput:
    """Compensation inputs for one employee and one pay month.

    Numeric fields accept Decimal, int, float or numeric strings and are
    coerced on construction. Negative amounts are rejected, never clamped.
    """

    basic_salary: Decimal
    allowances: Mapping[str, Decimal] = field(default_factory=dict)
    bonuses: Decimal = ZERO
    overtime: Decimal = ZERO
    helb_amount: Decimal = ZERO
    voluntary_deductions: Mapping[str, Decimal] = field(default_factory=dict)
    employee_id: str | None = None

    def __post_init__(self) -> None:
        for name in ("basic_salary", "bonuses", "overtime", "helb_amount"):
            object.__setattr__(self, name, non_negative_amount(getattr(self, name), name))
        object.__setattr__(
            self, "allowances", _amount_mapping(self.allowances, "allowances")
        )
        object.__setattr__(
            self,
            "voluntary_deductions",
            _amount_mapping(self.voluntary_deductions, "voluntary_deductions"),
        )

    @property
    def allowances_total(self) -> Decimal:
        return sum(self.allowances.values(), ZERO)

    @property
    def voluntary_deductions_total(self) -> Decimal:
        return sum(self.voluntary_deductions.values(), ZERO)

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for fingerprinting."""
        return {
            "employee_id": self.employee_id,
            "basic_salary": canonical_decimal(self.basic_salary),
            "allowances": {
                k: canonical_decimal(v) for k, v in sorted(self.allowances.items())
            },
            "bonuses": canonical_decimal(self.bonuses),
            "overtime": canonical_decimal(self.overtime),
            "helb_amount": canonical_decimal(self.helb_amount),
            "voluntary_deductions": {
                k: canonical_decimal(v) for k, v in sorted(self.voluntary_deductions.items())
            },
        }


_RATE_FIELDS = (
    "nssf_employee_rate",
    "nssf_employer_rate",
    "shif_employee_rate",
    "shif_employer_rate",
    "ahl_employee_rate",
    "ahl_employer_rate",
)
_FLAG_FIELDS = ("is_active", "shif_is_pretax", "ahl_is_pretax")


@dataclass(frozen=True)
class RulesSnapshot:
    """Immutable statutory rules used by one computation.

    Validated once on construction. Which snapshot is "active" is decided by
    the storage layer; the calculator only ever receives a value.
    """

    personal_relief: Decimal
    nssf_employee_rate: Decimal
    nssf_employer_rate: Decimal
    nssf_max_contribution: Decimal
    shif_employee_rate: Decimal
    shif_employer_rate: Decimal
    ahl_employee_rate: Decimal
    ahl_employer_rate: Decimal
    paye_brackets: tuple[PayeBracket, ...]
    effective_from: date
    effective_to: date | None = None
    is_active: bool = True

    # Taxable-base policy: NSSF is always pre-tax, SHIF/AHL only when flagged
    shif_is_pretax: bool = False
    ahl_is_pretax: bool = False

    version_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "personal_relief",
            non_negative_amount(self.personal_relief, "personal_relief"),
        )
        object.__setattr__(
            self,
            "nssf_max_contribution",
            non_negative_amount(self.nssf_max_contribution, "nssf_max_contribution"),
        )
        for name in _RATE_FIELDS:
            object.__setattr__(self, name, fraction(getattr(self, name), name))
        for name in _FLAG_FIELDS:
            if not isinstance(getattr(self, name), bool):
                raise ValidationError(
                    f"expected true or false, got {getattr(self, name)!r}", field=name
                )

        brackets = tuple(self.paye_brackets)
        for i, bracket in enumerate(brackets):
            if not isinstance(bracket, PayeBracket):
                raise ValidationError(
                    f"entry {i} is not a PayeBracket", field="paye_brackets"
                )
        validate_brackets(brackets)
        object.__setattr__(self, "paye_brackets", brackets)

        if not isinstance(self.effective_from, date):
            raise ValidationError("expected a date", field="effective_from")
        if self.effective_to is not None and self.effective_to < self.effective_from:
            raise ValidationError(
                "must not be earlier than effective_from", field="effective_to"
            )

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict of the formula inputs for fingerprinting.

        Lifecycle fields are excluded: two versions with identical formulas
        produce identical results.
        """
        data: dict[str, Any] = {
            "personal_relief": canonical_decimal(self.personal_relief),
            "nssf_max_contribution": canonical_decimal(self.nssf_max_contribution),
            "shif_is_pretax": self.shif_is_pretax,
            "ahl_is_pretax": self.ahl_is_pretax,
            "paye_brackets": [
                {
                    "min": canonical_decimal(b.min_amount),
                    "max": (
                        canonical_decimal(b.max_amount)
                        if b.max_amount is not None
                        else None
                    ),
                    "rate": canonical_decimal(b.rate),
                }
                for b in self.paye_brackets
            ],
        }
        for name in _RATE_FIELDS:
            data[name] = canonical_decimal(getattr(self, name))
        return data


@dataclass(frozen=True)
class PayrollResult:
    """Net-pay breakdown for one employee and one month. Not persisted here."""

    gross_pay: Decimal
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
    total_deductions: Decimal
    net_pay: Decimal

    # Breakdown of the inputs as finalized line items
    basic_salary: Decimal
    allowances_total: Decimal
    bonuses: Decimal
    overtime: Decimal
    helb: Decimal
    voluntary_deductions_total: Decimal
    total_employer_cost: Decimal

    lines: tuple[LineCandidate, ...] = ()
    employee_id: str | None = None
    rules_version_id: str | None = None
    inputs_fingerprint: str = ""
    rules_fingerprint: str = ""

    @property
    def statutory_deductions(self) -> Decimal:
        """PAYE plus the employee share of NSSF, SHIF and AHL."""
        return self.paye_net + self.nssf_employee + self.shif_employee + self.ahl_employee
