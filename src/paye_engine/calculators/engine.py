"""Payroll calculation engine - main orchestrator."""

from __future__ import annotations

import hashlib
import json
import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

from paye_engine import __version__
from paye_engine.calculators.errors import ValidationError
from paye_engine.calculators.line_builder import LineItemBuilder
from paye_engine.calculators.tax_calculator import TaxCalculator
from paye_engine.calculators.types import (
    ZERO,
    CompensationInput,
    LineCandidate,
    PayrollResult,
    RulesSnapshot,
)

logger = logging.getLogger(__name__)


class PayrollEngine:
    """Turns compensation inputs and a rules snapshot into a net-pay breakdown.

    Calculation pipeline (stable order):
    1) Gross = basic + allowances + bonuses + overtime
    2) Pensionable pay = basic only
    3) NSSF employee/employer, each capped at the maximum contribution
    4) SHIF employee/employer on gross
    5) AHL employee/employer on gross
    6) Taxable pay = gross - NSSF employee (- SHIF/AHL when flagged pre-tax),
       floored at zero
    7) PAYE on the bracket ladder
    8) Personal relief, floored at zero tax
    9) Total deductions
    10) Net pay (reported as-is, even when negative)

    The engine holds no mutable state; one instance may serve any number of
    concurrent callers.
    """

    def __init__(self, engine_version: str = __version__):
        self.engine_version = engine_version
        self.tax_calculator = TaxCalculator()

    def compute(
        self, compensation: CompensationInput, rules: RulesSnapshot
    ) -> PayrollResult:
        """Compute the payroll breakdown for one employee-month.

        Raises:
            ValidationError: If the arguments are not constructed inputs.
        """
        if not isinstance(compensation, CompensationInput):
            raise ValidationError("expected a CompensationInput", field="compensation")
        if not isinstance(rules, RulesSnapshot):
            raise ValidationError("expected a RulesSnapshot", field="rules")

        round_to_cents = LineItemBuilder.round_to_cents
        calc = self.tax_calculator

        # 1) Gross
        gross = round_to_cents(
            compensation.basic_salary
            + compensation.allowances_total
            + compensation.bonuses
            + compensation.overtime
        )

        # 2-3) NSSF on pensionable pay
        pensionable = compensation.basic_salary
        nssf_employee = calc.calculate_capped_contribution(
            pensionable, rules.nssf_employee_rate, rules.nssf_max_contribution
        )
        nssf_employer = calc.calculate_capped_contribution(
            pensionable, rules.nssf_employer_rate, rules.nssf_max_contribution
        )

        # 4-5) Levies on gross
        shif_employee = calc.calculate_flat_levy(gross, rules.shif_employee_rate)
        shif_employer = calc.calculate_flat_levy(gross, rules.shif_employer_rate)
        ahl_employee = calc.calculate_flat_levy(gross, rules.ahl_employee_rate)
        ahl_employer = calc.calculate_flat_levy(gross, rules.ahl_employer_rate)

        # 6) Taxable base
        taxable = gross - nssf_employee
        if rules.shif_is_pretax:
            taxable -= shif_employee
        if rules.ahl_is_pretax:
            taxable -= ahl_employee
        taxable = max(taxable, ZERO)

        # 7-8) PAYE
        paye_gross = calc.calculate_progressive_tax(taxable, rules.paye_brackets)
        relief_applied, paye_net = calc.apply_personal_relief(
            paye_gross, rules.personal_relief
        )

        # 9-10) Totals
        helb = round_to_cents(compensation.helb_amount)
        voluntary = {
            name: round_to_cents(amount)
            for name, amount in compensation.voluntary_deductions.items()
        }
        voluntary_total = sum(voluntary.values(), ZERO)

        total_deductions = (
            paye_net + nssf_employee + shif_employee + ahl_employee + helb + voluntary_total
        )
        net = gross - total_deductions

        lines = self._build_lines(
            compensation,
            rules,
            helb=helb,
            voluntary=voluntary,
            paye_net=paye_net,
            nssf=(nssf_employee, nssf_employer),
            shif=(shif_employee, shif_employer),
            ahl=(ahl_employee, ahl_employer),
        )
        lines = LineItemBuilder.reconcile_rounding(lines, net)

        result = PayrollResult(
            gross_pay=gross,
            taxable_pay=taxable,
            paye_gross=paye_gross,
            personal_relief_applied=relief_applied,
            paye_net=paye_net,
            nssf_employee=nssf_employee,
            nssf_employer=nssf_employer,
            shif_employee=shif_employee,
            shif_employer=shif_employer,
            ahl_employee=ahl_employee,
            ahl_employer=ahl_employer,
            total_deductions=total_deductions,
            net_pay=net,
            basic_salary=round_to_cents(compensation.basic_salary),
            allowances_total=round_to_cents(compensation.allowances_total),
            bonuses=round_to_cents(compensation.bonuses),
            overtime=round_to_cents(compensation.overtime),
            helb=helb,
            voluntary_deductions_total=voluntary_total,
            total_employer_cost=gross + nssf_employer + shif_employer + ahl_employer,
            lines=tuple(lines),
            employee_id=compensation.employee_id,
            rules_version_id=rules.version_id,
            inputs_fingerprint=self._compute_inputs_fingerprint(
                compensation.to_canonical_dict()
            ),
            rules_fingerprint=self._compute_rules_fingerprint(rules.to_canonical_dict()),
        )

        logger.debug(
            "Computed payroll employee=%s gross=%s net=%s rules_version=%s",
            compensation.employee_id,
            gross,
            net,
            rules.version_id,
        )
        return result

    def _build_lines(
        self,
        compensation: CompensationInput,
        rules: RulesSnapshot,
        *,
        helb: Decimal,
        voluntary: dict[str, Decimal],
        paye_net: Decimal,
        nssf: tuple[Decimal, Decimal],
        shif: tuple[Decimal, Decimal],
        ahl: tuple[Decimal, Decimal],
    ) -> list[LineCandidate]:
        """Build payslip lines in display order."""
        builder = LineItemBuilder
        lines = [
            builder.create_earning_line("BASIC", compensation.basic_salary, "Basic salary")
        ]
        for name, amount in compensation.allowances.items():
            if amount > 0:
                lines.append(
                    builder.create_earning_line(
                        f"ALLOWANCE:{name}", amount, f"{name.replace('_', ' ').title()} allowance"
                    )
                )
        if compensation.bonuses > 0:
            lines.append(builder.create_earning_line("BONUS", compensation.bonuses, "Bonuses"))
        if compensation.overtime > 0:
            lines.append(
                builder.create_earning_line("OVERTIME", compensation.overtime, "Overtime")
            )

        lines.append(builder.create_tax_line(paye_net, explanation="PAYE after personal relief"))
        lines.append(
            builder.create_deduction_line(
                "NSSF", nssf[0], rules.nssf_employee_rate, "NSSF (Employee)"
            )
        )
        lines.append(
            builder.create_deduction_line(
                "SHIF", shif[0], rules.shif_employee_rate, "SHIF (Employee)"
            )
        )
        lines.append(
            builder.create_deduction_line(
                "AHL", ahl[0], rules.ahl_employee_rate, "Affordable Housing Levy (Employee)"
            )
        )
        if helb > 0:
            lines.append(builder.create_deduction_line("HELB", helb, explanation="HELB loan"))
        for name, amount in voluntary.items():
            if amount > 0:
                lines.append(
                    builder.create_deduction_line(
                        f"VOLUNTARY:{name}", amount, explanation=name.replace("_", " ").title()
                    )
                )

        lines.append(
            builder.create_employer_contribution_line(
                "NSSF_EMPLOYER", nssf[1], rules.nssf_employer_rate, "NSSF (Employer)"
            )
        )
        lines.append(
            builder.create_employer_contribution_line(
                "SHIF_EMPLOYER", shif[1], rules.shif_employer_rate, "SHIF (Employer)"
            )
        )
        lines.append(
            builder.create_employer_contribution_line(
                "AHL_EMPLOYER",
                ahl[1],
                rules.ahl_employer_rate,
                "Affordable Housing Levy (Employer)",
            )
        )
        return lines

    def generate_calculation_id(self, result: PayrollResult) -> UUID:
        """Generate deterministic calculation ID for a result."""
        data = {
            "employee_id": result.employee_id,
            "engine_version": self.engine_version,
            "inputs_fingerprint": result.inputs_fingerprint,
            "rules_fingerprint": result.rules_fingerprint,
        }
        json_str = json.dumps(data, sort_keys=True)
        hash_bytes = hashlib.sha256(json_str.encode()).digest()
        return UUID(bytes=hash_bytes[:16])

    def _compute_inputs_fingerprint(self, inputs_data: dict[str, Any]) -> str:
        """Compute fingerprint of all inputs used in calculation."""
        json_str = json.dumps(inputs_data, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    def _compute_rules_fingerprint(self, rules_data: dict[str, Any]) -> str:
        """Compute fingerprint of the statutory formula inputs."""
        json_str = json.dumps(rules_data, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]


_default_engine = PayrollEngine()


def compute_payroll(
    compensation: CompensationInput, rules: RulesSnapshot
) -> PayrollResult:
    """Compute a payroll breakdown with the default engine."""
    return _default_engine.compute(compensation, rules)
