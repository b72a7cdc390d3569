"""Payslip line item builder."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from paye_engine.calculators.types import ZERO, LineCandidate, LineType


class LineItemBuilder:
    """Builds signed payslip line items.

    Sign conventions:
    - EARNING: positive
    - DEDUCTION (employee): negative
    - TAX (employee PAYE): negative
    - EMPLOYER_CONTRIBUTION: positive (liability, not part of net)
    - ROUNDING: can be positive or negative

    Rounding:
    - KES to 2 decimals, half-up, when a line is finalized
    - Explicit rounding line if penny drift exists
    """

    OUTPUT_PRECISION = Decimal("0.01")

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places (cents)."""
        return amount.quantize(LineItemBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def create_earning_line(
        code: str,
        amount: Decimal,
        explanation: str | None = None,
    ) -> LineCandidate:
        """Create an earning line item (positive amount)."""
        return LineCandidate(
            line_type=LineType.EARNING,
            code=code,
            amount=LineItemBuilder.round_to_cents(abs(amount)),
            explanation=explanation,
        )

    @staticmethod
    def create_deduction_line(
        code: str,
        amount: Decimal,
        rate: Decimal | None = None,
        explanation: str | None = None,
    ) -> LineCandidate:
        """Create an employee deduction line item (negative amount)."""
        return LineCandidate(
            line_type=LineType.DEDUCTION,
            code=code,
            amount=-LineItemBuilder.round_to_cents(abs(amount)),
            rate=rate,
            explanation=explanation,
        )

    @staticmethod
    def create_tax_line(
        amount: Decimal,
        code: str = "PAYE",
        explanation: str | None = None,
    ) -> LineCandidate:
        """Create an employee tax line item (negative amount)."""
        return LineCandidate(
            line_type=LineType.TAX,
            code=code,
            amount=-LineItemBuilder.round_to_cents(abs(amount)),
            explanation=explanation,
        )

    @staticmethod
    def create_employer_contribution_line(
        code: str,
        amount: Decimal,
        rate: Decimal | None = None,
        explanation: str | None = None,
    ) -> LineCandidate:
        """Create an employer contribution line item (positive amount, liability)."""
        return LineCandidate(
            line_type=LineType.EMPLOYER_CONTRIBUTION,
            code=code,
            amount=LineItemBuilder.round_to_cents(abs(amount)),
            rate=rate,
            explanation=explanation,
        )

    @staticmethod
    def create_rounding_line(amount: Decimal) -> LineCandidate:
        """Create a rounding adjustment line item.

        Amount can be positive or negative to reconcile penny drift.
        """
        return LineCandidate(
            line_type=LineType.ROUNDING,
            code="ROUNDING",
            amount=LineItemBuilder.round_to_cents(amount),
            explanation="Rounding adjustment",
        )

    @staticmethod
    def calculate_net_from_lines(lines: list[LineCandidate]) -> Decimal:
        """Calculate net pay from line items.

        NET = Σ(EARNING) + Σ(DEDUCTION) + Σ(TAX) + Σ(ROUNDING)

        EMPLOYER_CONTRIBUTION is excluded (it is a liability).
        """
        net = ZERO
        for line in lines:
            if line.line_type != LineType.EMPLOYER_CONTRIBUTION:
                net += line.amount
        return LineItemBuilder.round_to_cents(net)

    @staticmethod
    def calculate_gross_from_lines(lines: list[LineCandidate]) -> Decimal:
        """Calculate gross pay from line items (Σ EARNING)."""
        gross = ZERO
        for line in lines:
            if line.line_type == LineType.EARNING:
                gross += line.amount
        return LineItemBuilder.round_to_cents(gross)

    @staticmethod
    def reconcile_rounding(
        lines: list[LineCandidate], expected_net: Decimal
    ) -> list[LineCandidate]:
        """Add rounding adjustment line if needed to reconcile net.

        Compares calculated net to expected net and adds adjustment line
        if there's penny drift. Does not modify existing lines.
        """
        calculated_net = LineItemBuilder.calculate_net_from_lines(lines)
        diff = expected_net - calculated_net

        if diff == 0:
            return lines

        return lines + [LineItemBuilder.create_rounding_line(diff)]

    @staticmethod
    def validate_line_signs(lines: list[LineCandidate]) -> list[str]:
        """Validate that all line items have correct signs.

        Returns list of error messages (empty if all valid).
        """
        errors: list[str] = []

        for i, line in enumerate(lines):
            if line.line_type in (LineType.EARNING, LineType.EMPLOYER_CONTRIBUTION):
                if line.amount < 0:
                    errors.append(
                        f"Line {i} ({line.line_type.value}) has negative amount {line.amount}, expected positive"
                    )
            elif line.line_type in (LineType.DEDUCTION, LineType.TAX):
                if line.amount > 0:
                    errors.append(
                        f"Line {i} ({line.line_type.value}) has positive amount {line.amount}, expected negative"
                    )

        return errors

    @staticmethod
    def sum_by_type(lines: list[LineCandidate]) -> dict[LineType, Decimal]:
        """Sum line amounts by type."""
        totals: dict[LineType, Decimal] = {lt: ZERO for lt in LineType}
        for line in lines:
            totals[line.line_type] += line.amount
        return totals
