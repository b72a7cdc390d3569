"""Tests for line item builder."""

from decimal import Decimal

from paye_engine.calculators.line_builder import LineItemBuilder
from paye_engine.calculators.types import LineCandidate, LineType


class TestLineItemBuilder:
    """Test line item builder functionality."""

    def test_round_to_cents(self):
        """Test rounding to 2 decimal places."""
        assert LineItemBuilder.round_to_cents(Decimal("10.124")) == Decimal("10.12")

        # Half-up rounding
        assert LineItemBuilder.round_to_cents(Decimal("10.125")) == Decimal("10.13")
        assert LineItemBuilder.round_to_cents(Decimal("10.135")) == Decimal("10.14")
        assert LineItemBuilder.round_to_cents(Decimal("-10.125")) == Decimal("-10.13")

    def test_create_earning_line(self):
        """Test creating earning line (positive amount)."""
        line = LineItemBuilder.create_earning_line(
            "ALLOWANCE:housing", Decimal("10000.005"), "Housing allowance"
        )

        assert line.line_type == LineType.EARNING
        assert line.code == "ALLOWANCE:housing"
        assert line.amount == Decimal("10000.01")

    def test_create_deduction_line(self):
        """Test creating deduction line (negative amount)."""
        line = LineItemBuilder.create_deduction_line(
            "NSSF", Decimal("3000.00"), rate=Decimal("0.06"), explanation="NSSF (Employee)"
        )

        assert line.line_type == LineType.DEDUCTION
        assert line.amount == Decimal("-3000.00")
        assert line.rate == Decimal("0.06")

    def test_create_tax_line(self):
        """Test creating employee tax line (negative amount)."""
        line = LineItemBuilder.create_tax_line(Decimal("10983.35"))

        assert line.line_type == LineType.TAX
        assert line.code == "PAYE"
        assert line.amount == Decimal("-10983.35")

    def test_create_employer_contribution_line(self):
        """Test creating employer contribution line (positive amount)."""
        line = LineItemBuilder.create_employer_contribution_line(
            "AHL_EMPLOYER", Decimal("975.00"), Decimal("0.015")
        )

        assert line.line_type == LineType.EMPLOYER_CONTRIBUTION
        assert line.amount == Decimal("975.00")

    def test_calculate_net_from_lines(self):
        """Test calculating net pay from line items."""
        lines = [
            LineItemBuilder.create_earning_line("BASIC", Decimal("50000.00")),
            LineItemBuilder.create_tax_line(Decimal("5000.00")),
            LineItemBuilder.create_deduction_line("NSSF", Decimal("3000.00")),
            LineItemBuilder.create_employer_contribution_line(
                "NSSF_EMPLOYER", Decimal("3000.00")
            ),
        ]

        # Employer contribution excluded
        assert LineItemBuilder.calculate_net_from_lines(lines) == Decimal("42000.00")

    def test_calculate_gross_from_lines(self):
        lines = [
            LineItemBuilder.create_earning_line("BASIC", Decimal("50000.00")),
            LineItemBuilder.create_earning_line("BONUS", Decimal("2500.50")),
            LineItemBuilder.create_deduction_line("NSSF", Decimal("3000.00")),
        ]

        assert LineItemBuilder.calculate_gross_from_lines(lines) == Decimal("52500.50")

    def test_reconcile_rounding_no_drift(self):
        """No rounding line when net already matches."""
        lines = [LineItemBuilder.create_earning_line("BASIC", Decimal("100.00"))]

        assert LineItemBuilder.reconcile_rounding(lines, Decimal("100.00")) == lines

    def test_reconcile_rounding_with_drift(self):
        """Rounding line added for penny drift."""
        lines = [LineItemBuilder.create_earning_line("BASIC", Decimal("100.00"))]

        reconciled = LineItemBuilder.reconcile_rounding(lines, Decimal("100.01"))

        assert len(reconciled) == 2
        assert reconciled[-1].line_type == LineType.ROUNDING
        assert reconciled[-1].amount == Decimal("0.01")
        assert len(lines) == 1

    def test_validate_line_signs(self):
        """Test sign validation catches wrong-signed lines."""
        good = [
            LineItemBuilder.create_earning_line("BASIC", Decimal("100")),
            LineItemBuilder.create_deduction_line("NSSF", Decimal("6")),
        ]
        assert LineItemBuilder.validate_line_signs(good) == []

        bad = [
            LineCandidate(line_type=LineType.EARNING, code="BASIC", amount=Decimal("-1")),
            LineCandidate(line_type=LineType.TAX, code="PAYE", amount=Decimal("1")),
        ]
        errors = LineItemBuilder.validate_line_signs(bad)
        assert len(errors) == 2
        assert "Line 0" in errors[0]
        assert "Line 1" in errors[1]

    def test_sum_by_type(self):
        lines = [
            LineItemBuilder.create_earning_line("BASIC", Decimal("100")),
            LineItemBuilder.create_earning_line("BONUS", Decimal("50")),
            LineItemBuilder.create_deduction_line("AHL", Decimal("2.25")),
        ]

        totals = LineItemBuilder.sum_by_type(lines)

        assert totals[LineType.EARNING] == Decimal("150.00")
        assert totals[LineType.DEDUCTION] == Decimal("-2.25")
        assert totals[LineType.ROUNDING] == 0

    def test_canonical_dict(self):
        line = LineItemBuilder.create_deduction_line("SHIF", Decimal("1787.5"), Decimal("0.0275"))

        assert line.to_canonical_dict() == {
            "line_type": "DEDUCTION",
            "code": "SHIF",
            "rate": "0.0275",
            "amount": "-1787.50",
        }
