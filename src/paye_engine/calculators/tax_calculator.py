"""PAYE ladder and statutory contribution formulas."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from paye_engine.calculators.line_builder import LineItemBuilder
from paye_engine.calculators.types import ZERO, PayeBracket


class TaxCalculator:
    """Stateless statutory formulas.

    Every method returns an amount already rounded to cents, so callers can
    treat the result as a finalized line item. Intermediate products are kept
    at full precision until that point.
    """

    @staticmethod
    def calculate_progressive_tax(
        taxable_pay: Decimal, brackets: Sequence[PayeBracket]
    ) -> Decimal:
        """Evaluate taxable pay against a marginal-rate ladder.

        The portion of taxable pay inside ``[min, max]`` of each band is taxed
        at that band's rate. Pay exactly equal to a band's max lies wholly in
        that band. Brackets are assumed validated (contiguous, ascending,
        unbounded top band).
        """
        if taxable_pay <= 0:
            return ZERO

        total_tax = ZERO
        for bracket in brackets:
            if taxable_pay <= bracket.min_amount:
                break

            upper = taxable_pay
            if bracket.max_amount is not None:
                upper = min(taxable_pay, bracket.max_amount)

            total_tax += (upper - bracket.min_amount) * bracket.rate

        return LineItemBuilder.round_to_cents(total_tax)

    @staticmethod
    def apply_personal_relief(
        paye_gross: Decimal, personal_relief: Decimal
    ) -> tuple[Decimal, Decimal]:
        """Apply the flat relief credit.

        Returns (relief_applied, paye_net). Relief never takes tax below
        zero; the unused part is forfeited.
        """
        applied = min(personal_relief, max(paye_gross, ZERO))
        return (
            LineItemBuilder.round_to_cents(applied),
            LineItemBuilder.round_to_cents(max(ZERO, paye_gross - personal_relief)),
        )

    @staticmethod
    def calculate_capped_contribution(
        base: Decimal, rate: Decimal, cap: Decimal
    ) -> Decimal:
        """Calculate a rate-based contribution limited to ``cap`` (e.g., NSSF)."""
        if base <= 0:
            return ZERO
        return LineItemBuilder.round_to_cents(min(base * rate, cap))

    @staticmethod
    def calculate_flat_levy(base: Decimal, rate: Decimal) -> Decimal:
        """Calculate an uncapped flat-rate levy (e.g., SHIF, AHL)."""
        if base <= 0:
            return ZERO
        return LineItemBuilder.round_to_cents(base * rate)
