"""Tests for employee identifier allocation."""

import pytest

from paye_engine.identifiers import (
    format_employee_id,
    next_employee_id,
    parse_employee_ordinal,
)


class TestEmployeeIdentifiers:
    def test_format_pads_to_three_digits(self):
        assert format_employee_id(1) == "EMP001"
        assert format_employee_id(42) == "EMP042"
        assert format_employee_id(1000) == "EMP1000"

    @pytest.mark.parametrize("ordinal", [0, -1, "1", True, 1.0])
    def test_format_rejects_non_positive_integers(self, ordinal):
        with pytest.raises(ValueError):
            format_employee_id(ordinal)

    def test_parse(self):
        assert parse_employee_ordinal("EMP007") == 7
        assert parse_employee_ordinal(" emp 042 ") == 42
        assert parse_employee_ordinal("X12") is None
        assert parse_employee_ordinal("") is None
        assert parse_employee_ordinal(None) is None

    def test_next_after_highest_existing(self):
        """Gaps are not reused."""
        assert next_employee_id(["EMP001", "EMP007", "junk", None]) == "EMP008"

    def test_next_respects_sequence(self):
        assert next_employee_id(["EMP003"], last_allocated=10) == "EMP011"

    def test_first_id(self):
        assert next_employee_id([]) == "EMP001"
