"""Tests for rules snapshot validation and loading."""

from datetime import date
from decimal import Decimal

import pytest

from paye_engine.calculators.errors import ConfigurationGap, ValidationError
from paye_engine.calculators.rules import (
    default_rules,
    load_rules_snapshot,
    snapshot_to_payload,
)
from paye_engine.calculators.types import PayeBracket, validate_brackets


def bracket(lo, hi, rate="0.1") -> PayeBracket:
    return PayeBracket(Decimal(lo), Decimal(hi) if hi is not None else None, Decimal(rate))


def payload(**overrides):
    data = snapshot_to_payload(default_rules())
    data.update(overrides)
    return data


class TestBracketValidation:
    """Bracket tables must partition [0, inf) in ascending order."""

    def test_statutory_schedule_is_valid(self):
        validate_brackets(default_rules().paye_brackets)

    def test_single_unbounded_band_is_valid(self):
        validate_brackets([bracket("0", None, "0.3")])

    def test_gap_reports_both_indices(self):
        with pytest.raises(ConfigurationGap) as exc_info:
            validate_brackets([bracket("0", "1000"), bracket("1500", None)])
        assert exc_info.value.indices == (0, 1)
        assert exc_info.value.field == "paye_brackets"

    def test_overlap_reports_both_indices(self):
        with pytest.raises(ConfigurationGap) as exc_info:
            validate_brackets(
                [bracket("0", "1000"), bracket("1000", "2000"), bracket("1800", None)]
            )
        assert exc_info.value.indices == (1, 2)

    def test_out_of_order_table_is_rejected(self):
        """Brackets are not sorted on the caller's behalf."""
        with pytest.raises(ConfigurationGap) as exc_info:
            validate_brackets(
                [bracket("0", "1000"), bracket("2000", None), bracket("1000", "2000")]
            )
        assert exc_info.value.indices == (0, 1)

    def test_missing_unbounded_top_band(self):
        with pytest.raises(ConfigurationGap) as exc_info:
            validate_brackets([bracket("0", "1000"), bracket("1000", "2000")])
        assert exc_info.value.indices == (1,)

    def test_unbounded_band_not_last(self):
        with pytest.raises(ConfigurationGap) as exc_info:
            validate_brackets([bracket("0", None), bracket("1000", None)])
        assert exc_info.value.indices == (0, 1)

    def test_first_band_must_start_at_zero(self):
        with pytest.raises(ConfigurationGap) as exc_info:
            validate_brackets([bracket("100", None)])
        assert exc_info.value.indices == (0,)

    def test_empty_band(self):
        with pytest.raises(ConfigurationGap) as exc_info:
            validate_brackets([bracket("0", "0"), bracket("0", None)])
        assert exc_info.value.indices == (0,)

    def test_empty_table(self):
        with pytest.raises(ConfigurationGap) as exc_info:
            validate_brackets([])
        assert exc_info.value.indices == ()

    def test_configuration_gap_is_a_validation_error(self):
        error = ConfigurationGap("gap", (2, 3))
        assert isinstance(error, ValidationError)
        assert error.code == "CONFIGURATION_GAP"
        assert error.to_context() == {"field": "paye_brackets", "indices": [2, 3]}
        assert "(brackets 2, 3)" in str(error)


class TestRulesSnapshot:
    """Snapshot construction."""

    def test_invalid_brackets_rejected_at_construction(self):
        with pytest.raises(ConfigurationGap):
            load_rules_snapshot(
                payload(paye_brackets=[{"min": 0, "max": 1000, "rate": 0.1}])
            )

    @pytest.mark.parametrize(
        "field,value",
        [
            ("nssf_employee_rate", "-0.01"),
            ("shif_employee_rate", "1.5"),
            ("ahl_employer_rate", "abc"),
            ("personal_relief", "-1"),
            ("nssf_max_contribution", "-4320"),
        ],
    )
    def test_out_of_range_values(self, field, value):
        with pytest.raises(ValidationError) as exc_info:
            load_rules_snapshot(payload(**{field: value}))
        assert not isinstance(exc_info.value, ConfigurationGap)
        assert exc_info.value.field == field

    def test_negative_bracket_rate(self):
        with pytest.raises(ValidationError) as exc_info:
            bracket("0", None, "-0.1")
        assert exc_info.value.field == "paye_brackets.rate"

    def test_effective_to_before_effective_from(self):
        with pytest.raises(ValidationError) as exc_info:
            load_rules_snapshot(
                payload(effective_from="2025-01-01", effective_to="2024-12-31")
            )
        assert exc_info.value.field == "effective_to"

    def test_snapshot_is_frozen(self, statutory_rules):
        with pytest.raises(AttributeError):
            statutory_rules.personal_relief = Decimal("0")


class TestLoadRulesSnapshot:
    """Loading stored settings documents."""

    def test_canonical_form_ignores_scale(self):
        """2400 and 2400.00 fingerprint the same."""
        padded = payload(
            personal_relief="2400.00",
            shif_employee_rate="0.027500",
            paye_brackets=[
                {"min": "0.00", "max": "24000.00", "rate": "0.100000"},
                {"min": "24000", "max": None, "rate": "0.25"},
            ],
        )
        plain = payload(
            paye_brackets=[
                {"min": 0, "max": 24000, "rate": "0.1"},
                {"min": 24000, "max": None, "rate": "0.25"},
            ]
        )

        canonical = load_rules_snapshot(padded).to_canonical_dict()
        assert canonical == load_rules_snapshot(plain).to_canonical_dict()
        assert canonical["personal_relief"] == "2400"
        assert canonical["shif_employee_rate"] == "0.0275"

    def test_round_trip_preserves_formula(self, statutory_rules):
        loaded = load_rules_snapshot(snapshot_to_payload(statutory_rules))
        assert loaded.to_canonical_dict() == statutory_rules.to_canonical_dict()
        assert loaded.effective_from == statutory_rules.effective_from

    def test_json_numbers_are_accepted(self):
        rules = load_rules_snapshot(
            {
                "personal_relief": 2400,
                "nssf_employee_rate": 0.06,
                "nssf_employer_rate": 0.06,
                "nssf_max_contribution": 4320,
                "shif_employee_rate": 0.0275,
                "shif_employer_rate": 0,
                "ahl_employee_rate": 0.015,
                "ahl_employer_rate": 0.015,
                "paye_brackets": [
                    {"min": 0, "max": 24000, "rate": 0.1},
                    {"min": 24000, "max": None, "rate": 0.25},
                ],
                "effective_from": "2024-12-27T00:00:00Z",
                "id": 7,
            }
        )
        assert rules.shif_employee_rate == Decimal("0.0275")
        assert rules.paye_brackets[1].is_unbounded
        assert rules.effective_from == date(2024, 12, 27)
        assert rules.version_id == "7"
        assert rules.shif_is_pretax is False

    def test_missing_bracket_min_defaults_to_zero(self):
        rules = load_rules_snapshot(payload(paye_brackets=[{"max": None, "rate": 0.3}]))
        assert rules.paye_brackets[0].min_amount == 0

    def test_missing_fields(self):
        data = payload()
        del data["personal_relief"]
        data["paye_brackets"] = None
        with pytest.raises(ValidationError) as exc_info:
            load_rules_snapshot(data)
        assert "personal_relief" in str(exc_info.value)
        assert "paye_brackets" in str(exc_info.value)

    def test_malformed_bracket_entry(self):
        with pytest.raises(ValidationError):
            load_rules_snapshot(payload(paye_brackets=[{"min": 0, "max": None}]))
        with pytest.raises(ValidationError):
            load_rules_snapshot(payload(paye_brackets="0-24000:0.1"))

    def test_bad_effective_from(self):
        with pytest.raises(ValidationError) as exc_info:
            load_rules_snapshot(payload(effective_from="next week"))
        assert exc_info.value.field == "effective_from"

    def test_missing_effective_from_uses_today(self):
        rules = load_rules_snapshot(payload(effective_from=None))
        assert rules.effective_from == date.today()

    def test_policy_flags(self):
        rules = load_rules_snapshot(payload(shif_is_pretax=True, ahl_is_pretax=True))
        assert rules.shif_is_pretax is True
        assert rules.ahl_is_pretax is True

    @pytest.mark.parametrize("field", ["shif_is_pretax", "ahl_is_pretax", "is_active"])
    @pytest.mark.parametrize("value", ["false", "true", 0, 1, "no"])
    def test_flags_must_be_booleans(self, field, value):
        """A string "false" must not switch a policy on."""
        with pytest.raises(ValidationError) as exc_info:
            load_rules_snapshot(payload(**{field: value}))
        assert exc_info.value.field == field

    def test_null_flags_use_defaults(self):
        rules = load_rules_snapshot(
            payload(shif_is_pretax=None, ahl_is_pretax=None, is_active=None)
        )
        assert rules.shif_is_pretax is False
        assert rules.ahl_is_pretax is False
        assert rules.is_active is True


class TestDefaultRules:
    """Statutory default schedule."""

    def test_values(self, statutory_rules):
        assert statutory_rules.personal_relief == Decimal("2400")
        assert statutory_rules.nssf_max_contribution == Decimal("4320")
        assert statutory_rules.shif_employer_rate == 0
        assert [b.rate for b in statutory_rules.paye_brackets] == [
            Decimal("0.10"),
            Decimal("0.25"),
            Decimal("0.30"),
            Decimal("0.325"),
            Decimal("0.35"),
        ]
        assert statutory_rules.paye_brackets[-1].min_amount == Decimal("800000")
