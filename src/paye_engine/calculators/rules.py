"""Rules snapshot loading and the statutory default schedule.

Stored settings rows (and inline API payloads) use the shape:
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
        {"min": 0, "max": 24000, "rate": 0.10},
        {"min": 24000, "max": 32333, "rate": 0.25},
        ...
        {"min": 800000, "max": null, "rate": 0.35}
    ],
    "effective_from": "2024-12-27",
    "effective_to": null,
    "is_active": true,
    "shif_is_pretax": false,   // optional
    "ahl_is_pretax": false     // optional
}
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from paye_engine.calculators.errors import ValidationError
from paye_engine.calculators.types import (
    PayeBracket,
    RulesSnapshot,
    validate_brackets,
)

__all__ = [
    "default_rules",
    "load_rules_snapshot",
    "snapshot_to_payload",
    "validate_brackets",
]

REQUIRED_FIELDS = (
    "personal_relief",
    "nssf_employee_rate",
    "nssf_employer_rate",
    "nssf_max_contribution",
    "shif_employee_rate",
    "shif_employer_rate",
    "ahl_employee_rate",
    "ahl_employer_rate",
    "paye_brackets",
)


def _parse_date(value: Any, field_name: str) -> date:
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            # Accept full ISO timestamps as stored by some clients
            return date.fromisoformat(value[:10])
        except ValueError:
            pass
    raise ValidationError(f"expected an ISO date, got {value!r}", field=field_name)


def _flag(payload: Mapping[str, Any], name: str, default: bool) -> Any:
    # Absent or null means the default; anything else is checked by RulesSnapshot
    value = payload.get(name)
    return default if value is None else value


def _parse_brackets(raw: Any) -> tuple[PayeBracket, ...]:
    if isinstance(raw, (str, bytes)) or not isinstance(raw, (list, tuple)):
        raise ValidationError("expected a list of brackets", field="paye_brackets")

    brackets = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, Mapping) or "rate" not in entry:
            raise ValidationError(
                f"entry {i} must be an object with min, max and rate",
                field="paye_brackets",
            )
        brackets.append(
            PayeBracket(
                min_amount=entry.get("min", 0),
                max_amount=entry.get("max"),
                rate=entry["rate"],
            )
        )
    return tuple(brackets)


def load_rules_snapshot(payload: Mapping[str, Any]) -> RulesSnapshot:
    """Build a validated snapshot from a stored settings row or JSON document.

    Raises:
        ValidationError: If a field is missing or out of range.
        ConfigurationGap: If the bracket table does not partition [0, inf).
    """
    missing = [name for name in REQUIRED_FIELDS if payload.get(name) is None]
    if missing:
        raise ValidationError(
            f"missing required settings: {', '.join(missing)}", field=missing[0]
        )

    effective_from = payload.get("effective_from")
    effective_to = payload.get("effective_to")
    version_id = payload.get("version_id", payload.get("id"))

    return RulesSnapshot(
        personal_relief=payload["personal_relief"],
        nssf_employee_rate=payload["nssf_employee_rate"],
        nssf_employer_rate=payload["nssf_employer_rate"],
        nssf_max_contribution=payload["nssf_max_contribution"],
        shif_employee_rate=payload["shif_employee_rate"],
        shif_employer_rate=payload["shif_employer_rate"],
        ahl_employee_rate=payload["ahl_employee_rate"],
        ahl_employer_rate=payload["ahl_employer_rate"],
        paye_brackets=_parse_brackets(payload["paye_brackets"]),
        effective_from=(
            _parse_date(effective_from, "effective_from")
            if effective_from is not None
            else date.today()
        ),
        effective_to=(
            _parse_date(effective_to, "effective_to") if effective_to is not None else None
        ),
        is_active=_flag(payload, "is_active", True),
        shif_is_pretax=_flag(payload, "shif_is_pretax", False),
        ahl_is_pretax=_flag(payload, "ahl_is_pretax", False),
        version_id=str(version_id) if version_id is not None else None,
    )


def snapshot_to_payload(rules: RulesSnapshot) -> dict[str, Any]:
    """Serialize a snapshot to a JSON-safe dict (Decimals as strings)."""
    return {
        "personal_relief": str(rules.personal_relief),
        "nssf_employee_rate": str(rules.nssf_employee_rate),
        "nssf_employer_rate": str(rules.nssf_employer_rate),
        "nssf_max_contribution": str(rules.nssf_max_contribution),
        "shif_employee_rate": str(rules.shif_employee_rate),
        "shif_employer_rate": str(rules.shif_employer_rate),
        "ahl_employee_rate": str(rules.ahl_employee_rate),
        "ahl_employer_rate": str(rules.ahl_employer_rate),
        "paye_brackets": [
            {
                "min": str(b.min_amount),
                "max": str(b.max_amount) if b.max_amount is not None else None,
                "rate": str(b.rate),
            }
            for b in rules.paye_brackets
        ],
        "effective_from": rules.effective_from.isoformat(),
        "effective_to": rules.effective_to.isoformat() if rules.effective_to else None,
        "is_active": rules.is_active,
        "shif_is_pretax": rules.shif_is_pretax,
        "ahl_is_pretax": rules.ahl_is_pretax,
    }


def default_rules(effective_from: date = date(2024, 12, 27)) -> RulesSnapshot:
    """Statutory monthly schedule (Finance Act 2023, SHIF/AHL from Dec 2024)."""
    return RulesSnapshot(
        personal_relief=Decimal("2400"),
        nssf_employee_rate=Decimal("0.06"),
        nssf_employer_rate=Decimal("0.06"),
        nssf_max_contribution=Decimal("4320"),
        shif_employee_rate=Decimal("0.0275"),
        shif_employer_rate=Decimal("0"),  # employer does not contribute to SHIF
        ahl_employee_rate=Decimal("0.015"),
        ahl_employer_rate=Decimal("0.015"),
        paye_brackets=(
            PayeBracket(Decimal("0"), Decimal("24000"), Decimal("0.10")),
            PayeBracket(Decimal("24000"), Decimal("32333"), Decimal("0.25")),
            PayeBracket(Decimal("32333"), Decimal("500000"), Decimal("0.30")),
            PayeBracket(Decimal("500000"), Decimal("800000"), Decimal("0.325")),
            PayeBracket(Decimal("800000"), None, Decimal("0.35")),
        ),
        effective_from=effective_from,
    )
