"""Employee identifiers: "EMP" followed by a zero-padded ordinal."""

from __future__ import annotations

import re
from collections.abc import Iterable

EMPLOYEE_ID_PREFIX = "EMP"
EMPLOYEE_ID_WIDTH = 3

_EMPLOYEE_ID_RE = re.compile(r"^EMP\s*(\d+)", re.IGNORECASE)


def format_employee_id(ordinal: int) -> str:
    """Format an ordinal as EMP001, EMP042, EMP1000."""
    if isinstance(ordinal, bool) or not isinstance(ordinal, int) or ordinal < 1:
        raise ValueError(f"ordinal must be a positive integer, got {ordinal!r}")
    return f"{EMPLOYEE_ID_PREFIX}{ordinal:0{EMPLOYEE_ID_WIDTH}d}"


def parse_employee_ordinal(employee_id: str | None) -> int | None:
    """Return the ordinal of an identifier, or None if it does not match."""
    if not employee_id:
        return None
    match = _EMPLOYEE_ID_RE.match(employee_id.strip())
    return int(match.group(1)) if match else None


def next_employee_id(existing_ids: Iterable[str | None], last_allocated: int = 0) -> str:
    """Next identifier after both the highest existing one and the sequence."""
    highest = max(
        (n for n in map(parse_employee_ordinal, existing_ids) if n is not None),
        default=0,
    )
    return format_employee_id(max(highest, last_allocated) + 1)
