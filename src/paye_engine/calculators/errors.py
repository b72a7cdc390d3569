"""Validation errors raised before any payroll computation starts."""

from __future__ import annotations


class ValidationError(Exception):
    """Raised when compensation inputs or a rules snapshot are malformed."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(f"{field}: {message}" if field else message)

    def to_context(self) -> dict[str, object]:
        """Return structured details for error responses."""
        return {"field": self.field}


class ConfigurationGap(ValidationError):
    """Raised when the PAYE bracket table has a gap, overlap or missing top band.

    ``indices`` holds the positions of the offending brackets in the table
    as supplied, so the stored settings can be fixed.
    """

    code = "CONFIGURATION_GAP"

    def __init__(self, message: str, indices: tuple[int, ...]):
        self.indices = tuple(indices)
        super().__init__(
            f"{message} (brackets {', '.join(str(i) for i in self.indices)})",
            field="paye_brackets",
        )

    def to_context(self) -> dict[str, object]:
        return {"field": self.field, "indices": list(self.indices)}
