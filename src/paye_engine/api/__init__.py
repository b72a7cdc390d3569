"""HTTP adapter around the payroll engine."""
