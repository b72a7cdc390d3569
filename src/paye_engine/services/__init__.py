"""Persistence-side services."""

from paye_engine.services.settings_service import (
    ActiveSettingsNotFoundError,
    SettingsService,
)

__all__ = ["ActiveSettingsNotFoundError", "SettingsService"]
