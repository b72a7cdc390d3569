"""Seed script for the initial statutory settings.

Run with:
    python scripts/seed_payroll_settings.py

Creates the payroll_settings table if needed and activates the default
statutory schedule when no version is active yet.
"""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from paye_engine.calculators.rules import default_rules, snapshot_to_payload
from paye_engine.database import create_schema, session_scope
from paye_engine.services.settings_service import (
    ActiveSettingsNotFoundError,
    SettingsService,
)

logger = logging.getLogger("seed_payroll_settings")


async def seed_default_settings(session: AsyncSession) -> bool:
    """Activate the default schedule unless a version is already active.

    Returns True if a new version was stored.
    """
    service = SettingsService(session)
    try:
        active = await service.get_active()
    except ActiveSettingsNotFoundError:
        row = await service.activate(snapshot_to_payload(default_rules()))
        logger.info("Seeded default payroll settings %s", row.settings_id)
        return True

    logger.info(
        "Active settings %s (effective %s) already present, nothing to do",
        active.settings_id,
        active.effective_from,
    )
    return False


async def main() -> None:
    await create_schema()
    async with session_scope() as session:
        await seed_default_settings(session)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    asyncio.run(main())
