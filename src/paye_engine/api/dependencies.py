"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from datetime import date
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from paye_engine.calculators.engine import PayrollEngine
from paye_engine.config import get_settings
from paye_engine.database import init_db


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_today() -> date:
    """Reference day for due-date urgency (local wall clock)."""
    return date.today()


def get_payroll_engine() -> PayrollEngine:
    """Engine stamped with the configured engine version."""
    return PayrollEngine(engine_version=get_settings().engine_version)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Today = Annotated[date, Depends(get_today)]
Engine = Annotated[PayrollEngine, Depends(get_payroll_engine)]
