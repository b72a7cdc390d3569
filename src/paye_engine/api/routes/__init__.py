"""API routes."""

from paye_engine.api.routes.compliance import router as compliance_router
from paye_engine.api.routes.health import router as health_router
from paye_engine.api.routes.payroll import router as payroll_router

__all__ = ["compliance_router", "health_router", "payroll_router"]
