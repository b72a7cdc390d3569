"""Compliance due-date and remittance endpoints."""

from fastapi import APIRouter, Path

from paye_engine.api.dependencies import DbSession, Engine, Today
from paye_engine.api.routes.payroll import resolve_rules
from paye_engine.api.schemas import (
    DueDateResponse,
    ErrorResponse,
    RemittanceRequest,
    RemittanceSummaryResponse,
    RemittanceTypeResponse,
)
from paye_engine.compliance.due_dates import (
    REMITTANCE_TYPES,
    get_annual_due_date,
    get_monthly_due_date,
)
from paye_engine.compliance.remittances import summarize_remittances

router = APIRouter(prefix="/compliance", tags=["compliance"])


@router.get(
    "/due-dates/monthly/{period}",
    response_model=DueDateResponse,
    responses={422: {"model": ErrorResponse}},
)
async def monthly_due_date(
    today: Today,
    period: str = Path(description="Remittance period, YYYY-MM"),
) -> DueDateResponse:
    """Deadline for the PAYE/NSSF/SHIF/AHL remittance of a month."""
    return DueDateResponse.model_validate(get_monthly_due_date(period, today))


@router.get(
    "/due-dates/annual/{tax_year}",
    response_model=DueDateResponse,
    responses={422: {"model": ErrorResponse}},
)
async def annual_due_date(
    today: Today,
    tax_year: int = Path(description="Tax year of the P9/P10 return"),
) -> DueDateResponse:
    """Deadline for the annual P9/P10 return."""
    return DueDateResponse.model_validate(get_annual_due_date(tax_year, today))


@router.get("/remittance-types", response_model=list[RemittanceTypeResponse])
async def remittance_types() -> list[RemittanceTypeResponse]:
    """Monthly statutory remittances."""
    return [RemittanceTypeResponse.model_validate(t) for t in REMITTANCE_TYPES]


@router.post(
    "/remittances",
    response_model=RemittanceSummaryResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def remittance_summary(
    db: DbSession,
    engine: Engine,
    today: Today,
    payload: RemittanceRequest,
) -> RemittanceSummaryResponse:
    """Compute every employee for the period and total the remittances."""
    compensations = [employee.to_input() for employee in payload.employees]
    rules = await resolve_rules(db, payload.rules)
    results = [engine.compute(c, rules) for c in compensations]
    summary = summarize_remittances(payload.period, results, today)
    return RemittanceSummaryResponse.model_validate(summary)
