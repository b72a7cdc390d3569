"""Payroll preview and settings endpoints."""

from fastapi import APIRouter, HTTPException, status

from paye_engine.api.dependencies import DbSession, Engine
from paye_engine.api.schemas import (
    ErrorResponse,
    PayrollResultResponse,
    PreviewRequest,
    PreviewResponse,
    RulesPayload,
    SettingsResponse,
)
from paye_engine.calculators.rules import load_rules_snapshot
from paye_engine.calculators.types import RulesSnapshot
from paye_engine.services.settings_service import (
    ActiveSettingsNotFoundError,
    SettingsService,
)

router = APIRouter(prefix="/payroll", tags=["payroll"])


async def resolve_rules(db: DbSession, inline: RulesPayload | None) -> RulesSnapshot:
    """Use inline rules when given, otherwise the active stored version."""
    if inline is not None:
        return load_rules_snapshot(inline.model_dump())
    try:
        return await SettingsService(db).get_active_snapshot()
    except ActiveSettingsNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.post(
    "/preview",
    response_model=PreviewResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def preview_payroll(
    db: DbSession,
    engine: Engine,
    payload: PreviewRequest,
) -> PreviewResponse:
    """Compute a net-pay breakdown without persisting anything."""
    compensation = payload.to_input()
    rules = await resolve_rules(db, payload.rules)
    result = engine.compute(compensation, rules)
    return PreviewResponse(
        calculation_id=engine.generate_calculation_id(result),
        data=PayrollResultResponse.model_validate(result),
    )


# ============================================================================
# Settings
# ============================================================================


@router.get(
    "/settings",
    response_model=SettingsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_active_settings(db: DbSession) -> SettingsResponse:
    """Get the active settings version."""
    try:
        row = await SettingsService(db).get_active()
    except ActiveSettingsNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    return SettingsResponse.model_validate(row)


@router.put(
    "/settings",
    response_model=SettingsResponse,
    responses={422: {"model": ErrorResponse}},
)
async def replace_active_settings(
    db: DbSession, payload: RulesPayload
) -> SettingsResponse:
    """Store a new settings version and make it the active one."""
    row = await SettingsService(db).activate(payload.model_dump())
    await db.commit()
    return SettingsResponse.model_validate(row)


@router.get("/settings/history", response_model=list[SettingsResponse])
async def list_settings_versions(db: DbSession) -> list[SettingsResponse]:
    """All stored settings versions, newest first."""
    rows = await SettingsService(db).list_versions()
    return [SettingsResponse.model_validate(row) for row in rows]
