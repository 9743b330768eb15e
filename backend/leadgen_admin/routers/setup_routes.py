"""Setup wizard API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from leadgen_admin.database import get_db
from leadgen_admin.schemas import (
    ApiResponse,
    ConnectionTestResponse,
    SetupStatusResponse,
    SetupStepResponse,
    SetupStepRequest,
    SetupCompleteRequest,
    SetupCompleteResponse,
    SetupTestResultsResponse,
)
from leadgen_admin.services.setup_state import SystemSetupState

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/setup", tags=["Setup"])


@router.get("/status", response_model=ApiResponse[SetupStatusResponse])
async def get_setup_status(db: AsyncSession = Depends(get_db)):
    """Check setup completion state."""
    config = await SystemSetupState(db).get_or_create()
    return ApiResponse(data=SetupStatusResponse(
        setup_completed=config.setup_completed,
        setup_step=config.setup_step
    ))


@router.post("/start", response_model=ApiResponse[SetupStepResponse])
async def start_setup(db: AsyncSession = Depends(get_db)):
    """Reset the wizard to step 1 and create the default integrations."""
    config = await SystemSetupState(db).start()
    return ApiResponse(data=SetupStepResponse(setup_step=config.setup_step))


@router.post("/step/{step_number}", response_model=ApiResponse[SetupStepResponse])
async def save_setup_step(
    step_number: int,
    payload: Optional[SetupStepRequest] = None,
    db: AsyncSession = Depends(get_db)
):
    """Save progress for a step (1-4)."""
    data = payload.model_dump(exclude_none=True) if payload else {}
    config = await SystemSetupState(db).save_step(step_number, data)
    return ApiResponse(data=SetupStepResponse(setup_step=config.setup_step))


@router.post("/complete", response_model=ApiResponse[SetupCompleteResponse])
async def complete_setup(
    payload: Optional[SetupCompleteRequest] = None,
    db: AsyncSession = Depends(get_db)
):
    """Mark setup as complete, optionally saving default integrations."""
    data = payload.model_dump(exclude_none=True) if payload else {}
    config = await SystemSetupState(db).complete(data)
    return ApiResponse(data=SetupCompleteResponse(
        setup_completed=config.setup_completed,
        default_data_sources=config.default_data_sources,
        default_enrichment_services=config.default_enrichment_services
    ))


@router.post("/test-connections", response_model=ApiResponse[SetupTestResultsResponse])
async def test_connections(db: AsyncSession = Depends(get_db)):
    """Test every configured integration."""
    results = await SystemSetupState(db).test_all_configured()
    return ApiResponse(data=SetupTestResultsResponse(results={
        integration_id: ConnectionTestResponse(success=r.success, message=r.message)
        for integration_id, r in results.items()
    }))
