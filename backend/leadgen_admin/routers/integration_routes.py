"""Integration API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from leadgen_admin.database import get_db
from leadgen_admin.errors import NotFoundError, ValidationError
from leadgen_admin.schemas import (
    ApiResponse,
    IntegrationResponse,
    IntegrationUpdate,
    IntegrationToggle,
    BatchUpdateRequest,
    BatchUpdateResponse,
    ConnectionTestResponse,
)
from leadgen_admin.services.connection_tester import ConnectionTester
from leadgen_admin.services.integration_registry import IntegrationRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/integrations", tags=["Integrations"])


@router.get("", response_model=ApiResponse[List[IntegrationResponse]])
async def list_integrations(db: AsyncSession = Depends(get_db)):
    """Get all integrations, grouped by type."""
    integrations = await IntegrationRegistry(db).list_all()
    return ApiResponse(data=[IntegrationResponse.model_validate(i) for i in integrations])


@router.post("/batch-update", response_model=ApiResponse[BatchUpdateResponse])
async def batch_update_integrations(
    request: BatchUpdateRequest,
    db: AsyncSession = Depends(get_db)
):
    """Update several integrations in one request. Unknown ids are skipped."""
    updates = [
        {"id": item.id, **item.changes()}
        for item in request.updates
    ]
    updated = await IntegrationRegistry(db).batch_update(updates)
    
    return ApiResponse(data=BatchUpdateResponse(
        count=len(updated),
        results=[IntegrationResponse.model_validate(i) for i in updated]
    ))


@router.get("/{integration_id}", response_model=ApiResponse[IntegrationResponse])
async def get_integration(integration_id: str, db: AsyncSession = Depends(get_db)):
    integration = await IntegrationRegistry(db).get_by_id(integration_id)
    
    if not integration:
        raise NotFoundError("Integration", integration_id)
    
    return ApiResponse(data=IntegrationResponse.model_validate(integration))


@router.put("/{integration_id}", response_model=ApiResponse[IntegrationResponse])
async def update_integration(
    integration_id: str,
    update: IntegrationUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update name, type, enabled flag or credentials (merged) of an integration."""
    integration = await IntegrationRegistry(db).update(integration_id, update.changes())
    
    if not integration:
        raise NotFoundError("Integration", integration_id)
    
    return ApiResponse(data=IntegrationResponse.model_validate(integration))


@router.post("/{integration_id}/test", response_model=ConnectionTestResponse)
async def test_integration(integration_id: str, db: AsyncSession = Depends(get_db)):
    """
    Test connectivity of an integration.
    
    A failed test is a normal result (``success: false``), not an error.
    """
    result = await ConnectionTester(db).test(integration_id)
    return ConnectionTestResponse(success=result.success, message=result.message)


@router.put("/{integration_id}/enable", response_model=ApiResponse[IntegrationResponse])
async def toggle_integration(
    integration_id: str,
    toggle: IntegrationToggle,
    db: AsyncSession = Depends(get_db)
):
    """Enable or disable an integration."""
    if toggle.is_enabled is None:
        raise ValidationError("isEnabled field is required")
    
    integration = await IntegrationRegistry(db).toggle(integration_id, toggle.is_enabled)
    
    if not integration:
        raise NotFoundError("Integration", integration_id)
    
    return ApiResponse(data=IntegrationResponse.model_validate(integration))
