"""Connection testing for configured integrations."""

from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Iterable, Optional
import logging

from leadgen_admin.models import Integration, IntegrationStatus, utcnow
from leadgen_admin.services.provider_checks import (
    ConnectionTestResult,
    ProviderCheckRegistry,
    default_registry,
)

logger = logging.getLogger(__name__)

INTEGRATION_NOT_FOUND = "Integration not found"
NOT_CONFIGURED = "Integration is not properly configured"
NOT_IMPLEMENTED = "Connection test not implemented for this integration"
UNKNOWN_ERROR = "Unknown error"


class ConnectionTester:
    """
    Runs the provider check of an integration and records the outcome.
    
    Unknown or unconfigured integrations are rejected without touching the
    stored row. Every other outcome, including a check that raises, updates
    status, error_message and last_tested.
    """
    
    def __init__(self, db: AsyncSession, registry: Optional[ProviderCheckRegistry] = None):
        self.db = db
        self.registry = registry or default_registry()
    
    async def test(self, integration_id: str) -> ConnectionTestResult:
        """Test one integration by id."""
        integration = await self.db.get(Integration, integration_id)
        
        if not integration:
            return ConnectionTestResult(success=False, message=INTEGRATION_NOT_FOUND)
        
        if not integration.is_configured:
            return ConnectionTestResult(success=False, message=NOT_CONFIGURED)
        
        try:
            result = await self._run_check(integration)
        except Exception as e:
            logger.exception(f"Connection test for {integration.name} ({integration.id}) raised")
            result = ConnectionTestResult(success=False, message=str(e) or UNKNOWN_ERROR)
        
        self._record(integration, result)
        await self.db.commit()
        
        logger.info(
            f"Connection test {integration.name} ({integration.id}): "
            f"{'ok' if result.success else 'failed'} - {result.message}"
        )
        return result
    
    async def test_many(self, integration_ids: Iterable[str]) -> Dict[str, ConnectionTestResult]:
        """Test several integrations one after another."""
        results = {}
        for integration_id in integration_ids:
            results[integration_id] = await self.test(integration_id)
        return results
    
    async def _run_check(self, integration: Integration) -> ConnectionTestResult:
        check = self.registry.get_check(integration.name)
        if check is None:
            return ConnectionTestResult(success=False, message=NOT_IMPLEMENTED)
        return await check.check(dict(integration.credentials or {}))
    
    def _record(self, integration: Integration, result: ConnectionTestResult) -> None:
        if result.success:
            integration.status = IntegrationStatus.ACTIVE.value
            integration.error_message = None
        else:
            integration.status = IntegrationStatus.ERROR.value
            integration.error_message = result.message or UNKNOWN_ERROR
        integration.last_tested = utcnow()
