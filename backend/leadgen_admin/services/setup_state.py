"""
System setup state.

Tracks wizard progress in the SystemConfiguration singleton and applies the
server-side effects of each wizard step.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Any, Dict, List, Optional
import logging

from leadgen_admin.errors import ValidationError
from leadgen_admin.models import SystemConfiguration
from leadgen_admin.services.connection_tester import ConnectionTester
from leadgen_admin.services.integration_registry import IntegrationRegistry
from leadgen_admin.services.provider_checks import ConnectionTestResult

logger = logging.getLogger(__name__)

FIRST_STEP = 1
LAST_STEP = 4


def _unique(ids: List[str]) -> List[str]:
    """Drop repeated ids, keeping first-seen order."""
    return list(dict.fromkeys(ids))


class SystemSetupState:
    """Setup wizard progress and defaults.
    
    The configuration row is read then written without locking; two
    concurrent first reads may each create a row, and the oldest one wins on
    every later read.
    """
    
    def __init__(
        self,
        db: AsyncSession,
        registry: Optional[IntegrationRegistry] = None,
        tester: Optional[ConnectionTester] = None
    ):
        self.db = db
        self.registry = registry or IntegrationRegistry(db)
        self.tester = tester or ConnectionTester(db)
    
    async def _find(self) -> Optional[SystemConfiguration]:
        result = await self.db.execute(
            select(SystemConfiguration).order_by(SystemConfiguration.created_at.asc()).limit(1)
        )
        return result.scalar_one_or_none()
    
    async def get_or_create(self) -> SystemConfiguration:
        """Return the configuration, creating it with defaults on first use."""
        config = await self._find()
        
        if not config:
            config = SystemConfiguration(
                setup_completed=False,
                setup_step=0,
                default_data_sources=[],
                default_enrichment_services=[]
            )
            self.db.add(config)
            await self.db.commit()
            await self.db.refresh(config)
            logger.info("Created system configuration")
        
        return config
    
    async def start(self) -> SystemConfiguration:
        """Restart the wizard at step 1 and make sure the catalog exists."""
        config = await self.get_or_create()
        
        config.setup_completed = False
        config.setup_step = FIRST_STEP
        await self.db.commit()
        
        await self.registry.initialize_defaults()
        
        await self.db.refresh(config)
        logger.info("Setup started")
        return config
    
    async def save_step(self, step_number: int, payload: Optional[Dict[str, Any]] = None) -> SystemConfiguration:
        """
        Record progress for a wizard step.
        
        Step 2 writes the entered credentials (``api_configurations``: id to
        credential partial) through the registry; unknown ids are ignored.
        Steps 1, 3 and 4 only move the step counter.
        """
        if not isinstance(step_number, int) or isinstance(step_number, bool) \
                or not FIRST_STEP <= step_number <= LAST_STEP:
            logger.warning(f"Rejected setup step {step_number!r}")
            raise ValidationError("Invalid step number")
        
        payload = payload or {}
        config = await self.get_or_create()
        
        if step_number == 1 and payload.get("selected_integrations"):
            # Selection lives on the client until completion
            logger.debug(f"Step 1 selection: {len(payload['selected_integrations'])} integrations")
        elif step_number == 2 and payload.get("api_configurations"):
            for integration_id, credentials in payload["api_configurations"].items():
                updated = await self.registry.update(integration_id, {"credentials": credentials})
                if not updated:
                    logger.warning(f"Setup step 2: unknown integration {integration_id}")
        
        config.setup_step = step_number
        await self.db.commit()
        await self.db.refresh(config)
        
        logger.info(f"Setup step {step_number} saved")
        return config
    
    async def complete(self, payload: Optional[Dict[str, Any]] = None) -> SystemConfiguration:
        """Mark setup finished, optionally storing the default integrations."""
        payload = payload or {}
        config = await self.get_or_create()
        
        config.setup_completed = True
        
        if payload.get("default_data_sources") is not None:
            config.default_data_sources = _unique(payload["default_data_sources"])
        
        if payload.get("default_enrichment_services") is not None:
            config.default_enrichment_services = _unique(payload["default_enrichment_services"])
        
        await self.db.commit()
        await self.db.refresh(config)
        
        logger.info(
            f"Setup completed: {len(config.default_data_sources)} data sources, "
            f"{len(config.default_enrichment_services)} enrichment services"
        )
        return config
    
    async def test_all_configured(self) -> Dict[str, ConnectionTestResult]:
        """Test every configured integration. Unconfigured ones are left out."""
        integrations = await self.registry.list_all()
        configured_ids = [i.id for i in integrations if i.is_configured]
        
        results = await self.tester.test_many(configured_ids)
        
        passed = sum(1 for r in results.values() if r.success)
        logger.info(f"Tested {len(results)} configured integrations: {passed} passed")
        return results
