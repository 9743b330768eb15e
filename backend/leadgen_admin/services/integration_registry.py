"""Integration registry: listing, updates, enable toggles and the default catalog."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Any, Dict, List, Optional
import logging

from leadgen_admin.config import settings
from leadgen_admin.errors import AppError, ValidationError
from leadgen_admin.models import Integration, IntegrationType
from leadgen_admin.services.credential_store import CredentialStore
from leadgen_admin.services.validation_rules import is_valid

logger = logging.getLogger(__name__)


# Inserted once, into an empty table, by initialize_defaults()
DEFAULT_CATALOG = [
    # Lead Sources
    {"name": "Apollo", "type": IntegrationType.LEAD_SOURCE.value},
    {"name": "LinkedIn", "type": IntegrationType.LEAD_SOURCE.value},
    {"name": "Crunchbase", "type": IntegrationType.LEAD_SOURCE.value},
    {"name": "ZoomInfo", "type": IntegrationType.LEAD_SOURCE.value},
    {"name": "Clearbit", "type": IntegrationType.LEAD_SOURCE.value},
    {"name": "Apify", "type": IntegrationType.LEAD_SOURCE.value},
    
    # Enrichment Services
    {"name": "Million Verifier", "type": IntegrationType.ENRICHMENT.value},
    {"name": "EXA API", "type": IntegrationType.ENRICHMENT.value},
    {"name": "OpenAI", "type": IntegrationType.ENRICHMENT.value},
    {"name": "Clearbit Enrichment", "type": IntegrationType.ENRICHMENT.value},
    
    # Email Services
    {"name": "SendGrid", "type": IntegrationType.EMAIL.value},
    {"name": "SMTP", "type": IntegrationType.EMAIL.value},
]

INTEGRATION_TYPES = {t.value for t in IntegrationType}


class IntegrationRegistry:
    """CRUD and lifecycle operations over the set of integrations."""
    
    def __init__(self, db: AsyncSession, strict_enable: Optional[bool] = None):
        self.db = db
        self.credential_store = CredentialStore(db)
        if strict_enable is None:
            strict_enable = settings.STRICT_ENABLE_TOGGLE
        self.strict_enable = strict_enable
    
    async def list_all(self) -> List[Integration]:
        """All integrations ordered by type, then name."""
        result = await self.db.execute(
            select(Integration).order_by(Integration.type.asc(), Integration.name.asc())
        )
        return list(result.scalars().all())
    
    async def get_by_id(self, integration_id: str) -> Optional[Integration]:
        return await self.db.get(Integration, integration_id)
    
    async def update(self, integration_id: str, data: Dict[str, Any]) -> Optional[Integration]:
        """
        Apply a partial update.
        
        ``name``, ``type`` and ``is_enabled`` are set when given. ``credentials``
        is merged into the stored map and ``is_configured`` recomputed from the
        result. Returns None for an unknown id.
        """
        integration = await self.db.get(Integration, integration_id)
        
        if not integration:
            return None
        
        self._apply(integration, data)
        
        await self.db.commit()
        await self.db.refresh(integration)
        
        logger.info(f"Integration updated: {integration.name} ({integration.id}) fields={sorted(data)}")
        return integration
    
    async def toggle(self, integration_id: str, is_enabled: bool) -> Optional[Integration]:
        """Enable or disable an integration. Returns None for an unknown id."""
        integration = await self.db.get(Integration, integration_id)
        
        if not integration:
            return None
        
        if self.strict_enable and is_enabled and not integration.is_configured:
            logger.warning(f"Refused to enable unconfigured integration {integration.name} ({integration.id})")
            raise ValidationError("Integration must be configured before it can be enabled")
        
        integration.is_enabled = is_enabled
        await self.db.commit()
        await self.db.refresh(integration)
        
        logger.info(f"Integration {integration.name} ({integration.id}) enabled={is_enabled}")
        return integration
    
    async def initialize_defaults(self) -> int:
        """Insert the default catalog if no integration exists yet.
        
        Returns the number of rows inserted (0 when the table was not empty).
        """
        count = await self.db.scalar(select(func.count()).select_from(Integration))
        
        if count:
            logger.debug(f"Skipping default integrations: {count} already present")
            return 0
        
        self.db.add_all([Integration(**entry) for entry in DEFAULT_CATALOG])
        await self.db.commit()
        
        logger.info(f"Created {len(DEFAULT_CATALOG)} default integrations")
        return len(DEFAULT_CATALOG)
    
    async def batch_update(self, updates: List[Dict[str, Any]]) -> List[Integration]:
        """
        Apply ``update`` to every entry that carries an ``id``.
        
        Entries without an id, unknown ids and rejected entries are skipped
        without error; only the integrations actually updated are returned.
        """
        results = []
        
        for entry in updates:
            integration_id = entry.get("id")
            if not integration_id:
                continue
            
            data = {key: value for key, value in entry.items() if key != "id"}
            try:
                updated = await self.update(integration_id, data)
            except AppError as e:
                await self.db.rollback()
                logger.warning(f"Batch update skipped integration {integration_id}: {e.message}")
                # Rollback expires every loaded row, including earlier results
                for integration in results:
                    await self.db.refresh(integration)
                continue
            
            if updated:
                results.append(updated)
            else:
                logger.debug(f"Batch update skipped unknown integration {integration_id}")
        
        logger.info(f"Batch update: {len(results)}/{len(updates)} integrations updated")
        return results
    
    def _apply(self, integration: Integration, data: Dict[str, Any]) -> None:
        # Validate before touching the row so a rejected update leaves nothing dirty
        integration_type = data.get("type")
        if isinstance(integration_type, IntegrationType):
            integration_type = integration_type.value
        if integration_type and integration_type not in INTEGRATION_TYPES:
            raise ValidationError(f"Invalid integration type: {integration_type}")

        if data.get("name"):
            integration.name = data["name"]

        if integration_type:
            integration.type = integration_type

        if data.get("is_enabled") is not None:
            integration.is_enabled = data["is_enabled"]
        
        if data.get("credentials") is not None:
            self.credential_store.apply(integration, data["credentials"])
        
        # Configured-ness depends on both the type and the credential map
        if integration_type or data.get("credentials") is not None:
            integration.is_configured = is_valid(integration.type, integration.credentials)
