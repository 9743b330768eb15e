"""Per-integration credential storage with shallow-merge updates."""

from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Optional
import logging

from leadgen_admin.errors import NotFoundError
from leadgen_admin.models import Integration

logger = logging.getLogger(__name__)


def merge_credentials(
    existing: Optional[Dict[str, str]],
    partial: Optional[Dict[str, str]]
) -> Dict[str, str]:
    """Shallow merge: keys in ``partial`` win, keys it omits are kept.

    Always returns a new dict so the JSON column registers the change.
    """
    merged = dict(existing or {})
    merged.update(partial or {})
    return merged


class CredentialStore:
    """Reads and merges the credential map of an integration.

    No validation happens here; the registry decides what a merged map means.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _load(self, integration_id: str) -> Integration:
        integration = await self.db.get(Integration, integration_id)
        if integration is None:
            raise NotFoundError("Integration", integration_id)
        return integration

    async def get(self, integration_id: str) -> Dict[str, str]:
        integration = await self._load(integration_id)
        return dict(integration.credentials or {})

    def apply(self, integration: Integration, partial: Dict[str, str]) -> Dict[str, str]:
        """Merge ``partial`` into an already loaded integration (no commit)."""
        integration.credentials = merge_credentials(integration.credentials, partial)
        logger.debug(
            f"Credentials merged for integration {integration.id}: "
            f"keys={sorted(integration.credentials)}"
        )
        return integration.credentials

    async def merge(self, integration_id: str, partial: Dict[str, str]) -> Dict[str, str]:
        integration = await self._load(integration_id)
        merged = self.apply(integration, partial)
        await self.db.commit()
        return dict(merged)
