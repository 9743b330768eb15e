"""Lead source management."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Any, Dict, List, Optional
import logging

from leadgen_admin.errors import NotFoundError, ValidationError
from leadgen_admin.models import LeadSource

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('name', 'type', 'config', 'is_active')


class LeadSourceService:
    """CRUD over lead sources. Unlike integrations, sources can be deleted."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def list_sources(self) -> List[LeadSource]:
        result = await self.db.execute(
            select(LeadSource).order_by(LeadSource.name.asc(), LeadSource.created_at.asc())
        )
        return list(result.scalars().all())
    
    async def get_source(self, source_id: str) -> LeadSource:
        source = await self.db.get(LeadSource, source_id)
        if not source:
            raise NotFoundError("Lead source", source_id)
        return source
    
    async def add_source(
        self,
        name: Optional[str],
        source_type: Optional[str],
        config: Optional[Dict[str, Any]] = None
    ) -> LeadSource:
        if not name or not source_type:
            raise ValidationError("Name and type are required for a lead source")
        
        source = LeadSource(name=name, type=source_type, config=dict(config or {}), is_active=True)
        self.db.add(source)
        await self.db.commit()
        await self.db.refresh(source)
        
        logger.info(f"Lead source added: {source.name} ({source.id}) type={source.type}")
        return source
    
    async def update_source(self, source_id: str, data: Dict[str, Any]) -> LeadSource:
        """Set the given fields; ``config`` replaces the stored map."""
        source = await self.get_source(source_id)
        
        for field in ('name', 'type'):
            if field in data and data[field] is not None and not data[field]:
                raise ValidationError(f"Lead source {field} cannot be empty")
        
        for field in UPDATABLE_FIELDS:
            if data.get(field) is None:
                continue
            value = dict(data[field]) if field == 'config' else data[field]
            setattr(source, field, value)
        
        await self.db.commit()
        await self.db.refresh(source)
        
        logger.info(f"Lead source updated: {source.name} ({source.id}) fields={sorted(data)}")
        return source
    
    async def delete_source(self, source_id: str) -> None:
        source = await self.get_source(source_id)
        await self.db.delete(source)
        await self.db.commit()
        logger.info(f"Lead source deleted: {source_id}")
