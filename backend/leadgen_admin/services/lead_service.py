"""Lead browsing, filtering, segments and queued generation/enrichment jobs."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, Select
from pydantic.alias_generators import to_snake
from typing import Any, Dict, List, Optional
import logging
import math

from leadgen_admin.config import settings
from leadgen_admin.errors import NotFoundError, ValidationError
from leadgen_admin.models import (
    Lead, LeadEnrichmentJob, LeadGenerationJob, LeadSegment, LeadStatus
)

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    'created_at', 'updated_at', 'first_name', 'last_name', 'email',
    'company_name', 'title', 'status', 'score', 'source',
}

SUPPORTED_FILTERS = {
    'status', 'source', 'company_industry', 'company_name',
    'email_verified', 'min_score', 'max_score',
}

LEAD_STATUSES = {s.value for s in LeadStatus}


class LeadService:
    """Lead queries plus the entry point of the (external) generation pipeline."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    # ==================== Lead generation ====================
    
    async def start_lead_generation(
        self,
        sources: Optional[List[str]],
        criteria: Optional[Dict[str, Any]],
        enrichment: Optional[List[str]] = None,
        limit: Optional[int] = None
    ) -> LeadGenerationJob:
        """Queue a lead generation request and return the job."""
        if not sources:
            raise ValidationError("At least one data source must be specified")
        
        if not criteria:
            raise ValidationError("Search criteria must be provided")
        
        job = LeadGenerationJob(
            sources=list(sources),
            criteria=dict(criteria),
            enrichment=list(enrichment or []),
            limit=limit,
            status="queued"
        )
        self.db.add(job)
        await self.db.commit()
        await self.db.refresh(job)
        
        logger.info(f"Lead generation job {job.id} queued: sources={job.sources} criteria={job.criteria}")
        return job
    
    async def get_job(self, job_id: str) -> LeadGenerationJob:
        job = await self.db.get(LeadGenerationJob, job_id)
        if not job:
            raise NotFoundError("Lead generation job", job_id)
        return job
    
    # ==================== Enrichment ====================
    
    async def start_lead_enrichment(
        self,
        lead_ids: Optional[List[str]],
        enrichment_options: Optional[List[str]]
    ) -> LeadEnrichmentJob:
        """Queue enrichment of existing leads and return the job."""
        if not lead_ids:
            raise ValidationError("At least one lead ID must be specified")
        
        if not enrichment_options:
            raise ValidationError("At least one enrichment option must be specified")
        
        job = LeadEnrichmentJob(
            lead_ids=list(dict.fromkeys(lead_ids)),
            enrichment_options=list(enrichment_options),
            status="queued"
        )
        self.db.add(job)
        await self.db.commit()
        await self.db.refresh(job)
        
        logger.info(f"Lead enrichment job {job.id} queued: {len(job.lead_ids)} leads options={job.enrichment_options}")
        return job
    
    async def get_enrichment_job(self, job_id: str) -> LeadEnrichmentJob:
        job = await self.db.get(LeadEnrichmentJob, job_id)
        if not job:
            raise NotFoundError("Enrichment job", job_id)
        return job
    
    # ==================== Segments ====================
    
    async def create_segment(
        self,
        name: Optional[str],
        description: Optional[str],
        filters: Optional[Dict[str, Any]]
    ) -> LeadSegment:
        """Save a named filter; the filters must be valid lead filters."""
        if not name or not name.strip():
            raise ValidationError("Segment name is required")
        
        stmt = self._filtered(filters)
        lead_count = await self.db.scalar(select(func.count()).select_from(stmt.subquery()))
        
        segment = LeadSegment(
            name=name.strip(),
            description=description,
            filters=dict(filters),
            lead_count=lead_count or 0
        )
        self.db.add(segment)
        await self.db.commit()
        await self.db.refresh(segment)
        
        logger.info(f"Lead segment created: {segment.name} ({segment.id}) matching {segment.lead_count} leads")
        return segment
    
    # ==================== Queries ====================
    
    async def list_leads(
        self,
        page: int = 1,
        limit: int = 20,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self._paginate(select(Lead), page, limit, sort_by, sort_order)
    
    async def search_leads(
        self,
        query: Optional[str],
        page: int = 1,
        limit: int = 20,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> Dict[str, Any]:
        """Case-insensitive substring search over names, email, company and title."""
        stmt = select(Lead)
        
        if query and query.strip():
            search_term = f"%{query.strip()}%"
            stmt = stmt.where(
                or_(
                    Lead.first_name.ilike(search_term),
                    Lead.last_name.ilike(search_term),
                    Lead.email.ilike(search_term),
                    Lead.company_name.ilike(search_term),
                    Lead.title.ilike(search_term),
                )
            )
        
        return await self._paginate(stmt, page, limit, sort_by, sort_order)
    
    async def filter_leads(
        self,
        filters: Dict[str, Any],
        page: int = 1,
        limit: int = 20,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> Dict[str, Any]:
        stmt = self._filtered(filters)
        return await self._paginate(stmt, page, limit, sort_by, sort_order)
    
    def _filtered(self, filters: Optional[Dict[str, Any]]) -> Select:
        """Build the lead query for a filter map, rejecting malformed values."""
        if not filters:
            raise ValidationError("At least one filter must be specified")
        
        filters = {to_snake(key): value for key, value in filters.items()}
        
        unknown = sorted(set(filters) - SUPPORTED_FILTERS)
        if unknown:
            raise ValidationError(f"Unsupported filters: {', '.join(unknown)}")
        
        stmt = select(Lead)
        
        status = filters.get('status')
        if status:
            statuses = self._string_values('status', status)
            invalid = [s for s in statuses if s not in LEAD_STATUSES]
            if invalid:
                raise ValidationError(f"Invalid lead status: {', '.join(invalid)}")
            stmt = stmt.where(Lead.status.in_(statuses))
        
        source = filters.get('source')
        if source:
            stmt = stmt.where(Lead.source.in_(self._string_values('source', source)))
        
        if filters.get('company_industry'):
            industry = self._string_values('company_industry', filters['company_industry'], many=False)[0]
            stmt = stmt.where(func.lower(Lead.company_industry) == industry.lower())
        
        if filters.get('company_name'):
            name = self._string_values('company_name', filters['company_name'], many=False)[0]
            stmt = stmt.where(Lead.company_name.ilike(f"%{name}%"))
        
        email_verified = filters.get('email_verified')
        if email_verified is not None:
            if not isinstance(email_verified, bool):
                raise ValidationError("email_verified must be true or false")
            stmt = stmt.where(Lead.email_verified == email_verified)
        
        if filters.get('min_score') is not None:
            stmt = stmt.where(Lead.score >= self._score(filters['min_score']))
        
        if filters.get('max_score') is not None:
            stmt = stmt.where(Lead.score <= self._score(filters['max_score']))
        
        return stmt
    
    # ==================== Single lead ====================
    
    async def get_lead(self, lead_id: str) -> Lead:
        lead = await self.db.get(Lead, lead_id)
        if not lead:
            raise NotFoundError("Lead", lead_id)
        return lead
    
    async def get_leads_by_ids(self, lead_ids: List[str]) -> List[Lead]:
        """Leads for the given ids in request order; unknown ids are dropped."""
        if not lead_ids:
            return []
        result = await self.db.execute(select(Lead).where(Lead.id.in_(lead_ids)))
        by_id = {lead.id: lead for lead in result.scalars().all()}
        return [by_id[lead_id] for lead_id in dict.fromkeys(lead_ids) if lead_id in by_id]
    
    async def update_lead(self, lead_id: str, data: Dict[str, Any]) -> Lead:
        lead = await self.get_lead(lead_id)
        
        if 'email' in data and data['email'] is not None:
            data['email'] = data['email'].strip().lower()
        if isinstance(data.get('status'), LeadStatus):
            data['status'] = data['status'].value
        
        for field, value in data.items():
            setattr(lead, field, value)
        
        await self.db.commit()
        await self.db.refresh(lead)
        
        logger.info(f"Lead {lead.id} updated: fields={sorted(data)}")
        return lead
    
    async def delete_lead(self, lead_id: str) -> None:
        lead = await self.get_lead(lead_id)
        await self.db.delete(lead)
        await self.db.commit()
        logger.info(f"Lead {lead_id} deleted")
    
    # ==================== Helpers ====================
    
    @staticmethod
    def _string_values(name: str, value: Any, many: bool = True) -> List[str]:
        """A filter value as a list of strings: one string, or a list of them when ``many``."""
        values = value if many and isinstance(value, list) else [value]
        if not values or not all(isinstance(v, str) for v in values):
            expected = "a string or a list of strings" if many else "a string"
            raise ValidationError(f"{name} must be {expected}")
        return values
    
    @staticmethod
    def _score(value: Any) -> float:
        if isinstance(value, bool):
            raise ValidationError(f"Invalid score: {value}")
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid score: {value}")
    
    async def _paginate(
        self,
        stmt: Select,
        page: int,
        limit: int,
        sort_by: Optional[str],
        sort_order: Optional[str]
    ) -> Dict[str, Any]:
        if page < 1:
            raise ValidationError("page must be >= 1")
        if limit < 1:
            raise ValidationError("limit must be >= 1")
        limit = min(limit, settings.LEADS_PAGE_SIZE_MAX)
        
        sort_by = sort_by or 'created_at'
        if sort_by not in SORTABLE_FIELDS:
            raise ValidationError(f"Invalid sort field: {sort_by}")
        
        sort_order = (sort_order or 'desc').lower()
        if sort_order not in ('asc', 'desc'):
            raise ValidationError("sortOrder must be 'asc' or 'desc'")
        
        total = await self.db.scalar(select(func.count()).select_from(stmt.subquery()))
        
        column = getattr(Lead, sort_by)
        ordering = column.asc() if sort_order == 'asc' else column.desc()
        
        result = await self.db.execute(
            stmt.order_by(ordering, Lead.id.asc()).offset((page - 1) * limit).limit(limit)
        )
        items = list(result.scalars().all())
        
        return {
            "items": items,
            "total": total or 0,
            "page": page,
            "limit": limit,
            "pages": math.ceil(total / limit) if total else 0,
        }
