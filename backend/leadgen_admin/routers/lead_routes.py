"""
Lead API routes.

Listing, search, filtering, segments and export over stored leads, lead
source management, and the entry points that queue generation and
enrichment jobs.
"""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Dict, Any, List
import io
import logging

from leadgen_admin.database import get_db
from leadgen_admin.errors import ValidationError
from leadgen_admin.schemas import (
    ApiResponse,
    MessageResponse,
    LeadResponse,
    LeadUpdate,
    LeadPage,
    LeadGenerateRequest,
    LeadGenerateResponse,
    LeadJobResponse,
    LeadFilterRequest,
    LeadExportRequest,
    LeadEnrichRequest,
    LeadEnrichmentJobResponse,
    LeadSegmentRequest,
    LeadSegmentResponse,
    LeadSourceResponse,
    LeadSourceCreate,
    LeadSourceUpdate,
)
from leadgen_admin.services.export_service import LeadExporter
from leadgen_admin.services.lead_service import LeadService
from leadgen_admin.services.lead_source_service import LeadSourceService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/leads", tags=["Leads"])


def _page(result: Dict[str, Any]) -> LeadPage:
    return LeadPage(
        items=[LeadResponse.model_validate(lead) for lead in result["items"]],
        total=result["total"],
        page=result["page"],
        limit=result["limit"],
        pages=result["pages"],
    )


# ============================================================================
# LEAD GENERATION
# ============================================================================

@router.post(
    "/generate",
    response_model=ApiResponse[LeadGenerateResponse],
    status_code=status.HTTP_202_ACCEPTED
)
async def generate_leads(request: LeadGenerateRequest, db: AsyncSession = Depends(get_db)):
    """Queue a lead generation job and return its id."""
    job = await LeadService(db).start_lead_generation(
        sources=request.sources,
        criteria=request.criteria,
        enrichment=request.enrichment,
        limit=request.limit
    )
    return ApiResponse(data=LeadGenerateResponse(
        job_id=job.id,
        message="Lead generation process started successfully"
    ))


@router.get("/jobs/{job_id}", response_model=ApiResponse[LeadJobResponse])
async def get_generation_job(job_id: str, db: AsyncSession = Depends(get_db)):
    job = await LeadService(db).get_job(job_id)
    return ApiResponse(data=LeadJobResponse.model_validate(job))


@router.post(
    "/enrich",
    response_model=ApiResponse[LeadGenerateResponse],
    status_code=status.HTTP_202_ACCEPTED
)
async def enrich_leads(request: LeadEnrichRequest, db: AsyncSession = Depends(get_db)):
    """Queue enrichment of existing leads and return the job id."""
    job = await LeadService(db).start_lead_enrichment(
        lead_ids=request.lead_ids,
        enrichment_options=request.enrichment_options
    )
    return ApiResponse(data=LeadGenerateResponse(
        job_id=job.id,
        message="Lead enrichment process started successfully"
    ))


@router.get("/enrich/status/{job_id}", response_model=ApiResponse[LeadEnrichmentJobResponse])
async def get_enrichment_status(job_id: str, db: AsyncSession = Depends(get_db)):
    job = await LeadService(db).get_enrichment_job(job_id)
    return ApiResponse(data=LeadEnrichmentJobResponse.model_validate(job))


# ============================================================================
# LIST / SEARCH / FILTER
# ============================================================================

@router.get("", response_model=ApiResponse[LeadPage])
async def list_leads(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    db: AsyncSession = Depends(get_db)
):
    result = await LeadService(db).list_leads(page, limit, sort_by, sort_order)
    return ApiResponse(data=_page(result))


@router.get("/search", response_model=ApiResponse[LeadPage])
async def search_leads(
    query: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    db: AsyncSession = Depends(get_db)
):
    """Search leads by name, email, company or title."""
    result = await LeadService(db).search_leads(query, page, limit, sort_by, sort_order)
    return ApiResponse(data=_page(result))


@router.post("/filter", response_model=ApiResponse[LeadPage])
async def filter_leads(request: LeadFilterRequest, db: AsyncSession = Depends(get_db)):
    result = await LeadService(db).filter_leads(
        request.filters, request.page, request.limit, request.sort_by, request.sort_order
    )
    return ApiResponse(data=_page(result))


@router.post(
    "/segment",
    response_model=ApiResponse[LeadSegmentResponse],
    status_code=status.HTTP_201_CREATED
)
async def create_segment(request: LeadSegmentRequest, db: AsyncSession = Depends(get_db)):
    """Save a named filter and report how many leads it matches."""
    segment = await LeadService(db).create_segment(request.name, request.description, request.filters)
    return ApiResponse(data=LeadSegmentResponse.model_validate(segment))


# ============================================================================
# EXPORT
# ============================================================================

@router.post("/export")
async def export_leads(request: LeadExportRequest, db: AsyncSession = Depends(get_db)):
    """
    Export selected leads.
    
    CSV and Excel are streamed as file downloads; JSON comes back in the usual
    envelope.
    """
    if not request.lead_ids:
        raise ValidationError("At least one lead ID must be specified")
    
    exporter = LeadExporter(request.format, request.fields)
    leads = await LeadService(db).get_leads_by_ids(request.lead_ids)
    
    logger.info(f"Exporting {len(leads)} of {len(request.lead_ids)} requested leads as {exporter.format}")
    
    if exporter.format == "json":
        return {"success": True, "data": exporter.to_records(leads)}
    
    if exporter.format == "xlsx":
        content = exporter.to_xlsx(leads)
    else:
        content = exporter.to_csv(leads).encode("utf-8")
    
    return StreamingResponse(
        io.BytesIO(content),
        media_type=exporter.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exporter.filename}"'}
    )


# ============================================================================
# LEAD SOURCES (declared before /{lead_id} so "sources" is not read as an id)
# ============================================================================

@router.get("/sources", response_model=ApiResponse[List[LeadSourceResponse]])
async def list_lead_sources(db: AsyncSession = Depends(get_db)):
    sources = await LeadSourceService(db).list_sources()
    return ApiResponse(data=[LeadSourceResponse.model_validate(s) for s in sources])


@router.post(
    "/sources",
    response_model=ApiResponse[LeadSourceResponse],
    status_code=status.HTTP_201_CREATED
)
async def add_lead_source(request: LeadSourceCreate, db: AsyncSession = Depends(get_db)):
    source = await LeadSourceService(db).add_source(request.name, request.type, request.config)
    return ApiResponse(data=LeadSourceResponse.model_validate(source))


@router.put("/sources/{source_id}", response_model=ApiResponse[LeadSourceResponse])
async def update_lead_source(
    source_id: str,
    update: LeadSourceUpdate,
    db: AsyncSession = Depends(get_db)
):
    source = await LeadSourceService(db).update_source(source_id, update.model_dump(exclude_none=True))
    return ApiResponse(data=LeadSourceResponse.model_validate(source))


@router.delete("/sources/{source_id}", response_model=MessageResponse)
async def delete_lead_source(source_id: str, db: AsyncSession = Depends(get_db)):
    await LeadSourceService(db).delete_source(source_id)
    return MessageResponse(success=True, message="Lead source deleted successfully")


# ============================================================================
# SINGLE LEAD
# ============================================================================

@router.get("/{lead_id}", response_model=ApiResponse[LeadResponse])
async def get_lead(lead_id: str, db: AsyncSession = Depends(get_db)):
    lead = await LeadService(db).get_lead(lead_id)
    return ApiResponse(data=LeadResponse.model_validate(lead))


@router.put("/{lead_id}", response_model=ApiResponse[LeadResponse])
async def update_lead(lead_id: str, update: LeadUpdate, db: AsyncSession = Depends(get_db)):
    lead = await LeadService(db).update_lead(lead_id, update.model_dump(exclude_none=True))
    return ApiResponse(data=LeadResponse.model_validate(lead))


@router.delete("/{lead_id}", response_model=MessageResponse)
async def delete_lead(lead_id: str, db: AsyncSession = Depends(get_db)):
    await LeadService(db).delete_lead(lead_id)
    return MessageResponse(success=True, message="Lead deleted successfully")
