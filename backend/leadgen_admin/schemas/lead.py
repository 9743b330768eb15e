"""Lead and lead generation job schemas."""

from pydantic import Field
from typing import Optional, Dict, List, Any
from datetime import datetime

from leadgen_admin.models import LeadStatus
from leadgen_admin.schemas.base import ApiModel


class LeadResponse(ApiModel):
    id: str
    first_name: str
    last_name: str
    full_name: str
    title: str
    email: str
    email_verified: bool
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    company_name: str
    company_website: Optional[str] = None
    company_industry: Optional[str] = None
    company_size: Optional[str] = None
    company_location: Optional[str] = None
    source: str
    status: str
    score: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LeadUpdate(ApiModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    title: Optional[str] = None
    email: Optional[str] = None
    email_verified: Optional[bool] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    company_name: Optional[str] = None
    company_website: Optional[str] = None
    company_industry: Optional[str] = None
    company_size: Optional[str] = None
    company_location: Optional[str] = None
    status: Optional[LeadStatus] = None
    score: Optional[int] = Field(default=None, ge=0, le=100)
    tags: Optional[List[str]] = None
    notes: Optional[str] = None


class LeadPage(ApiModel):
    items: List[LeadResponse]
    total: int
    page: int
    limit: int
    pages: int


class LeadGenerateRequest(ApiModel):
    sources: Optional[List[str]] = None
    criteria: Optional[Dict[str, Any]] = None
    enrichment: List[str] = Field(default_factory=list)
    limit: Optional[int] = Field(default=None, ge=1)


class LeadGenerateResponse(ApiModel):
    job_id: str
    message: str


class LeadJobResponse(ApiModel):
    id: str
    sources: List[str]
    criteria: Dict[str, Any]
    enrichment: List[str]
    limit: Optional[int] = None
    status: str
    created_at: Optional[datetime] = None


class LeadFilterRequest(ApiModel):
    filters: Dict[str, Any] = Field(default_factory=dict)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None


class LeadExportRequest(ApiModel):
    lead_ids: List[str] = Field(default_factory=list)
    format: str = "csv"
    fields: Optional[List[str]] = None


class LeadEnrichRequest(ApiModel):
    lead_ids: Optional[List[str]] = None
    enrichment_options: Optional[List[str]] = None


class LeadEnrichmentJobResponse(ApiModel):
    id: str
    lead_ids: List[str]
    enrichment_options: List[str]
    status: str
    created_at: Optional[datetime] = None


class LeadSegmentRequest(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    filters: Dict[str, Any] = Field(default_factory=dict)


class LeadSegmentResponse(ApiModel):
    id: str
    name: str
    description: Optional[str] = None
    filters: Dict[str, Any]
    lead_count: int
    created_at: Optional[datetime] = None


# Lead sources

class LeadSourceResponse(ApiModel):
    id: str
    name: str
    type: str
    config: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LeadSourceCreate(ApiModel):
    """Name and type are checked by the service so the error message matches."""
    name: Optional[str] = None
    type: Optional[str] = None
    config: Dict[str, Any] = Field(default_factory=dict)


class LeadSourceUpdate(ApiModel):
    name: Optional[str] = None
    type: Optional[str] = None
    config: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None
