"""Pydantic schemas for request and response bodies."""

from leadgen_admin.schemas.base import ApiModel, ApiResponse, MessageResponse

from leadgen_admin.schemas.integration import (
    IntegrationResponse,
    IntegrationUpdate,
    IntegrationToggle,
    BatchUpdateItem,
    BatchUpdateRequest,
    BatchUpdateResponse,
    ConnectionTestResponse,
)

from leadgen_admin.schemas.setup import (
    SetupStatusResponse,
    SetupStepResponse,
    SetupStepRequest,
    SetupCompleteRequest,
    SetupCompleteResponse,
    SetupTestResultsResponse,
)

from leadgen_admin.schemas.lead import (
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
