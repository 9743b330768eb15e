"""Setup wizard schemas."""

from typing import Optional, Dict, List

from leadgen_admin.schemas.base import ApiModel
from leadgen_admin.schemas.integration import ConnectionTestResponse


class SetupStatusResponse(ApiModel):
    setup_completed: bool
    setup_step: int


class SetupStepResponse(ApiModel):
    setup_step: int


class SetupStepRequest(ApiModel):
    """Payload of one wizard step. Only the keys relevant to the step are used."""
    selected_integrations: Optional[List[str]] = None
    api_configurations: Optional[Dict[str, Dict[str, str]]] = None


class SetupCompleteRequest(ApiModel):
    default_data_sources: Optional[List[str]] = None
    default_enrichment_services: Optional[List[str]] = None


class SetupCompleteResponse(ApiModel):
    setup_completed: bool
    default_data_sources: List[str]
    default_enrichment_services: List[str]


class SetupTestResultsResponse(ApiModel):
    results: Dict[str, ConnectionTestResponse]
