"""Integration schemas."""

from pydantic import Field
from typing import Optional, Dict, List, Any
from datetime import datetime

from leadgen_admin.models import IntegrationType
from leadgen_admin.schemas.base import ApiModel


class IntegrationResponse(ApiModel):
    """Integration as returned by the API."""
    id: str
    name: str
    type: str
    is_enabled: bool
    is_configured: bool
    credentials: Dict[str, Any] = Field(default_factory=dict)
    last_tested: Optional[datetime] = None
    status: str
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class IntegrationUpdate(ApiModel):
    """Partial update. Credentials are merged into the stored map."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    type: Optional[IntegrationType] = None
    is_enabled: Optional[bool] = None
    credentials: Optional[Dict[str, str]] = None

    def changes(self) -> Dict[str, Any]:
        """Fields that carry a value, keyed the way the registry expects."""
        data = self.model_dump(exclude_none=True, exclude={"id"})
        if "type" in data:
            data["type"] = IntegrationType(data["type"]).value
        return data


class IntegrationToggle(ApiModel):
    is_enabled: Optional[bool] = None


class BatchUpdateItem(IntegrationUpdate):
    id: Optional[str] = None


class BatchUpdateRequest(ApiModel):
    updates: List[BatchUpdateItem]


class BatchUpdateResponse(ApiModel):
    count: int
    results: List[IntegrationResponse]


class ConnectionTestResponse(ApiModel):
    success: bool
    message: Optional[str] = None
