"""HTTP client for the setup and integration endpoints."""

import httpx
import logging
from typing import Any, Dict, List, Optional

from leadgen_admin.wizard.exceptions import SetupApiError

logger = logging.getLogger(__name__)


class SetupApiClient:
    """Thin async wrapper over the admin API used by the setup wizard."""
    
    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
    
    async def __aenter__(self) -> "SetupApiClient":
        return self
    
    async def __aexit__(self, *exc_info) -> None:
        await self.close()
    
    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
    
    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = await self._client.request(method, path, json=json)
        
        try:
            body = response.json()
        except ValueError:
            body = {}
        
        if response.is_error:
            message = body.get("message") if isinstance(body, dict) else None
            logger.error(f"{method} {path} failed ({response.status_code}): {message}")
            raise SetupApiError(message or f"Request failed with status {response.status_code}", response.status_code)
        
        return body
    
    # Setup
    
    async def get_status(self) -> Dict[str, Any]:
        body = await self._request("GET", "/setup/status")
        return body["data"]
    
    async def start(self) -> Dict[str, Any]:
        body = await self._request("POST", "/setup/start")
        return body["data"]
    
    async def save_step(self, step_number: int, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        body = await self._request("POST", f"/setup/step/{step_number}", json=payload or {})
        return body["data"]
    
    async def complete(
        self,
        default_data_sources: Optional[List[str]] = None,
        default_enrichment_services: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        payload = {}
        if default_data_sources is not None:
            payload["defaultDataSources"] = default_data_sources
        if default_enrichment_services is not None:
            payload["defaultEnrichmentServices"] = default_enrichment_services
        body = await self._request("POST", "/setup/complete", json=payload)
        return body["data"]
    
    async def test_connections(self) -> Dict[str, Dict[str, Any]]:
        body = await self._request("POST", "/setup/test-connections")
        return body["data"]["results"]
    
    # Integrations
    
    async def list_integrations(self) -> List[Dict[str, Any]]:
        body = await self._request("GET", "/integrations")
        return body["data"]
    
    async def test_integration(self, integration_id: str) -> Dict[str, Any]:
        """Returns the raw ``{"success", "message"}`` result."""
        return await self._request("POST", f"/integrations/{integration_id}/test")
