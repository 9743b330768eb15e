"""
Setup Wizard Orchestrator

Sequences the four wizard steps against the admin API. Forward moves persist
the current step before advancing; backward moves are local. Once setup is
complete the wizard is terminal and only points at the dashboard.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional

from leadgen_admin.wizard.api_client import SetupApiClient
from leadgen_admin.wizard.exceptions import SetupApiError, WizardError

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"
TEST_REQUEST_FAILED = "Error testing connection"


class WizardStep(IntEnum):
    SELECT_INTEGRATIONS = 1
    CONFIGURE_APIS = 2
    TEST_CONNECTIONS = 3
    COMPLETE = 4

    @classmethod
    def clamp(cls, value: int) -> "WizardStep":
        return cls(min(max(value, cls.SELECT_INTEGRATIONS), cls.COMPLETE))


@dataclass
class WizardState:
    """Client-held wizard state."""
    current_step: WizardStep = WizardStep.SELECT_INTEGRATIONS
    selected_integrations: List[str] = field(default_factory=list)
    api_configurations: Dict[str, Dict[str, str]] = field(default_factory=dict)
    test_results: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    completed: bool = False
    redirect_to: Optional[str] = None


class SetupWizard:
    """Drives the setup flow: select, configure, test, complete."""

    def __init__(self, client: SetupApiClient):
        self.client = client
        self.state = WizardState()
        self._auto_tested = False

    @property
    def current_step(self) -> WizardStep:
        return self.state.current_step

    @property
    def is_terminal(self) -> bool:
        return self.state.completed

    def _ensure_active(self) -> None:
        if self.state.completed:
            raise WizardError(
                "Setup is already complete",
                remediation=f"Continue to {DASHBOARD_PATH}"
            )

    def _finish(self) -> None:
        self.state.completed = True
        self.state.redirect_to = DASHBOARD_PATH

    async def enter(self) -> bool:
        """Load server progress.

        Returns False (and becomes terminal) when setup was already completed.
        Resuming at step 1 restarts setup on the server, which also creates
        the default integrations.
        """
        status = await self.client.get_status()

        if status.get("setupCompleted"):
            logger.info("Setup already completed, redirecting to dashboard")
            self._finish()
            return False

        self.state.current_step = WizardStep.clamp(status.get("setupStep") or 1)

        if self.state.current_step == WizardStep.SELECT_INTEGRATIONS:
            await self.client.start()

        await self._on_enter(self.state.current_step)
        logger.info(f"Wizard entered at step {self.state.current_step.name}")
        return True

    # Local edits

    def select(self, integration_ids: List[str]) -> None:
        self._ensure_active()
        self.state.selected_integrations = list(dict.fromkeys(integration_ids))

    def configure(self, integration_id: str, credentials: Dict[str, str]) -> None:
        """Stage credentials for step 2; they reach the server on ``next()``."""
        self._ensure_active()
        staged = dict(self.state.api_configurations.get(integration_id, {}))
        staged.update(credentials)
        self.state.api_configurations[integration_id] = staged

    # Transitions

    def _step_payload(self, step: WizardStep) -> Dict[str, Any]:
        if step == WizardStep.SELECT_INTEGRATIONS:
            return {"selectedIntegrations": self.state.selected_integrations}
        if step == WizardStep.CONFIGURE_APIS:
            return {"apiConfigurations": self.state.api_configurations}
        return {}

    async def next(self) -> WizardStep:
        """Persist the current step, then advance (no-op on the last step)."""
        self._ensure_active()
        step = self.state.current_step

        if step == WizardStep.COMPLETE:
            return step

        await self.client.save_step(int(step), self._step_payload(step))

        self.state.current_step = WizardStep.clamp(step + 1)
        await self._on_enter(self.state.current_step)
        return self.state.current_step

    def back(self) -> WizardStep:
        self._ensure_active()
        self.state.current_step = WizardStep.clamp(self.state.current_step - 1)
        return self.state.current_step

    async def _on_enter(self, step: WizardStep) -> None:
        if step != WizardStep.TEST_CONNECTIONS:
            return
        if self._auto_tested or self.state.test_results:
            return
        self._auto_tested = True
        self.state.test_results = await self.client.test_connections()
        logger.info(f"Initial connection tests: {len(self.state.test_results)} results")

    async def retest(self, integration_id: str) -> Dict[str, Any]:
        """Re-run one connection test and replace its result.

        An API error is recorded as a failed test rather than raised.
        """
        self._ensure_active()
        try:
            result = await self.client.test_integration(integration_id)
        except SetupApiError as e:
            logger.warning(f"Connection test request for {integration_id} failed: {e.message}")
            result = {"success": False, "message": TEST_REQUEST_FAILED}
        self.state.test_results[integration_id] = {
            "success": result.get("success", False),
            "message": result.get("message"),
        }
        return self.state.test_results[integration_id]

    async def complete(self) -> str:
        """Finish setup and return the path to redirect to.

        Selected integrations are split by type into the default data sources
        and default enrichment services.
        """
        self._ensure_active()
        if self.state.current_step != WizardStep.COMPLETE:
            raise WizardError(
                f"Cannot complete setup from step {self.state.current_step.name}",
                remediation="Advance through every step first"
            )

        selected = set(self.state.selected_integrations)
        types_by_id = {}
        if selected:
            integrations = await self.client.list_integrations()
            types_by_id = {i["id"]: i["type"] for i in integrations}

        ordered = self.state.selected_integrations
        await self.client.complete(
            default_data_sources=[i for i in ordered if types_by_id.get(i) == "leadSource"],
            default_enrichment_services=[i for i in ordered if types_by_id.get(i) == "enrichment"],
        )

        self._finish()
        logger.info("Setup wizard completed")
        return self.state.redirect_to
