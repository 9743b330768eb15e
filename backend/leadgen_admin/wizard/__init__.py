"""Client-side driver for the four-step setup wizard."""

from leadgen_admin.wizard.api_client import SetupApiClient
from leadgen_admin.wizard.exceptions import SetupApiError, WizardError
from leadgen_admin.wizard.orchestrator import SetupWizard, WizardState, WizardStep

__all__ = [
    "SetupApiClient",
    "SetupApiError",
    "SetupWizard",
    "WizardError",
    "WizardState",
    "WizardStep",
]
