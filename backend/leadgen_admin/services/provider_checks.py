"""
Provider connection checks.

Each check inspects an integration's credential map and reports whether the
provider would accept it. Checks are local predicates: no request leaves the
process. Swap a check for a real API client behind the same interface to
make it live.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Sequence
import logging

logger = logging.getLogger(__name__)


@dataclass
class ConnectionTestResult:
    """Outcome of a connection test."""
    success: bool
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


class BaseProviderCheck(ABC):
    """Base class for all provider checks."""

    @abstractmethod
    async def check(self, credentials: Dict[str, str]) -> ConnectionTestResult:
        """Test whether the credentials are usable for this provider."""
        pass


class RequiredKeysCheck(BaseProviderCheck):
    """Passes when every required credential key is non-empty."""

    def __init__(self, api_name: str, required_keys: Sequence[str], missing_message: str):
        self.api_name = api_name
        self.required_keys = tuple(required_keys)
        self.missing_message = missing_message

    async def check(self, credentials: Dict[str, str]) -> ConnectionTestResult:
        missing = [key for key in self.required_keys if not credentials.get(key)]
        if missing:
            logger.debug(f"{self.api_name} check missing keys: {missing}")
            return ConnectionTestResult(success=False, message=self.missing_message)
        return ConnectionTestResult(
            success=True,
            message=f"Successfully connected to {self.api_name} API"
        )


class ProviderCheckRegistry:
    """Maps integration names to their connection checks."""

    def __init__(self, checks: Optional[Dict[str, BaseProviderCheck]] = None):
        self._checks: Dict[str, BaseProviderCheck] = dict(checks or {})

    def register(self, provider_name: str, check: BaseProviderCheck) -> None:
        self._checks[provider_name] = check

    def get_check(self, provider_name: str) -> Optional[BaseProviderCheck]:
        """Return the check for a provider, or None when none is implemented."""
        return self._checks.get(provider_name)

    def get_available_providers(self) -> List[str]:
        return sorted(self._checks)


def default_registry() -> ProviderCheckRegistry:
    """Registry with the checks shipped out of the box."""
    return ProviderCheckRegistry({
        'Apollo': RequiredKeysCheck('Apollo', ['apiKey'], 'API key is required'),
        'LinkedIn': RequiredKeysCheck(
            'LinkedIn', ['apiKey', 'apiSecret'], 'API key and secret are required'
        ),
        'OpenAI': RequiredKeysCheck('OpenAI', ['apiKey'], 'API key is required'),
        'SendGrid': RequiredKeysCheck('SendGrid', ['apiKey'], 'API key is required'),
    })
