"""
Credential validation rules.

Decides whether a credential map is complete enough for an integration type
to count as configured. Pure functions, no I/O.
"""

from typing import Dict, Callable, Optional

from leadgen_admin.models import IntegrationType


def _has(credentials: Dict[str, Optional[str]], key: str) -> bool:
    return bool(credentials.get(key))


def _api_key_rule(credentials: Dict[str, Optional[str]]) -> bool:
    return _has(credentials, "apiKey")


def _email_rule(credentials: Dict[str, Optional[str]]) -> bool:
    if _has(credentials, "apiKey"):
        return True
    return _has(credentials, "username") and _has(credentials, "password")


RULES: Dict[str, Callable[[Dict[str, Optional[str]]], bool]] = {
    IntegrationType.LEAD_SOURCE.value: _api_key_rule,
    IntegrationType.ENRICHMENT.value: _api_key_rule,
    IntegrationType.EMAIL.value: _email_rule,
}


def is_valid(integration_type: str, credentials: Optional[Dict[str, Optional[str]]]) -> bool:
    """Return True if ``credentials`` configure an integration of this type.

    - leadSource / enrichment: non-empty ``apiKey``
    - email: non-empty ``apiKey``, or both ``username`` and ``password``
    - any other type: never valid
    """
    if isinstance(integration_type, IntegrationType):
        integration_type = integration_type.value
    rule = RULES.get(integration_type)
    if rule is None:
        return False
    return rule(credentials or {})
