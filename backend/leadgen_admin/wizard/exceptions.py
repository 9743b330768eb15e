"""Setup wizard exceptions."""

from typing import Optional


class WizardError(Exception):
    """Base exception for wizard errors."""

    def __init__(self, message: str, remediation: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.remediation = remediation

    def __str__(self) -> str:
        if self.remediation:
            return f"{self.message}\nTo fix: {self.remediation}"
        return self.message


class SetupApiError(WizardError):
    """The admin API answered with an error envelope."""

    def __init__(self, message: str, status_code: int):
        self.status_code = status_code
        remediation = None
        if status_code >= 500:
            remediation = "Check the API server logs"
        super().__init__(message, remediation)
