"""
Application exceptions.

Services raise these for single-item failures; the handlers registered in
``leadgen_admin.main`` turn them into ``{"success": false, "message": ...}``
responses with the matching status code.
"""


class AppError(Exception):
    """Base exception carrying an HTTP status code."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class ValidationError(AppError):
    """Bad input shape, missing required fields or out-of-range values."""

    status_code = 400


class NotFoundError(AppError):
    """Unknown integration, lead or job id."""

    status_code = 404

    def __init__(self, entity: str, entity_id: str = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")
