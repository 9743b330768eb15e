"""Shared schema base and response envelope."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, TypeVar

T = TypeVar("T")


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(ApiModel, Generic[T]):
    """Standard success envelope: ``{"success": true, "data": ...}``."""
    success: bool = True
    data: T


class MessageResponse(ApiModel):
    """Envelope without payload: ``{"success": ..., "message": ...}``."""
    success: bool
    message: str
