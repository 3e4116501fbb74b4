"""Error response schemas."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Flat error body returned for server-side failures."""

    error: str


class TelegramErrorResponse(BaseModel):
    """Error body for webhook failures."""

    error: str
    message: str
