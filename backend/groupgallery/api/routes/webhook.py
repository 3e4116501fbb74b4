"""Telegram webhook endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Header, Request
from fastapi.responses import JSONResponse

from groupgallery.core.logging import get_logger
from groupgallery.schemas.error import TelegramErrorResponse
from groupgallery.telegram import (
    TelegramError,
    TelegramNotRunningError,
    TelegramWebhookForbiddenError,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/telegram", tags=["telegram"])


def telegram_error_response(exc: TelegramError) -> JSONResponse:
    """Create a JSON error response from a TelegramError."""
    content = TelegramErrorResponse(error=exc.code, message=exc.message)

    status_code = 400
    if isinstance(exc, TelegramNotRunningError):
        status_code = 503  # Service Unavailable
    elif isinstance(exc, TelegramWebhookForbiddenError):
        status_code = 403  # Forbidden

    return JSONResponse(status_code=status_code, content=content.model_dump())


@router.post(
    "/webhook",
    responses={
        403: {"model": TelegramErrorResponse},
        503: {"model": TelegramErrorResponse},
    },
)
async def telegram_webhook(
    request: Request,
    payload: dict[str, Any] = Body(...),
    secret_token: str | None = Header(None, alias="X-Telegram-Bot-Api-Secret-Token"),
) -> Any:
    """Receive an update pushed by Telegram."""
    telegram = getattr(request.app.state, "telegram", None)
    if telegram is None:
        return telegram_error_response(TelegramNotRunningError())

    try:
        await telegram.process_webhook(payload, secret_token)
    except TelegramError as e:
        logger.warning("webhook_rejected", code=e.code)
        return telegram_error_response(e)

    return {"ok": True}
