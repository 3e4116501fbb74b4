"""Application-wide exception handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from groupgallery.core.logging import get_logger
from groupgallery.schemas.error import ErrorResponse

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = get_logger(__name__)

SERVER_ERROR = ErrorResponse(error="server error")


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Log a storage failure and answer with the flat server error body."""
    logger.error(
        "database_query_failed",
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content=SERVER_ERROR.model_dump())


def register_exception_handlers(app: "FastAPI") -> None:
    """Register exception handlers with the FastAPI app."""
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
