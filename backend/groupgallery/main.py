"""FastAPI application entry point."""

import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from telegram.error import TelegramError as BotAPIError

from groupgallery.api.exception_handlers import register_exception_handlers
from groupgallery.api.router import api_router
from groupgallery.api.routes import webhook
from groupgallery.core.config import settings
from groupgallery.core.logging import get_logger, setup_logging
from groupgallery.db import async_session_maker, init_db
from groupgallery.schemas.image import UPLOADS_URL_PREFIX
from groupgallery.telegram.exceptions import TelegramNotConfiguredError
from groupgallery.telegram.service import TelegramBotService

# Report page and its assets
PUBLIC_DIR = Path(__file__).parent / "public"
REPORT_PAGE = "report.html"

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.version,
        host=settings.host,
        port=settings.port,
        upload_dir=str(settings.upload_dir),
    )

    await init_db()

    telegram = TelegramBotService(settings, async_session_maker)
    try:
        await telegram.start()
    except TelegramNotConfiguredError as e:
        logger.critical("telegram_not_configured", error=e.message)
        raise
    except BotAPIError as e:
        # The read API stays up; photos are not ingested until restart
        logger.error("bot_start_failed", error=str(e), exc_info=True)
    app.state.telegram = telegram

    yield

    logger.info("shutting_down_application")
    await telegram.stop()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Collects photos posted to Telegram group chats and browses them by group and month",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(api_router)
    app.include_router(webhook.router)

    # Downloaded photos
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=str(settings.upload_dir)), name="uploads")

    @app.get("/", include_in_schema=False)
    async def serve_root() -> FileResponse:
        """Serve the report page."""
        return FileResponse(PUBLIC_DIR / REPORT_PAGE)

    @app.get("/{filename:path}", include_in_schema=False)
    async def serve_static(filename: str) -> FileResponse:
        """Serve other files from the public directory."""
        if filename.startswith("api/"):
            raise HTTPException(status_code=404, detail="Not found")

        file_path = (PUBLIC_DIR / filename).resolve()
        if not file_path.is_relative_to(PUBLIC_DIR.resolve()) or not file_path.is_file():
            raise HTTPException(status_code=404, detail="Not found")
        return FileResponse(file_path)

    return app


# Create the application instance
app = create_app()


def main() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    if not settings.telegram_configured:
        logger.critical("telegram_not_configured", error="TELEGRAM_BOT_TOKEN is missing")
        sys.exit(1)

    uvicorn.run(
        "groupgallery.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
