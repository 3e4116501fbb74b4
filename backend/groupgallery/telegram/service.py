"""Telegram bot service wrapping a python-telegram-bot Application."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from telegram import Update
from telegram.ext import Application

from groupgallery.core.config import Settings
from groupgallery.core.logging import get_logger
from groupgallery.services.ingest import IngestionService
from groupgallery.services.media import MediaFetcher
from groupgallery.telegram.exceptions import (
    TelegramNotConfiguredError,
    TelegramNotRunningError,
    TelegramWebhookForbiddenError,
)
from groupgallery.telegram.handlers import INGEST_SERVICE_KEY, register_handlers

logger = get_logger(__name__)


class TelegramBotService:
    """Owns the bot application and its update intake.

    In polling mode the Application's Updater fetches updates on the running
    event loop. In webhook mode the Updater is disabled and the FastAPI
    webhook route feeds updates through ``process_webhook``.

    Usage:
        telegram = TelegramBotService(settings, async_session_maker)
        await telegram.start()
        ...
        await telegram.stop()
    """

    def __init__(
        self,
        config: Settings,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self.config = config
        self.session_factory = session_factory
        self._application: Application | None = None
        self._fetcher: MediaFetcher | None = None
        self._running: bool = False

    @property
    def application(self) -> Application | None:
        return self._application

    @property
    def running(self) -> bool:
        return self._running

    @property
    def webhook_mode(self) -> bool:
        return self.config.webhook_enabled

    def _ensure_configured(self) -> None:
        """Ensure the bot token is configured.

        Raises:
            TelegramNotConfiguredError: If the token is not set.
        """
        if not self.config.telegram_configured:
            raise TelegramNotConfiguredError(
                "Telegram bot token not configured. "
                "Set the TELEGRAM_BOT_TOKEN environment variable."
            )

    def build(self) -> Application:
        """Build the Application, the media fetcher and the ingestion service."""
        self._ensure_configured()

        builder = Application.builder().token(self.config.telegram_bot_token).concurrent_updates(True)
        if self.webhook_mode:
            builder = builder.updater(None)
        application = builder.build()

        self._fetcher = MediaFetcher(
            bot=application.bot,
            upload_dir=self.config.upload_dir,
            file_base_url=self.config.telegram_file_base_url,
        )
        application.bot_data[INGEST_SERVICE_KEY] = IngestionService(
            session_factory=self.session_factory,
            fetcher=self._fetcher,
        )
        register_handlers(application)

        self._application = application
        return application

    async def start(self) -> None:
        """Initialize the bot and begin receiving updates."""
        application = self._application or self.build()
        await application.initialize()

        if self.webhook_mode:
            await application.bot.set_webhook(
                url=self.config.webhook_url,
                secret_token=self.config.webhook_secret,
                allowed_updates=Update.ALL_TYPES,
            )
            logger.info("bot_started", mode="webhook", url=self.config.webhook_url)
        else:
            if self.config.use_webhook:
                logger.warning(
                    "webhook_url_missing",
                    detail="USE_WEBHOOK is set but BOT_PUBLIC_URL is empty; using polling",
                )
            await application.updater.start_polling(allowed_updates=Update.ALL_TYPES)
            logger.info("bot_started", mode="polling")

        await application.start()
        self._running = True

    async def stop(self) -> None:
        """Stop receiving updates and release network resources."""
        application = self._application
        if application is None:
            return

        if application.updater is not None and application.updater.running:
            await application.updater.stop()
        if application.running:
            await application.stop()
        await application.shutdown()

        if self._fetcher is not None:
            await self._fetcher.close()
        self._running = False
        logger.info("bot_stopped")

    async def process_webhook(self, payload: dict[str, Any], secret_token: str | None) -> None:
        """Queue an update delivered to the webhook endpoint.

        Raises:
            TelegramNotRunningError: If the bot is not running in webhook mode.
            TelegramWebhookForbiddenError: If the secret token does not match.
        """
        application = self._application
        if application is None or not self._running or not self.webhook_mode:
            raise TelegramNotRunningError("Telegram bot is not accepting webhook updates")

        if self.config.webhook_secret and secret_token != self.config.webhook_secret:
            raise TelegramWebhookForbiddenError()

        update = Update.de_json(payload, application.bot)
        await application.update_queue.put(update)
