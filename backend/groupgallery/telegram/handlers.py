"""python-telegram-bot update handlers."""

from __future__ import annotations

from telegram import Message, Update
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from groupgallery.core.logging import get_logger
from groupgallery.services.ingest import IngestionService, PhotoEvent, PhotoVariant

logger = get_logger(__name__)

INGEST_SERVICE_KEY = "ingest_service"


def photo_event_from_message(message: Message) -> PhotoEvent:
    """Build a PhotoEvent from a Bot API message carrying a photo."""
    user = message.from_user
    return PhotoEvent(
        chat_id=message.chat.id,
        chat_title=message.chat.title,
        username=user.username if user else None,
        first_name=user.first_name if user else None,
        last_name=user.last_name if user else None,
        caption=message.caption,
        variants=[
            PhotoVariant(file_id=size.file_id, width=size.width, height=size.height)
            for size in message.photo
        ],
    )


async def photo_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Hand a posted photo to the ingestion service."""
    message = update.effective_message
    if message is None or not message.photo:
        return

    service: IngestionService = context.bot_data[INGEST_SERVICE_KEY]
    await service.ingest(photo_event_from_message(message))


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log errors raised by handlers or the polling loop."""
    logger.error(
        "telegram_update_failed",
        error=str(context.error),
        update_id=update.update_id if isinstance(update, Update) else None,
        exc_info=context.error,
    )


def register_handlers(application: Application) -> None:
    """Attach the photo and error handlers to the application."""
    application.add_handler(MessageHandler(filters.UpdateType.MESSAGE & filters.PHOTO, photo_handler))
    application.add_error_handler(error_handler)
