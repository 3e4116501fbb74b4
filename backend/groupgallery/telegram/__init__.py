"""Telegram Bot API integration.

Only the exception types are re-exported here; the bot service and handlers
depend on the services package, which in turn raises these exceptions.
"""

from groupgallery.telegram.exceptions import (
    MediaDownloadError,
    MediaResolveError,
    TelegramError,
    TelegramNotConfiguredError,
    TelegramNotRunningError,
    TelegramWebhookForbiddenError,
)

__all__ = [
    "TelegramError",
    "TelegramNotConfiguredError",
    "TelegramNotRunningError",
    "TelegramWebhookForbiddenError",
    "MediaResolveError",
    "MediaDownloadError",
]
