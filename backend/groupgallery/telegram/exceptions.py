"""Custom exceptions for Telegram integration."""

from __future__ import annotations


class TelegramError(Exception):
    """Base exception for Telegram-related errors."""

    def __init__(self, message: str, code: str = "TELEGRAM_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class TelegramNotConfiguredError(TelegramError):
    """Raised when the bot token is not configured."""

    def __init__(self, message: str = "TELEGRAM_BOT_TOKEN is not configured"):
        super().__init__(message, "NOT_CONFIGURED")


class TelegramNotRunningError(TelegramError):
    """Raised when the bot application has not been started."""

    def __init__(self, message: str = "Telegram bot is not running"):
        super().__init__(message, "NOT_RUNNING")


class TelegramWebhookForbiddenError(TelegramError):
    """Raised when a webhook request carries the wrong secret token."""

    def __init__(self, message: str = "Invalid webhook secret token"):
        super().__init__(message, "WEBHOOK_FORBIDDEN")


class MediaResolveError(TelegramError):
    """Raised when a file_id cannot be resolved to a download path."""

    def __init__(self, message: str = "Could not resolve media file"):
        super().__init__(message, "MEDIA_RESOLVE_FAILED")


class MediaDownloadError(TelegramError):
    """Raised when media bytes cannot be fetched or written to disk."""

    def __init__(self, message: str = "Could not download media file"):
        super().__init__(message, "MEDIA_DOWNLOAD_FAILED")
