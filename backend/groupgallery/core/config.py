"""Application configuration using pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Install path of the package; default storage lives beside it
PACKAGE_DIR = Path(__file__).resolve().parent.parent

TELEGRAM_API_BASE = "https://api.telegram.org"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Group Gallery"
    version: str = "0.1.0"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=5003, description="HTTP listen port")

    # Storage
    upload_dir: Path = Field(
        default=PACKAGE_DIR / "uploads",
        description="Directory downloaded photos are written to",
    )
    database_url: str = Field(
        default=f"sqlite+aiosqlite:///{PACKAGE_DIR / 'groupgallery.db'}",
        description="Async SQLAlchemy database URL",
    )

    # CORS
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )

    # Telegram Bot API
    telegram_bot_token: str | None = Field(
        default=None,
        description="Bot token from @BotFather",
    )
    use_webhook: bool = Field(
        default=False,
        description="Receive updates through a webhook instead of long polling",
    )
    bot_public_url: str = Field(
        default="",
        description="Public base URL Telegram posts webhook updates to",
    )
    webhook_secret: str | None = Field(
        default=None,
        description="Secret token Telegram echoes in X-Telegram-Bot-Api-Secret-Token",
    )

    @property
    def telegram_configured(self) -> bool:
        """Check if the bot token is configured."""
        return bool(self.telegram_bot_token)

    @property
    def webhook_enabled(self) -> bool:
        """Webhook mode needs both the switch and a public URL."""
        return self.use_webhook and bool(self.bot_public_url)

    @property
    def webhook_url(self) -> str:
        """Get the full URL Telegram should deliver updates to."""
        return f"{self.bot_public_url.rstrip('/')}/telegram/webhook"

    @property
    def telegram_file_base_url(self) -> str:
        """Get the base URL relative Bot API file paths are resolved against."""
        return f"{TELEGRAM_API_BASE}/file/bot{self.telegram_bot_token}/"


# Global settings instance
settings = Settings()
