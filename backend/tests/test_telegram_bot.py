"""Tests for the Telegram handlers, bot service and webhook endpoint."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient
from telegram.ext import Application, MessageHandler

from groupgallery.core.config import Settings
from groupgallery.main import app
from groupgallery.services.ingest import IngestionService
from groupgallery.telegram.exceptions import (
    TelegramNotConfiguredError,
    TelegramNotRunningError,
    TelegramWebhookForbiddenError,
)
from groupgallery.telegram.handlers import (
    INGEST_SERVICE_KEY,
    photo_event_from_message,
    photo_handler,
)
from groupgallery.telegram.service import TelegramBotService

TOKEN = "123456:TEST-token"


@pytest.fixture
def fake_factory():
    """Session factory stand-in; the bot service only hands it on."""
    return MagicMock()


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        _env_file=None,
        telegram_bot_token=TOKEN,
        upload_dir=tmp_path / "uploads",
        use_webhook=False,
        bot_public_url="",
        webhook_secret=None,
    )
    values.update(overrides)
    return Settings(**values)


def make_message(photo=True, title="Family", user=True, caption="hi") -> MagicMock:
    message = MagicMock()
    message.chat.id = 555
    message.chat.title = title
    message.caption = caption
    if user:
        message.from_user.username = None
        message.from_user.first_name = "Ann"
        message.from_user.last_name = "Lee"
    else:
        message.from_user = None
    if photo:
        message.photo = [
            MagicMock(file_id="small", width=90, height=67),
            MagicMock(file_id="large", width=1280, height=960),
        ]
    else:
        message.photo = ()
    return message


# =============================================================================
# Handlers
# =============================================================================


def test_photo_event_from_message() -> None:
    event = photo_event_from_message(make_message())

    assert event.chat_id == 555
    assert event.group_name == "Family"
    assert event.sender == "Ann Lee"
    assert event.caption == "hi"
    assert [v.file_id for v in event.variants] == ["small", "large"]
    assert event.variants[1].width == 1280


def test_photo_event_without_sender() -> None:
    event = photo_event_from_message(make_message(user=False, title=None))

    assert event.sender == ""
    assert event.group_name == "Private"


@pytest.mark.asyncio
async def test_photo_handler_ingests() -> None:
    service = MagicMock()
    service.ingest = AsyncMock()
    update = MagicMock()
    update.effective_message = make_message()
    context = MagicMock()
    context.bot_data = {INGEST_SERVICE_KEY: service}

    await photo_handler(update, context)

    service.ingest.assert_awaited_once()
    event = service.ingest.await_args.args[0]
    assert event.chat_id == 555


@pytest.mark.asyncio
async def test_photo_handler_ignores_messages_without_photo() -> None:
    service = MagicMock()
    service.ingest = AsyncMock()
    update = MagicMock()
    update.effective_message = make_message(photo=False)
    context = MagicMock()
    context.bot_data = {INGEST_SERVICE_KEY: service}

    await photo_handler(update, context)

    service.ingest.assert_not_awaited()


# =============================================================================
# TelegramBotService
# =============================================================================


def test_build_requires_token(tmp_path, fake_factory) -> None:
    service = TelegramBotService(make_settings(tmp_path, telegram_bot_token=None), fake_factory)

    with pytest.raises(TelegramNotConfiguredError) as exc_info:
        service.build()
    assert exc_info.value.code == "NOT_CONFIGURED"


def test_build_wires_ingest_service(tmp_path, fake_factory) -> None:
    service = TelegramBotService(make_settings(tmp_path), fake_factory)

    application = service.build()

    assert isinstance(application, Application)
    ingest = application.bot_data[INGEST_SERVICE_KEY]
    assert isinstance(ingest, IngestionService)
    assert ingest.fetcher.upload_dir == tmp_path / "uploads"
    assert ingest.fetcher.file_base_url == f"https://api.telegram.org/file/bot{TOKEN}/"
    assert any(isinstance(h, MessageHandler) for h in application.handlers[0])


def test_build_webhook_mode_has_no_updater(tmp_path, fake_factory) -> None:
    config = make_settings(tmp_path, use_webhook=True, bot_public_url="https://bot.example.com")
    service = TelegramBotService(config, fake_factory)

    application = service.build()

    assert service.webhook_mode
    assert application.updater is None


def test_webhook_requested_without_url_falls_back_to_polling(tmp_path, fake_factory) -> None:
    config = make_settings(tmp_path, use_webhook=True, bot_public_url="")
    service = TelegramBotService(config, fake_factory)

    application = service.build()

    assert not service.webhook_mode
    assert application.updater is not None


@pytest.mark.asyncio
async def test_process_webhook_requires_running_bot(tmp_path, fake_factory) -> None:
    config = make_settings(tmp_path, use_webhook=True, bot_public_url="https://bot.example.com")
    service = TelegramBotService(config, fake_factory)

    with pytest.raises(TelegramNotRunningError):
        await service.process_webhook({"update_id": 1}, None)


@pytest.mark.asyncio
async def test_process_webhook_checks_secret(tmp_path, fake_factory) -> None:
    config = make_settings(
        tmp_path,
        use_webhook=True,
        bot_public_url="https://bot.example.com",
        webhook_secret="s3cret",
    )
    service = TelegramBotService(config, fake_factory)
    application = service.build()
    service._running = True

    with pytest.raises(TelegramWebhookForbiddenError):
        await service.process_webhook({"update_id": 1}, "wrong")

    await service.process_webhook({"update_id": 2}, "s3cret")
    update = application.update_queue.get_nowait()
    assert update.update_id == 2


@pytest.mark.asyncio
async def test_start_and_stop_webhook_mode(tmp_path, fake_factory) -> None:
    config = make_settings(
        tmp_path,
        use_webhook=True,
        bot_public_url="https://bot.example.com/",
        webhook_secret="s3cret",
    )
    service = TelegramBotService(config, fake_factory)
    application = MagicMock()
    application.initialize = AsyncMock()
    application.start = AsyncMock()
    application.stop = AsyncMock()
    application.shutdown = AsyncMock()
    application.bot.set_webhook = AsyncMock()
    application.updater = None
    application.running = True
    service._application = application

    await service.start()

    application.bot.set_webhook.assert_awaited_once()
    kwargs = application.bot.set_webhook.await_args.kwargs
    assert kwargs["url"] == "https://bot.example.com/telegram/webhook"
    assert kwargs["secret_token"] == "s3cret"
    assert service.running

    await service.stop()

    application.stop.assert_awaited_once()
    application.shutdown.assert_awaited_once()
    assert not service.running


@pytest.mark.asyncio
async def test_start_polling_mode(tmp_path, fake_factory) -> None:
    service = TelegramBotService(make_settings(tmp_path), fake_factory)
    application = MagicMock()
    application.initialize = AsyncMock()
    application.start = AsyncMock()
    application.updater.start_polling = AsyncMock()
    application.bot.set_webhook = AsyncMock()
    service._application = application

    await service.start()

    application.updater.start_polling.assert_awaited_once()
    application.bot.set_webhook.assert_not_awaited()


# =============================================================================
# Webhook endpoint
# =============================================================================


@pytest.fixture
def fake_telegram():
    telegram = MagicMock()
    telegram.running = True
    telegram.process_webhook = AsyncMock()
    app.state.telegram = telegram
    yield telegram
    del app.state.telegram


@pytest.mark.asyncio
async def test_webhook_accepts_update(client: AsyncClient, fake_telegram) -> None:
    response = await client.post(
        "/telegram/webhook",
        json={"update_id": 10},
        headers={"X-Telegram-Bot-Api-Secret-Token": "s3cret"},
    )

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    fake_telegram.process_webhook.assert_awaited_once_with({"update_id": 10}, "s3cret")


@pytest.mark.asyncio
async def test_webhook_wrong_secret_forbidden(client: AsyncClient, fake_telegram) -> None:
    fake_telegram.process_webhook.side_effect = TelegramWebhookForbiddenError()

    response = await client.post("/telegram/webhook", json={"update_id": 10})

    assert response.status_code == 403
    assert response.json()["error"] == "WEBHOOK_FORBIDDEN"


@pytest.mark.asyncio
async def test_webhook_without_bot_unavailable(client: AsyncClient) -> None:
    response = await client.post("/telegram/webhook", json={"update_id": 10})

    assert response.status_code == 503
    assert response.json()["error"] == "NOT_RUNNING"
