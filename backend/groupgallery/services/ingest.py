"""Ingestion service turning inbound photo events into stored images."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from groupgallery.core.logging import get_logger
from groupgallery.db.models import PRIVATE_CHAT_NAME, Group, Image
from groupgallery.services.media import MediaFetcher
from groupgallery.telegram.exceptions import TelegramError
from groupgallery.utils.filenames import build_filename, extension_for, now_millis

logger = get_logger(__name__)

# Dialects with a native INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {"sqlite": sqlite.insert, "postgresql": postgresql.insert}


@dataclass
class PhotoVariant:
    """One resolution of a posted photo."""

    file_id: str
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass
class PhotoEvent:
    """A photo posted to a chat, independent of the bot library."""

    chat_id: int
    variants: list[PhotoVariant]
    chat_title: str | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    caption: str | None = None

    @property
    def group_name(self) -> str:
        return self.chat_title or PRIVATE_CHAT_NAME

    @property
    def sender(self) -> str:
        """Best-effort display name: handle, else first and last name."""
        if self.username:
            return self.username
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


def select_largest(variants: list[PhotoVariant]) -> PhotoVariant | None:
    """Pick the variant with the most pixels, preferring later ones on ties."""
    best: PhotoVariant | None = None
    for variant in variants:
        if best is None or variant.area >= best.area:
            best = variant
    return best


class IngestStatus(str, Enum):
    """Final outcome of one photo event."""

    SAVED = "saved"  # File on disk and row inserted
    DROPPED = "dropped"  # Nothing kept
    ORPHANED = "orphaned"  # File on disk, metadata insert failed


@dataclass
class StageResult:
    """Outcome of a single pipeline stage."""

    stage: str
    value: Any = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class IngestResult:
    """Outcome of ingesting one photo event."""

    status: IngestStatus
    stages: list[StageResult] = field(default_factory=list)
    filename: str | None = None
    image_id: int | None = None

    @property
    def failed_stages(self) -> list[str]:
        return [s.stage for s in self.stages if not s.ok]


class IngestionService:
    """Runs the group upsert, media fetch and metadata insert for photo events.

    Each stage reports a StageResult instead of raising, and ``ingest``
    decides whether to continue:

    - ``group``: failure is logged, the image is still stored.
    - ``resolve`` / ``download``: failure drops the event, no row is written.
    - ``image``: failure leaves the downloaded file on disk (orphaned).
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        fetcher: MediaFetcher,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        """Initialize the ingestion service.

        Args:
            session_factory: Factory for short-lived database sessions.
            fetcher: Media fetcher bound to the running bot.
            clock: Returns the current Unix time in milliseconds.
        """
        self.session_factory = session_factory
        self.fetcher = fetcher
        self.clock = clock

    async def ingest(self, event: PhotoEvent) -> IngestResult:
        """Store one photo event. Never raises for pipeline failures."""
        log = logger.bind(chat_id=event.chat_id)

        variant = select_largest(event.variants)
        if variant is None:
            log.warning("photo_dropped", reason="no_variants")
            return IngestResult(status=IngestStatus.DROPPED)

        result = IngestResult(status=IngestStatus.DROPPED)

        group = await self.upsert_group(event.chat_id, event.group_name)
        result.stages.append(group)
        if not group.ok:
            log.warning("group_upsert_failed", error=str(group.error))

        resolved = await self.resolve_media(variant.file_id)
        result.stages.append(resolved)
        if not resolved.ok:
            log.error("photo_dropped", stage=resolved.stage, error=str(resolved.error))
            return result

        filename = build_filename(event.chat_id, self.clock(), extension_for(resolved.value))
        downloaded = await self.download_media(resolved.value, filename)
        result.stages.append(downloaded)
        if not downloaded.ok:
            log.error("photo_dropped", stage=downloaded.stage, error=str(downloaded.error))
            return result

        path: Path = downloaded.value
        result.filename = path.name

        inserted = await self.insert_image(
            filename=path.name,
            file_id=variant.file_id,
            sender=event.sender,
            chat_id=event.chat_id,
            caption=event.caption or "",
        )
        result.stages.append(inserted)
        if not inserted.ok:
            result.status = IngestStatus.ORPHANED
            log.error("image_insert_failed", filename=path.name, error=str(inserted.error))
            return result

        result.status = IngestStatus.SAVED
        result.image_id = inserted.value
        log.info("photo_saved", filename=path.name, image_id=inserted.value)
        return result

    async def upsert_group(self, chat_id: int, name: str) -> StageResult:
        """Insert the chat's group row or overwrite its name.

        Concurrent calls for the same chat all succeed; the last write wins.
        """
        try:
            async with self.session_factory() as session:
                insert = UPSERT_INSERTS.get(session.get_bind().dialect.name)
                if insert is None:
                    await self._merge_group(session, chat_id, name)
                else:
                    stmt = insert(Group).values(id=chat_id, name=name)
                    stmt = stmt.on_conflict_do_update(
                        index_elements=[Group.id],
                        set_={"name": stmt.excluded.name},
                    )
                    await session.execute(stmt)
                    await session.commit()
        except SQLAlchemyError as e:
            return StageResult("group", error=e)
        return StageResult("group", value=chat_id)

    @staticmethod
    async def _merge_group(session: AsyncSession, chat_id: int, name: str) -> None:
        """SELECT-then-INSERT upsert for dialects without ON CONFLICT."""
        try:
            await session.merge(Group(id=chat_id, name=name))
            await session.commit()
        except IntegrityError:
            # Another update inserted the row between the SELECT and the INSERT
            await session.rollback()
            await session.merge(Group(id=chat_id, name=name))
            await session.commit()

    async def resolve_media(self, file_id: str) -> StageResult:
        """Resolve a file id to a download URL."""
        try:
            url = await self.fetcher.resolve(file_id)
        except TelegramError as e:
            return StageResult("resolve", error=e)
        return StageResult("resolve", value=url)

    async def download_media(self, url: str, filename: str) -> StageResult:
        """Download to the upload directory; the value is the written path."""
        try:
            path = await self.fetcher.download(url, filename)
        except TelegramError as e:
            return StageResult("download", error=e)
        return StageResult("download", value=path)

    async def insert_image(
        self,
        filename: str,
        file_id: str,
        sender: str,
        chat_id: int,
        caption: str,
    ) -> StageResult:
        """Insert the metadata row; the value is the new image id."""
        try:
            async with self.session_factory() as session:
                image = Image(
                    filename=filename,
                    file_id=file_id,
                    sender=sender,
                    chat_id=chat_id,
                    group_id=chat_id,
                    caption=caption,
                )
                session.add(image)
                await session.flush()
                image_id = image.id
                await session.commit()
        except SQLAlchemyError as e:
            return StageResult("image", error=e)
        return StageResult("image", value=image_id)
