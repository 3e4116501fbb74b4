"""Media fetcher for photos referenced by Telegram file ids."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import aiofiles
import httpx
from telegram.error import TelegramError as BotAPIError

from groupgallery.core.logging import get_logger
from groupgallery.telegram.exceptions import MediaDownloadError, MediaResolveError
from groupgallery.utils.filenames import disambiguate

if TYPE_CHECKING:
    from telegram import Bot

logger = get_logger(__name__)

# Streaming chunk size for downloads
DEFAULT_CHUNK_SIZE = 64 * 1024

# Give up after this many occupied names for one photo
MAX_NAME_ATTEMPTS = 100


def describe_failure(error: Exception) -> str:
    """Summarize a download failure without the request URL.

    File URLs embed the bot token, and httpx puts the URL in its messages.
    """
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}"
    if isinstance(error, OSError):
        return f"{type(error).__name__}: {error.strerror or error}"
    return type(error).__name__


class MediaFetcher:
    """Resolves Bot API file ids and streams the bytes to the upload directory."""

    def __init__(
        self,
        bot: Bot,
        upload_dir: Path,
        file_base_url: str,
        http_client: httpx.AsyncClient | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.bot = bot
        self.upload_dir = upload_dir
        self.file_base_url = file_base_url
        self.chunk_size = chunk_size
        self._client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def resolve(self, file_id: str) -> str:
        """Resolve a file id to a time-limited download URL.

        Raises:
            MediaResolveError: If the Bot API call fails or returns no path.
        """
        try:
            tg_file = await self.bot.get_file(file_id)
        except BotAPIError as e:
            raise MediaResolveError(f"getFile failed for {file_id}: {e}") from e

        file_path = tg_file.file_path
        if not file_path:
            raise MediaResolveError(f"No file path returned for {file_id}")

        # Newer Bot API clients already return an absolute URL
        if file_path.startswith(("http://", "https://")):
            return file_path
        return f"{self.file_base_url}{file_path.lstrip('/')}"

    async def download(self, url: str, filename: str) -> Path:
        """Stream ``url`` into the upload directory under ``filename``.

        The target is created exclusively; if the name is already taken a
        numeric suffix is added. The file is fully written and closed before
        this returns. On failure the partial file is removed.

        Returns:
            Path of the written file.

        Raises:
            MediaDownloadError: On HTTP, network or filesystem errors.
        """
        self.upload_dir.mkdir(parents=True, exist_ok=True)

        for attempt in range(MAX_NAME_ATTEMPTS):
            path = self.upload_dir / disambiguate(filename, attempt)
            try:
                f = await aiofiles.open(path, "xb")
            except FileExistsError:
                continue
            except OSError as e:
                raise MediaDownloadError(f"Cannot create {path.name}: {e}") from e
            break
        else:
            raise MediaDownloadError(f"No free file name for {filename}")

        try:
            try:
                async with self._get_client().stream("GET", url) as response:
                    response.raise_for_status()
                    async for chunk in response.aiter_bytes(self.chunk_size):
                        await f.write(chunk)
            finally:
                await f.close()
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError, OSError) as e:
            path.unlink(missing_ok=True)
            raise MediaDownloadError(f"Download of {path.name} failed: {describe_failure(e)}") from e

        logger.debug("media_downloaded", filename=path.name, size=path.stat().st_size)
        return path
