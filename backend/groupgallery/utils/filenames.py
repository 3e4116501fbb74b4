"""Naming helpers for stored photos."""

from __future__ import annotations

import time
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

DEFAULT_EXTENSION = ".jpg"


def now_millis() -> int:
    """Current Unix time in milliseconds."""
    return time.time_ns() // 1_000_000


def extension_for(file_path: str) -> str:
    """Extension of a Bot API file path or URL, defaulting to ``.jpg``.

    >>> extension_for("photos/file_12.png")
    '.png'
    >>> extension_for("photos/file_12")
    '.jpg'
    """
    suffix = PurePosixPath(urlsplit(file_path).path).suffix
    return suffix or DEFAULT_EXTENSION


def build_filename(chat_id: int, millis: int, extension: str) -> str:
    """Build the stored name ``{chat_id}_{millis}{extension}``."""
    return f"{chat_id}_{millis}{extension}"


def disambiguate(filename: str, attempt: int) -> str:
    """Return the name to try on the given collision attempt.

    Attempt 0 is the name itself; later attempts add ``_1``, ``_2``... before
    the extension, like ``555_1700000000000_1.jpg``.
    """
    if attempt == 0:
        return filename
    path = Path(filename)
    return f"{path.stem}_{attempt}{path.suffix}"
