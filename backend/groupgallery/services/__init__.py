"""Business logic services for Group Gallery."""

from groupgallery.services.ingest import (
    IngestionService,
    IngestResult,
    IngestStatus,
    PhotoEvent,
    PhotoVariant,
    StageResult,
    select_largest,
)
from groupgallery.services.media import MediaFetcher

__all__ = [
    "IngestResult",
    "IngestStatus",
    "IngestionService",
    "MediaFetcher",
    "PhotoEvent",
    "PhotoVariant",
    "StageResult",
    "select_largest",
]
