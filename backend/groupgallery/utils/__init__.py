"""Utility functions for Group Gallery."""

from groupgallery.utils.filenames import (
    DEFAULT_EXTENSION,
    build_filename,
    disambiguate,
    extension_for,
    now_millis,
)

__all__ = [
    "DEFAULT_EXTENSION",
    "build_filename",
    "disambiguate",
    "extension_for",
    "now_millis",
]
