"""Error types raised by album and gallery page operations."""

from __future__ import annotations


class AlbumError(Exception):
    """Base class for all album errors surfaced to the caller."""


class StructuralError(AlbumError):
    """A required anchor element (the gallery container) is missing from a page."""


class ConfigurationError(AlbumError):
    """Settings or formatter configuration is invalid."""


class MalformedDocumentError(AlbumError):
    """An HTML document could not be parsed at all."""
