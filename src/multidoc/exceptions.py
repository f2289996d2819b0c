"""Exceptions raised while merging documentation sites."""

from pathlib import Path
from typing import Optional


class MultidocError(Exception):
    """Base exception for all multidoc errors."""


class ConfigError(MultidocError):
    """Raised when a configuration file or option is invalid."""


class StagingError(MultidocError):
    """Raised when the merged tree cannot be assembled."""


class PageError(MultidocError):
    """Base class for problems confined to a single page."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class ParseError(PageError):
    """Raised when a page cannot be parsed at all."""


class NavigationMarkerMissing(PageError):
    """Raised when a page body does not start with the documenter wrapper."""


class SearchIndexBuildError(MultidocError):
    """Raised when a search back end fails to write its index."""
