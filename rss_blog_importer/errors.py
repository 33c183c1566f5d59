"""
Exception hierarchy for the importer.

Run-fatal errors (the feed cannot be fetched or parsed) abort a whole run.
Per-item errors are caught by the controller and only counted.
"""

from __future__ import annotations


class ImporterError(Exception):
    """Base class for importer errors."""


class FeedFetchError(ImporterError):
    """The feed request failed at the network level or returned a non-2xx status."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FeedParseError(ImporterError):
    """The feed payload could not be parsed as RSS or Atom."""


class PostExistsError(ImporterError, FileExistsError):
    """The derived post path already exists; posts are never overwritten."""

    def __init__(self, path: str):
        super().__init__(f"Post already exists: {path}")
        self.path = path
