"""Error taxonomy for the migration pipeline.

Per-page errors (:class:`FetchError`, :class:`ParseError`,
:class:`SerializationError`, :class:`WriteError`) are caught by the
orchestrator and recorded in the run report.  :class:`CatalogError` is the
only one allowed to stop a run.
"""

from __future__ import annotations


class MigrationError(RuntimeError):
    """Base class for every error raised by blockport.

    Attributes:
        url -- the page being processed when the error happened ("" if none)
    """

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class FetchError(MigrationError):
    """Raised when a URL cannot be fetched.

    Attributes:
        url    -- the URL that failed
        status -- HTTP status code (0 if no response was received)
    """

    def __init__(self, message: str, url: str = "", status: int = 0) -> None:
        super().__init__(message, url=url)
        self.status = status


class ParseError(MigrationError):
    """The structural root of the bound template was not found."""


class SerializationError(MigrationError):
    """The generated markdown is too short to be a real page."""


class WriteError(MigrationError):
    """The markdown file or its parent directories could not be written."""


class CatalogError(MigrationError):
    """The catalog is missing or malformed, or a batch name is unknown."""
