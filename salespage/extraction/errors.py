"""
Extraction errors.

Only fetch and parse problems are errors. A selector that matches
nothing, or a candidate that fails validation, is handled inside the
field extractor chain by falling back and never raises.
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for failures that stop a page from being extracted."""

    kind = "extraction"

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.message = message
        self.url = url


class FetchError(ExtractionError):
    """Network failure, non-2xx status or timeout while loading the page."""

    kind = "fetch"


class ParseError(ExtractionError):
    """Fetched payload could not be turned into a document tree."""

    kind = "parse"
