# lovely_docs_mcp/errors.py
"""Error types for loading and querying documentation libraries."""
from __future__ import annotations

import pathlib
from typing import Union


class LovelyDocsError(Exception):
    """Base class for all package errors."""


class ManifestParseError(LovelyDocsError):
    """index.json is missing, is not valid JSON, or does not match the schema."""

    def __init__(self, path: Union[str, pathlib.Path], reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to parse '{self.path}': {reason}")


class MarkdownReadError(LovelyDocsError):
    """A detail-level markdown file exists but could not be read."""

    def __init__(self, path: Union[str, pathlib.Path], reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to read '{self.path}': {reason}")


class QueryError(LovelyDocsError):
    """Typed query failure. Returned by the query layer, not raised."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnknownLibraryError(QueryError):
    """Page index requested for a library key that is not loaded."""


class LibraryNotFoundError(QueryError):
    """Page requested from a library key that is not loaded."""


class PageNotFoundError(QueryError):
    """Path does not resolve, or the node lacks the requested detail level."""
