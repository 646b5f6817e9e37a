"""Confluence client library for page export.

This package wraps the Confluence Cloud REST API: credential resolution,
rate limiting, retries, error translation and page URL parsing.
"""

from .errors import (
    ExportError,
    ConfluenceError,
    InvalidCredentialsError,
    PageNotFoundError,
    AttachmentNotFoundError,
    APIUnreachableError,
    APITimeoutError,
    APIAccessError,
    ConversionError,
    InvalidURLError,
)

__all__ = [
    "ExportError",
    "ConfluenceError",
    "InvalidCredentialsError",
    "PageNotFoundError",
    "AttachmentNotFoundError",
    "APIUnreachableError",
    "APITimeoutError",
    "APIAccessError",
    "ConversionError",
    "InvalidURLError",
]
