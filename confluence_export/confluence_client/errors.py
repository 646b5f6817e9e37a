"""Typed exception hierarchy for Confluence-related errors.

This module defines the exceptions raised while talking to Confluence and
while parsing the storage format it returns. All of them inherit from
ExportError so callers can catch any application-level failure at once.
"""

from typing import Optional


# Size of the wrapped-input excerpt attached to parse failures
DOCUMENT_DUMP_LIMIT = 1000


class ExportError(Exception):
    """Base exception for all confluence-export errors.

    Use this to catch any application-level error from the export tool.
    """
    pass


class ConfluenceError(ExportError):
    """Base exception for all Confluence-related errors."""
    pass


class InvalidCredentialsError(ConfluenceError):
    """Raised when API credentials are missing, invalid or lack permission."""

    def __init__(self, user: str, endpoint: str):
        super().__init__(
            f"API key is invalid (user: {user}, endpoint: {endpoint})"
        )
        self.user = user
        self.endpoint = endpoint


class PageNotFoundError(ConfluenceError):
    """Raised when a requested page does not exist."""

    def __init__(self, page_id: str):
        super().__init__(f"Page {page_id} not found")
        self.page_id = page_id


class AttachmentNotFoundError(ConfluenceError):
    """Raised when an embedded image names an attachment the page does not have."""

    def __init__(self, filename: str, page_id: Optional[str] = None):
        if page_id:
            message = f"Attachment not found: {filename} (page {page_id})"
        else:
            message = f"Attachment not found: {filename}"
        super().__init__(message)
        self.filename = filename
        self.page_id = page_id


class APIUnreachableError(ConfluenceError):
    """Raised when the Confluence API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APITimeoutError(APIUnreachableError):
    """Raised when a request to the Confluence API exceeds its timeout."""

    def __init__(self, endpoint: str, timeout: float):
        ConfluenceError.__init__(
            self, f"API request to {endpoint} timed out after {timeout}s"
        )
        self.endpoint = endpoint
        self.timeout = timeout


class APIAccessError(ConfluenceError):
    """Raised when API access fails after retries or due to access restrictions."""

    def __init__(self, message: str = "Confluence API failure (after 3 retries)"):
        super().__init__(message)


class ConversionError(ConfluenceError):
    """Raised when storage-format content cannot be parsed or converted.

    When the offending document is given, a truncated copy of it is appended
    to the message so the failing markup can be inspected from the log.
    """

    def __init__(self, message: str, document: Optional[str] = None):
        self.original_message = message
        self.document = document
        if document is not None:
            excerpt = document[:DOCUMENT_DUMP_LIMIT]
            if len(document) > DOCUMENT_DUMP_LIMIT:
                excerpt += f"... [truncated, {len(document)} chars total]"
            message = f"{message}\n--- document ---\n{excerpt}"
        super().__init__(message)


class InvalidURLError(ConfluenceError):
    """Raised when a page URL or page ID cannot be interpreted."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Invalid page reference '{url}': {reason}")
        self.url = url
        self.reason = reason
