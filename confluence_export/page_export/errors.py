"""Typed exception hierarchy for page export errors.

This module defines the exceptions raised while building page trees,
processing pages and writing them to disk. All exceptions inherit from
PageExportError, itself an ExportError.
"""

from typing import Optional

from confluence_export.confluence_client.errors import ExportError


class PageExportError(ExportError):
    """Base exception for all page export errors."""
    pass


class FilesystemError(PageExportError):
    """Raised when filesystem operations fail (read, write, permissions, etc)."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class FileExistsConflictError(FilesystemError):
    """Raised when an output file exists and overwriting is disabled."""

    def __init__(self, file_path: str):
        PageExportError.__init__(
            self,
            f"File already exists: {file_path}. Use --overwrite to replace it."
        )
        self.file_path = file_path
        self.operation = 'write'
        self.reason = 'already exists'


class MissingStorageContentError(PageExportError):
    """Raised when a page has no storage-format body to convert."""

    def __init__(self, title: str):
        super().__init__(f"Page '{title}' has no storage content")
        self.title = title


class CircularReferenceError(PageExportError):
    """Raised when a page appears twice on one path of the page tree."""

    def __init__(self, page_id: str):
        super().__init__(
            f"Circular reference detected: page {page_id} already visited"
        )
        self.page_id = page_id


class ConfigError(PageExportError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message
