"""Typed exception hierarchy for CLI-related errors."""

from confluence_export.confluence_client.errors import ExportError


class CLIError(ExportError):
    """Base exception for all CLI-related errors."""
    pass


class InputError(CLIError):
    """Raised when command-line options are missing or contradictory."""

    def __init__(self, message: str):
        super().__init__(message)
