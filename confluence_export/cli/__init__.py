"""Command-line interface for exporting Confluence pages.

This package provides the `confluence-export` CLI tool that resolves a page
reference and credentials, then exports the page (or page tree) to Markdown
or AsciiDoc files with progress indication and exit codes per failure class.
"""

from .export_command import ExportCommand
from .models import ExitCode, ExportRequest
from .errors import CLIError, InputError

__all__ = [
    'ExportCommand',
    'ExitCode',
    'ExportRequest',
    'CLIError',
    'InputError',
]
