"""Data models for CLI operations.

This module defines the exit codes of the confluence-export command and the
request object that carries command-line options to the export command.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Export completed successfully
    - GENERAL_ERROR (1): Conversion, filesystem or partial tree failures
    - INPUT_ERROR (2): Invalid page reference, options or configuration
    - AUTH_ERROR (3): Authentication or authorization failure
    - NETWORK_ERROR (4): Network connectivity, timeout or API availability issues

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    INPUT_ERROR = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class ExportRequest:
    """Options given on the command line.

    Options left as None fall back to the configuration file and then to
    the built-in defaults. Flags can only switch features on.

    Attributes:
        page: Page URL or numeric page ID
        url: Confluence base URL
        user: Confluence user email
        token: Confluence API token
        output_dir: Output directory
        format: Output format name
        overwrite: Replace existing files
        children: Export descendant pages
        max_depth: Maximum depth below the root page
        download_attachments: Download all attachments
        download_images: Download embedded images
        images_dir: Images subdirectory name
        preserve_anchors: Keep anchor macros as anchors
        compact_tables: Render tables without padding
        save_raw: Also write the raw storage format
        rate_limit: Maximum requests per second
        timeout: Request timeout in seconds
        config_path: YAML configuration file
        dry_run: Only show what would be exported
        check_auth: Only verify the credentials

    Example:
        >>> request = ExportRequest(page="https://example.atlassian.net/wiki/spaces/DOC/pages/123")
    """
    page: Optional[str] = None
    url: Optional[str] = None
    user: Optional[str] = None
    token: Optional[str] = None
    output_dir: Optional[str] = None
    format: Optional[str] = None
    overwrite: bool = False
    children: bool = False
    max_depth: Optional[int] = None
    download_attachments: bool = False
    download_images: Optional[bool] = None
    images_dir: Optional[str] = None
    preserve_anchors: bool = False
    compact_tables: bool = False
    save_raw: bool = False
    rate_limit: Optional[int] = None
    timeout: Optional[int] = None
    config_path: Optional[str] = None
    dry_run: bool = False
    check_auth: bool = False
