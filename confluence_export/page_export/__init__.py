"""Page export library for Confluence.

This package turns Confluence pages into files on disk: it discovers page
trees, converts page bodies, downloads images and attachments, rewrites
references to the local copies and writes everything out.
"""

from .config_loader import ConfigLoader
from .disk_writer import DiskWriter
from .errors import (
    PageExportError,
    FilesystemError,
    FileExistsConflictError,
    MissingStorageContentError,
    CircularReferenceError,
    ConfigError,
)
from .exporter import PageExporter
from .filesafe_converter import FilesafeConverter, UniqueNameAllocator
from .models import (
    AssetData,
    DownloadedAttachment,
    ExportConfig,
    ExportSummary,
    ImageReference,
    PageTree,
    ProcessedPage,
    ProcessOptions,
)
from .page_fetcher import PageFetcher
from .page_processor import PageProcessor
from .tree_builder import TreeBuilder

__all__ = [
    'AssetData',
    'CircularReferenceError',
    'ConfigError',
    'ConfigLoader',
    'DiskWriter',
    'DownloadedAttachment',
    'ExportConfig',
    'ExportSummary',
    'FileExistsConflictError',
    'FilesafeConverter',
    'FilesystemError',
    'ImageReference',
    'MissingStorageContentError',
    'PageExportError',
    'PageExporter',
    'PageFetcher',
    'PageProcessor',
    'PageTree',
    'ProcessedPage',
    'ProcessOptions',
    'TreeBuilder',
    'UniqueNameAllocator',
]
