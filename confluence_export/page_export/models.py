"""Data models for page export.

This module defines the values passed between the tree builder, the page
processor and the disk writer.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from confluence_export.content_converter.output_format import OutputFormat
from confluence_export.models.confluence_page import Page
from confluence_export.models.conversion_options import ConversionOptions

ATTACHMENTS_DIR = "attachments"
DEFAULT_IMAGES_DIR = "images"


@dataclass
class PageTree:
    """A page and its descendants as discovered by the tree builder.

    Attributes:
        page: The page at this node
        depth: Distance from the root (the root is 0)
        children: Child nodes in the order returned by Confluence
    """
    page: Page
    depth: int = 0
    children: List['PageTree'] = field(default_factory=list)

    def count(self) -> int:
        """Total number of pages in this subtree."""
        return 1 + sum(child.count() for child in self.children)


@dataclass
class ImageReference:
    """An image embedded in a page body.

    Attributes:
        filename: Attachment filename, or the URL for external images
        alt: Alternative text
        source: "attachment" for ri:attachment images, "url" for ri:url ones
    """
    filename: str
    alt: str = "image"
    source: str = "attachment"


@dataclass
class AssetData:
    """Bytes of a downloaded asset and where they go.

    Attributes:
        relative_path: POSIX path relative to the page's output directory
        content: File content
    """
    relative_path: str
    content: bytes


@dataclass
class DownloadedAttachment:
    """An attachment that was downloaded, and its local path.

    Attributes:
        original_name: Attachment title in Confluence
        relative_path: POSIX path relative to the page's output directory
        content: File content
    """
    original_name: str
    relative_path: str
    content: bytes = b""


@dataclass
class ProcessOptions:
    """Options for turning a page into a ProcessedPage.

    Attributes:
        format: Output format
        save_raw: Keep the raw storage XHTML next to the converted file
        download_images: Download attachment-backed images
        images_subdir: Directory for images, relative to the page directory
        download_attachments: Download every other attachment of the page
        conversion_options: Options passed to the converter
    """
    format: OutputFormat = OutputFormat.MARKDOWN
    save_raw: bool = False
    download_images: bool = False
    images_subdir: str = DEFAULT_IMAGES_DIR
    download_attachments: bool = False
    conversion_options: ConversionOptions = field(default_factory=ConversionOptions)


@dataclass
class ProcessedPage:
    """A converted page with its assets, ready to be written.

    Attributes:
        filename: Sanitized base filename (no extension)
        content: Converted document with links pointing at local assets
        raw_storage: Original storage XHTML when save_raw is set
        images: Downloaded images
        attachments: Downloaded attachments
    """
    filename: str
    content: str
    raw_storage: Optional[str] = None
    images: List[AssetData] = field(default_factory=list)
    attachments: List[DownloadedAttachment] = field(default_factory=list)


@dataclass
class ExportConfig:
    """Export defaults read from the YAML configuration file.

    Attributes mirror the command-line options of the same names.
    """
    output_dir: str = "./confluence-export"
    format: OutputFormat = OutputFormat.MARKDOWN
    images_dir: str = DEFAULT_IMAGES_DIR
    download_images: bool = True
    download_attachments: bool = False
    children: bool = False
    max_depth: Optional[int] = None
    overwrite: bool = False
    save_raw: bool = False
    preserve_anchors: bool = False
    compact_tables: bool = False
    rate_limit: int = 10
    timeout: int = 30
    url: Optional[str] = None


@dataclass
class PageFailure:
    """A page that could not be exported.

    Attributes:
        page_id: ID of the failed page
        title: Title of the failed page
        error: Error message
    """
    page_id: str
    title: str
    error: str


@dataclass
class ExportSummary:
    """Outcome of an export run.

    Attributes:
        pages_written: Number of page documents written
        images: Number of images written
        attachments: Number of attachments written
        files: Paths of the written page documents
        failures: Pages that failed (their subtrees are skipped)
    """
    pages_written: int = 0
    images: int = 0
    attachments: int = 0
    files: List[str] = field(default_factory=list)
    failures: List[PageFailure] = field(default_factory=list)
