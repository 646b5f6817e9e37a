"""Export of single pages and page trees to an output directory.

A page tree is written depth-first: a page is written into its directory,
then its children go into ``<directory>/<page filename>/``. A page that
fails is recorded in the summary and its subtree is skipped; the rest of
the tree is still exported.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from confluence_export.confluence_client.errors import ExportError
from confluence_export.models.confluence_page import Page
from .disk_writer import DiskWriter
from .filesafe_converter import FilesafeConverter, UniqueNameAllocator
from .models import ExportSummary, PageFailure, PageTree, ProcessOptions
from .page_processor import PageProcessor

logger = logging.getLogger(__name__)


class PageExporter:
    """Processes pages and writes them with a DiskWriter.

    Example:
        >>> exporter = PageExporter(processor, DiskWriter(), ProcessOptions())
        >>> summary = exporter.export_tree(tree, Path("./confluence-export"))
    """

    def __init__(
        self,
        processor: PageProcessor,
        writer: DiskWriter,
        options: ProcessOptions,
        on_page_done: Optional[Callable[[Page, int], None]] = None,
    ):
        """Initialize the exporter.

        Args:
            processor: Converts pages and downloads assets
            writer: Writes processed pages
            options: Processing options for every page
            on_page_done: Called after each page with the number of pages it
                accounts for (1, plus any descendants skipped after a failure)
        """
        self._processor = processor
        self._writer = writer
        self._options = options
        self._on_page_done = on_page_done
        self._allocators: Dict[Path, Tuple[UniqueNameAllocator, UniqueNameAllocator]] = {}

    def export_page(self, page: Page, directory: Path, summary: Optional[ExportSummary] = None) -> ExportSummary:
        """Export one page, raising if it fails.

        Raises:
            ExportError: If processing or writing the page fails
        """
        summary = summary if summary is not None else ExportSummary()
        image_names, attachment_names = self._allocators_for(Path(directory))

        processed = self._processor.process(page, self._options, image_names, attachment_names)
        target = self._writer.write(processed, Path(directory), self._options.format)

        summary.pages_written += 1
        summary.images += len(processed.images)
        summary.attachments += len(processed.attachments)
        summary.files.append(str(target))
        return summary

    def export_tree(self, tree: PageTree, directory: Path, summary: Optional[ExportSummary] = None) -> ExportSummary:
        """Export a page tree, recording failures instead of raising."""
        summary = summary if summary is not None else ExportSummary()
        page = tree.page

        try:
            self.export_page(page, directory, summary)
        except ExportError as e:
            logger.error(f"Failed to export page {page.id} ('{page.title}'): {e}")
            summary.failures.append(PageFailure(page_id=page.id, title=page.title, error=str(e)))
            skipped = tree.count() - 1
            if skipped:
                logger.warning(f"Skipping {skipped} descendant page(s) of {page.id}")
            self._notify(page, 1 + skipped)
            return summary

        self._notify(page, 1)

        if tree.children:
            child_directory = Path(directory) / FilesafeConverter.title_to_filename(page.title)
            for child in tree.children:
                self.export_tree(child, child_directory, summary)

        return summary

    def _allocators_for(self, directory: Path) -> Tuple[UniqueNameAllocator, UniqueNameAllocator]:
        # Sibling pages share images/ and attachments/ directories
        if directory not in self._allocators:
            self._allocators[directory] = (UniqueNameAllocator(), UniqueNameAllocator())
        return self._allocators[directory]

    def _notify(self, page: Page, count: int) -> None:
        if self._on_page_done is not None:
            self._on_page_done(page, count)
