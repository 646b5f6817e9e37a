"""Turns a fetched page into a ProcessedPage ready for writing.

Processing converts the storage body, downloads the images and
attachments the options ask for, and rewrites references in the converted
document to point at the local copies.
"""

import logging
from typing import Dict, List, Optional

from confluence_export.confluence_client.errors import ConversionError
from confluence_export.models.confluence_page import Attachment, Page
from .asset_fetcher import AssetFetcher, extract_image_references
from .errors import MissingStorageContentError
from .filesafe_converter import FilesafeConverter, UniqueNameAllocator
from .link_rewriter import rewrite_links
from .models import ProcessedPage, ProcessOptions
from .page_fetcher import PageFetcher

logger = logging.getLogger(__name__)


class PageProcessor:
    """Converts pages and gathers their assets.

    Example:
        >>> processor = PageProcessor(PageFetcher(api))
        >>> processed = processor.process(page, ProcessOptions(download_images=True))
        >>> print(processed.filename, len(processed.images))
    """

    def __init__(self, fetcher: PageFetcher):
        self._fetcher = fetcher
        self._assets = AssetFetcher(fetcher)

    def process(
        self,
        page: Page,
        options: ProcessOptions,
        image_names: Optional[UniqueNameAllocator] = None,
        attachment_names: Optional[UniqueNameAllocator] = None,
    ) -> ProcessedPage:
        """Process a single page.

        Args:
            page: Page with its storage body
            options: What to convert and download
            image_names: Allocator for names in the images directory
            attachment_names: Allocator for names in the attachments directory

        Returns:
            ProcessedPage with converted content and downloaded assets

        Raises:
            MissingStorageContentError: If the page has no storage body
            ConversionError: If the body cannot be converted
            AttachmentNotFoundError: If an embedded image is not attached
            ConfluenceError: If downloading an asset fails
        """
        storage = page.storage
        if storage is None:
            raise MissingStorageContentError(page.title)

        filename = FilesafeConverter.title_to_filename(page.title)
        logger.info(f"Converting page {page.id} ('{page.title}') to {options.format.value}")

        try:
            content = options.format.convert(storage, options.conversion_options)
        except ConversionError as e:
            raise ConversionError(
                f"Failed to convert page '{page.title}' to {options.format.value}: "
                f"{e.original_message}",
                document=e.document,
            ) from e

        attachments: Optional[List[Attachment]] = None
        image_mapping: Dict[str, str] = {}
        processed = ProcessedPage(filename=filename, content=content)

        if options.download_images:
            references = [
                reference for reference in extract_image_references(storage)
                if reference.source == "attachment"
            ]
            if references:
                attachments = self._fetcher.fetch_attachments(page.id)
                images, image_mapping = self._assets.fetch_images(
                    page.id, references, options.images_subdir, attachments, image_names
                )
                processed.images = images
                processed.content = rewrite_links(processed.content, image_mapping)

        if options.download_attachments:
            if attachments is None:
                attachments = self._fetcher.fetch_attachments(page.id)
            downloaded = self._assets.fetch_attachments(
                attachments, set(image_mapping), attachment_names
            )
            processed.attachments = downloaded
            processed.content = rewrite_links(
                processed.content,
                {item.original_name: item.relative_path for item in downloaded},
            )

        if options.save_raw:
            processed.raw_storage = storage

        logger.debug(
            f"Processed page {page.id}: {len(processed.images)} image(s), "
            f"{len(processed.attachments)} attachment(s)"
        )
        return processed

