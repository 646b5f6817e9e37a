"""Discovery and download of images and attachments referenced by a page."""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from confluence_export.confluence_client.errors import APIAccessError, AttachmentNotFoundError
from confluence_export.content_converter.dom_utils import find_child, find_descendants, get_attribute
from confluence_export.content_converter.storage_parser import parse_storage
from confluence_export.models.confluence_page import Attachment
from .filesafe_converter import UniqueNameAllocator
from .models import ATTACHMENTS_DIR, AssetData, DownloadedAttachment, ImageReference
from .page_fetcher import PageFetcher

logger = logging.getLogger(__name__)


def extract_image_references(storage: str) -> List[ImageReference]:
    """Find the images embedded in a storage-format body.

    The body is parsed with the same strict parser the converters use, so
    markup quoted inside CDATA (code samples, for instance) is never taken
    for an embedded image.

    Args:
        storage: Storage-format XHTML

    Returns:
        References in document order. Attachment images carry the attachment
        filename; external images carry their URL with source "url".

    Raises:
        ConversionError: If the body cannot be parsed
    """
    root = parse_storage(storage)
    references = []

    for image in find_descendants(root, "ac:image"):
        alt = get_attribute(image, "ac:alt") or "image"

        url = find_child(image, "ri:url")
        if url is not None and get_attribute(url, "ri:value"):
            references.append(
                ImageReference(filename=get_attribute(url, "ri:value"), alt=alt, source="url")
            )
            continue

        attachment = find_child(image, "ri:attachment")
        if attachment is not None and get_attribute(attachment, "ri:filename"):
            references.append(
                ImageReference(filename=get_attribute(attachment, "ri:filename"), alt=alt)
            )

    return references


def normalize_subdir(subdir: str) -> str:
    """Normalise a relative directory to POSIX form without surrounding slashes."""
    return subdir.replace("\\", "/").strip("/") or "."


class AssetFetcher:
    """Downloads the assets of one page.

    Example:
        >>> fetcher = AssetFetcher(PageFetcher(api))
        >>> images, mapping = fetcher.fetch_images("123", refs, "images", attachments)
    """

    def __init__(self, page_fetcher: PageFetcher):
        self._fetcher = page_fetcher

    def fetch_images(
        self,
        page_id: str,
        references: Iterable[ImageReference],
        images_subdir: str,
        attachments: List[Attachment],
        allocator: Optional[UniqueNameAllocator] = None,
    ) -> Tuple[List[AssetData], Dict[str, str]]:
        """Download the attachment images a page embeds.

        Each distinct filename is downloaded once. External (ri:url) images
        are left as links.

        Args:
            page_id: Page the images belong to
            references: Image references extracted from the body
            images_subdir: Directory for images, relative to the page directory
            attachments: The page's attachments
            allocator: Name allocator shared by pages writing to the same directory

        Returns:
            Downloaded images and a mapping from filename to relative path

        Raises:
            AttachmentNotFoundError: If an image names an unknown attachment
            APIAccessError: If the attachment has no download link
        """
        allocator = allocator or UniqueNameAllocator()
        by_title = {attachment.title: attachment for attachment in attachments}
        subdir = normalize_subdir(images_subdir)

        images: List[AssetData] = []
        mapping: Dict[str, str] = {}

        for reference in references:
            if reference.source != "attachment" or reference.filename in mapping:
                continue

            attachment = by_title.get(reference.filename)
            if attachment is None:
                raise AttachmentNotFoundError(reference.filename, page_id)
            if not attachment.download_link:
                raise APIAccessError(f"No download link for attachment: {attachment.title}")

            content = self._fetcher.fetch_bytes(attachment)
            relative_path = f"{subdir}/{allocator.allocate(reference.filename)}"
            images.append(AssetData(relative_path=relative_path, content=content))
            mapping[reference.filename] = relative_path
            logger.debug(f"Downloaded image {reference.filename} ({len(content)} bytes)")

        return images, mapping

    def fetch_attachments(
        self,
        attachments: List[Attachment],
        skip_titles: Set[str],
        allocator: Optional[UniqueNameAllocator] = None,
    ) -> List[DownloadedAttachment]:
        """Download every attachment not already saved as an image.

        Attachments without a download link are skipped with a warning.
        """
        allocator = allocator or UniqueNameAllocator()
        downloaded = []

        for attachment in attachments:
            if attachment.title in skip_titles:
                continue
            if not attachment.download_link:
                logger.warning(f"Skipping attachment without download link: {attachment.title}")
                continue

            content = self._fetcher.fetch_bytes(attachment)
            downloaded.append(DownloadedAttachment(
                original_name=attachment.title,
                relative_path=f"{ATTACHMENTS_DIR}/{allocator.allocate(attachment.title)}",
                content=content,
            ))

        return downloaded
