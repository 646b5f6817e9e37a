"""Fetching of pages and attachments as typed models."""

import logging
from typing import List

from confluence_export.confluence_client.api_wrapper import APIWrapper
from confluence_export.confluence_client.errors import APIAccessError
from confluence_export.models.confluence_page import Attachment, Page

logger = logging.getLogger(__name__)


class PageFetcher:
    """Thin layer over APIWrapper returning Page and Attachment models.

    Any object exposing the APIWrapper methods used here can be passed in,
    which keeps the export pipeline testable without network access.

    Example:
        >>> fetcher = PageFetcher(APIWrapper(Authenticator()))
        >>> page = fetcher.fetch_page("123456")
    """

    def __init__(self, api: APIWrapper):
        self._api = api

    def fetch_page(self, page_id: str) -> Page:
        """Fetch a page with its storage body."""
        return Page.from_api(self._api.get_page(page_id))

    def fetch_children(self, page_id: str) -> List[Page]:
        """Fetch the direct children of a page (bodies not included)."""
        return [Page.from_api(data) for data in self._api.get_child_pages(page_id)]

    def fetch_attachments(self, page_id: str) -> List[Attachment]:
        attachments = [Attachment.from_api(data) for data in self._api.get_attachments(page_id)]
        logger.debug(f"Page {page_id} has {len(attachments)} attachment(s)")
        return attachments

    def fetch_bytes(self, attachment: Attachment) -> bytes:
        """Download an attachment's content.

        Raises:
            APIAccessError: If the attachment has no download link
        """
        if not attachment.download_link:
            raise APIAccessError(f"No download link for attachment: {attachment.title}")
        return self._api.fetch_attachment(attachment.download_link)
