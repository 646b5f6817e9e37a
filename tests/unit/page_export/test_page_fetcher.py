"""Unit tests for page_export.page_fetcher module."""

from unittest.mock import Mock

import pytest

from confluence_export.confluence_client.api_wrapper import APIWrapper
from confluence_export.confluence_client.errors import APIAccessError, ConfluenceError
from confluence_export.models.confluence_page import Attachment
from confluence_export.page_export.page_fetcher import PageFetcher


@pytest.fixture
def api():
    api = Mock(spec=APIWrapper)
    api.get_page.return_value = {
        "id": "100",
        "title": "Root",
        "body": {"storage": {"value": "<p>Hi</p>", "representation": "storage"}},
    }
    api.get_child_pages.return_value = [
        {"id": "101", "title": "First"},
        {"id": "102", "title": "Second"},
    ]
    api.get_attachments.return_value = [
        {"id": "att1", "title": "a.png", "_links": {"download": "/download/a.png"}},
    ]
    api.fetch_attachment.return_value = b"bytes"
    return api


class TestPageFetcher:
    """Test cases for PageFetcher class."""

    def test_fetch_page_builds_model(self, api):
        """The API response becomes a Page with its storage body."""
        page = PageFetcher(api).fetch_page("100")

        api.get_page.assert_called_once_with("100")
        assert page.id == "100"
        assert page.body.value == "<p>Hi</p>"

    def test_fetch_children_keeps_order(self, api):
        """Children come back in API order."""
        children = PageFetcher(api).fetch_children("100")

        assert [child.id for child in children] == ["101", "102"]

    def test_fetch_attachments(self, api):
        """Attachments carry their download links."""
        attachments = PageFetcher(api).fetch_attachments("100")

        assert [item.download_link for item in attachments] == ["/download/a.png"]

    def test_fetch_bytes_downloads_link(self, api):
        """Content is downloaded from the attachment's link."""
        attachment = Attachment(id="att1", title="a.png", download_link="/download/a.png")

        assert PageFetcher(api).fetch_bytes(attachment) == b"bytes"
        api.fetch_attachment.assert_called_once_with("/download/a.png")

    def test_fetch_bytes_without_link_raises_api_error(self, api):
        """A missing download link is reported as a Confluence API failure."""
        attachment = Attachment(id="att1", title="a.png", download_link=None)

        with pytest.raises(APIAccessError, match="No download link for attachment: a.png"):
            PageFetcher(api).fetch_bytes(attachment)

        api.fetch_attachment.assert_not_called()

    def test_missing_link_error_is_a_confluence_error(self, api):
        """Callers handling ConfluenceError also catch a missing link."""
        with pytest.raises(ConfluenceError):
            PageFetcher(api).fetch_bytes(Attachment(id="att1", title="a.png"))
