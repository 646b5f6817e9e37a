"""Unit tests for page_export.asset_fetcher module."""

from unittest.mock import Mock

import pytest

from confluence_export.confluence_client.errors import (
    APIAccessError,
    AttachmentNotFoundError,
    ConversionError,
)
from confluence_export.models.confluence_page import Attachment
from confluence_export.page_export.asset_fetcher import (
    AssetFetcher,
    extract_image_references,
    normalize_subdir,
)
from confluence_export.page_export.filesafe_converter import UniqueNameAllocator
from confluence_export.page_export.models import ImageReference
from confluence_export.page_export.page_fetcher import PageFetcher


def attachment(title, link=True):
    return Attachment(
        id=f"att-{title}",
        title=title,
        download_link=f"/download/attachments/1/{title}" if link else None,
    )


@pytest.fixture
def page_fetcher():
    fetcher = Mock(spec=PageFetcher)
    fetcher.fetch_bytes.side_effect = lambda item: item.title.encode("utf-8")
    return fetcher


class TestExtractImageReferences:
    """Test cases for extract_image_references function."""

    def test_attachment_and_url_images(self):
        """Attachment images carry filenames, external images their URL."""
        storage = (
            '<p>Before</p>'
            '<ac:image ac:alt="Architecture"><ri:attachment ri:filename="arch.png" /></ac:image>'
            '<ac:image><ri:url ri:value="https://example.com/logo.svg" /></ac:image>'
        )

        references = extract_image_references(storage)

        assert references == [
            ImageReference(filename="arch.png", alt="Architecture"),
            ImageReference(filename="https://example.com/logo.svg", alt="image", source="url"),
        ]

    def test_image_without_resource_is_ignored(self):
        """Images with neither an attachment nor a URL yield nothing."""
        assert extract_image_references('<ac:image ac:alt="x"></ac:image>') == []

    def test_no_images(self):
        """Bodies without images yield an empty list."""
        assert extract_image_references("<p>Just text</p>") == []

    def test_image_markup_inside_code_sample_is_ignored(self):
        """Image markup quoted in a CDATA code sample is plain text."""
        storage = (
            '<ac:structured-macro ac:name="code"><ac:plain-text-body><![CDATA['
            'if a > b:\n'
            '    show(\'<ac:image><ri:attachment ri:filename="example.png" /></ac:image>\')'
            ']]></ac:plain-text-body></ac:structured-macro>'
        )

        assert extract_image_references(storage) == []

    def test_images_beside_code_sample_are_found(self):
        """Real images around a code sample are still reported."""
        storage = (
            '<ac:structured-macro ac:name="code"><ac:plain-text-body><![CDATA['
            '<ac:image><ri:attachment ri:filename="quoted.png" /></ac:image>'
            ']]></ac:plain-text-body></ac:structured-macro>'
            '<ac:image><ri:attachment ri:filename="real.png" /></ac:image>'
        )

        assert extract_image_references(storage) == [ImageReference(filename="real.png")]

    def test_malformed_body_raises(self):
        """Bodies the converter rejects are rejected here too."""
        with pytest.raises(ConversionError):
            extract_image_references("<p><b>unclosed</p>")


class TestNormalizeSubdir:
    """Test cases for normalize_subdir function."""

    @pytest.mark.parametrize("value, expected", [
        ("images", "images"),
        ("/assets/img/", "assets/img"),
        ("assets\\img", "assets/img"),
        ("", "."),
    ])
    def test_normalization(self, value, expected):
        """Subdirectories are POSIX paths without surrounding slashes."""
        assert normalize_subdir(value) == expected


class TestFetchImages:
    """Test cases for AssetFetcher.fetch_images method."""

    def test_downloads_each_filename_once(self, page_fetcher):
        """Repeated references download a single file."""
        references = [ImageReference("a.png"), ImageReference("a.png"), ImageReference("b.png")]

        images, mapping = AssetFetcher(page_fetcher).fetch_images(
            "1", references, "images", [attachment("a.png"), attachment("b.png")]
        )

        assert [image.relative_path for image in images] == ["images/a.png", "images/b.png"]
        assert images[0].content == b"a.png"
        assert mapping == {"a.png": "images/a.png", "b.png": "images/b.png"}
        assert page_fetcher.fetch_bytes.call_count == 2

    def test_url_images_are_not_downloaded(self, page_fetcher):
        """External images stay as links."""
        references = [ImageReference("https://example.com/x.png", source="url")]

        images, mapping = AssetFetcher(page_fetcher).fetch_images("1", references, "images", [])

        assert images == []
        assert mapping == {}
        page_fetcher.fetch_bytes.assert_not_called()

    def test_unknown_attachment_raises(self, page_fetcher):
        """An image naming a missing attachment is an error."""
        with pytest.raises(AttachmentNotFoundError) as exc_info:
            AssetFetcher(page_fetcher).fetch_images(
                "42", [ImageReference("gone.png")], "images", [attachment("other.png")]
            )

        assert exc_info.value.filename == "gone.png"
        assert exc_info.value.page_id == "42"

    def test_missing_download_link_raises(self, page_fetcher):
        """An image attachment without a download link cannot be fetched."""
        with pytest.raises(APIAccessError, match="No download link"):
            AssetFetcher(page_fetcher).fetch_images(
                "1", [ImageReference("a.png")], "images", [attachment("a.png", link=False)]
            )

    def test_shared_allocator_avoids_collisions(self, page_fetcher):
        """Pages sharing a directory never overwrite each other's images."""
        allocator = UniqueNameAllocator()
        assets = AssetFetcher(page_fetcher)

        assets.fetch_images("1", [ImageReference("a.png")], "images", [attachment("a.png")], allocator)
        _, mapping = assets.fetch_images(
            "2", [ImageReference("a.png")], "images", [attachment("a.png")], allocator
        )

        assert mapping == {"a.png": "images/a-1.png"}

    def test_unsafe_filename_is_sanitized(self, page_fetcher):
        """Local names lose characters invalid on disk."""
        _, mapping = AssetFetcher(page_fetcher).fetch_images(
            "1", [ImageReference("a:b.png")], "img", [attachment("a:b.png")]
        )

        assert mapping == {"a:b.png": "img/a_b.png"}


class TestFetchAttachments:
    """Test cases for AssetFetcher.fetch_attachments method."""

    def test_downloads_remaining_attachments(self, page_fetcher):
        """Attachments already saved as images are skipped."""
        downloaded = AssetFetcher(page_fetcher).fetch_attachments(
            [attachment("a.png"), attachment("spec.pdf")], {"a.png"}
        )

        assert len(downloaded) == 1
        assert downloaded[0].original_name == "spec.pdf"
        assert downloaded[0].relative_path == "attachments/spec.pdf"
        assert downloaded[0].content == b"spec.pdf"

    def test_attachment_without_link_is_skipped(self, page_fetcher):
        """Attachments without a download link are skipped."""
        downloaded = AssetFetcher(page_fetcher).fetch_attachments(
            [attachment("broken.zip", link=False)], set()
        )

        assert downloaded == []
        page_fetcher.fetch_bytes.assert_not_called()
