"""Unit tests for page_export.exporter module."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from confluence_export.content_converter.output_format import OutputFormat
from confluence_export.models.confluence_page import Page
from confluence_export.page_export.disk_writer import DiskWriter
from confluence_export.page_export.errors import FileExistsConflictError, MissingStorageContentError
from confluence_export.page_export.exporter import PageExporter
from confluence_export.page_export.models import (
    AssetData,
    PageTree,
    ProcessedPage,
    ProcessOptions,
)
from confluence_export.page_export.page_processor import PageProcessor


def node(page_id, title, *children):
    return PageTree(page=Page(id=page_id, title=title), children=list(children))


@pytest.fixture
def processor():
    processor = Mock(spec=PageProcessor)

    def process(page, options, image_names, attachment_names):
        if page.title.startswith("Broken"):
            raise MissingStorageContentError(page.title)
        return ProcessedPage(
            filename=page.title,
            content=f"# {page.title}\n",
            images=[AssetData(relative_path="images/x.png", content=b"x")],
        )

    processor.process.side_effect = process
    return processor


@pytest.fixture
def writer():
    writer = Mock(spec=DiskWriter)
    writer.write.side_effect = (
        lambda page, directory, output_format: Path(directory) / f"{page.filename}.md"
    )
    return writer


class TestExportPage:
    """Test cases for PageExporter.export_page method."""

    def test_summary_counts(self, processor, writer, tmp_path):
        """A written page updates the summary."""
        exporter = PageExporter(processor, writer, ProcessOptions())

        summary = exporter.export_page(Page(id="1", title="Home"), tmp_path)

        assert summary.pages_written == 1
        assert summary.images == 1
        assert summary.attachments == 0
        assert summary.files == [str(tmp_path / "Home.md")]
        writer.write.assert_called_once()
        assert writer.write.call_args[0][2] is OutputFormat.MARKDOWN

    def test_failure_raises(self, processor, writer, tmp_path):
        """A single page export propagates failures."""
        exporter = PageExporter(processor, writer, ProcessOptions())

        with pytest.raises(MissingStorageContentError):
            exporter.export_page(Page(id="1", title="Broken"), tmp_path)

    def test_write_conflict_raises(self, processor, writer, tmp_path):
        """Write conflicts propagate."""
        writer.write.side_effect = FileExistsConflictError(str(tmp_path / "Home.md"))
        exporter = PageExporter(processor, writer, ProcessOptions())

        with pytest.raises(FileExistsConflictError):
            exporter.export_page(Page(id="1", title="Home"), tmp_path)

    def test_allocators_shared_per_directory(self, processor, writer, tmp_path):
        """Pages in the same directory share name allocators."""
        exporter = PageExporter(processor, writer, ProcessOptions())

        exporter.export_page(Page(id="1", title="A"), tmp_path)
        exporter.export_page(Page(id="2", title="B"), tmp_path)
        exporter.export_page(Page(id="3", title="C"), tmp_path / "other")

        first, second, third = processor.process.call_args_list
        assert first[0][2] is second[0][2]
        assert first[0][3] is second[0][3]
        assert first[0][2] is not third[0][2]


class TestExportTree:
    """Test cases for PageExporter.export_tree method."""

    def test_children_go_into_parent_directory(self, processor, writer, tmp_path):
        """Children are written below a directory named after their parent."""
        tree = node("1", "Root", node("2", "Child", node("3", "Leaf")))

        summary = PageExporter(processor, writer, ProcessOptions()).export_tree(tree, tmp_path)

        assert summary.files == [
            str(tmp_path / "Root.md"),
            str(tmp_path / "Root" / "Child.md"),
            str(tmp_path / "Root" / "Child" / "Leaf.md"),
        ]
        assert summary.pages_written == 3
        assert summary.failures == []

    def test_child_directory_uses_safe_title(self, processor, writer, tmp_path):
        """The child directory is the parent's sanitized title."""
        tree = node("1", "Q&A: FAQ", node("2", "Child"))

        summary = PageExporter(processor, writer, ProcessOptions()).export_tree(tree, tmp_path)

        assert summary.files[1] == str(tmp_path / "Q_A_ FAQ" / "Child.md")

    def test_failed_page_skips_subtree(self, processor, writer, tmp_path):
        """A failed page is recorded and its descendants are skipped."""
        tree = node(
            "1", "Root",
            node("2", "Broken", node("3", "Orphan A"), node("4", "Orphan B")),
            node("5", "Sibling"),
        )
        done = []

        summary = PageExporter(
            processor, writer, ProcessOptions(),
            on_page_done=lambda page, count: done.append((page.id, count)),
        ).export_tree(tree, tmp_path)

        assert summary.pages_written == 2
        assert len(summary.failures) == 1
        assert summary.failures[0].page_id == "2"
        assert summary.failures[0].title == "Broken"
        assert "no storage content" in summary.failures[0].error
        assert done == [("1", 1), ("2", 3), ("5", 1)]
        assert sum(count for _, count in done) == tree.count()

    def test_failed_root(self, processor, writer, tmp_path):
        """A failing root is recorded rather than raised."""
        tree = node("1", "Broken root", node("2", "Child"))

        summary = PageExporter(processor, writer, ProcessOptions()).export_tree(tree, tmp_path)

        assert summary.pages_written == 0
        assert [failure.page_id for failure in summary.failures] == ["1"]
        writer.write.assert_not_called()
