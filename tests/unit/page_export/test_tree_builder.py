"""Unit tests for page_export.tree_builder module."""

from unittest.mock import Mock

import pytest

from confluence_export.confluence_client.errors import APIAccessError, PageNotFoundError
from confluence_export.models.confluence_page import Page
from confluence_export.page_export.page_fetcher import PageFetcher
from confluence_export.page_export.tree_builder import TreeBuilder


def make_fetcher(titles, children, missing=()):
    """Create a fetcher mock serving a fixed page hierarchy.

    Args:
        titles: Page ID → title
        children: Page ID → list of child page IDs
        missing: Page IDs that raise PageNotFoundError
    """
    fetcher = Mock(spec=PageFetcher)

    def fetch_page(page_id):
        if page_id in missing:
            raise PageNotFoundError(page_id)
        return Page(id=page_id, title=titles[page_id])

    def fetch_children(page_id):
        return [Page(id=child_id, title=titles.get(child_id, "")) for child_id in children.get(page_id, [])]

    fetcher.fetch_page.side_effect = fetch_page
    fetcher.fetch_children.side_effect = fetch_children
    return fetcher


TITLES = {"1": "Root", "2": "Child A", "3": "Child B", "4": "Grandchild"}
CHILDREN = {"1": ["2", "3"], "2": ["4"]}


class TestTreeBuilder:
    """Test cases for TreeBuilder.build method."""

    def test_full_tree(self):
        """Without a depth limit all descendants are discovered in order."""
        tree = TreeBuilder(make_fetcher(TITLES, CHILDREN)).build("1")

        assert tree.page.title == "Root"
        assert tree.depth == 0
        assert [child.page.id for child in tree.children] == ["2", "3"]
        assert tree.children[0].children[0].page.title == "Grandchild"
        assert tree.children[0].children[0].depth == 2
        assert tree.count() == 4

    def test_max_depth_zero(self):
        """Depth 0 returns only the root without listing children."""
        fetcher = make_fetcher(TITLES, CHILDREN)

        tree = TreeBuilder(fetcher).build("1", max_depth=0)

        assert tree.count() == 1
        fetcher.fetch_children.assert_not_called()

    def test_max_depth_one(self):
        """Depth 1 stops after the direct children."""
        tree = TreeBuilder(make_fetcher(TITLES, CHILDREN)).build("1", max_depth=1)

        assert tree.count() == 3
        assert all(not child.children for child in tree.children)

    def test_circular_reference_is_skipped(self):
        """A child pointing back at an ancestor is left out."""
        fetcher = make_fetcher({"1": "Root", "2": "Loop"}, {"1": ["2"], "2": ["1"]})

        tree = TreeBuilder(fetcher).build("1")

        assert tree.count() == 2
        assert tree.children[0].children == []

    def test_missing_child_is_skipped(self):
        """A child that cannot be fetched does not abort the tree."""
        fetcher = make_fetcher(TITLES, CHILDREN, missing={"2"})

        tree = TreeBuilder(fetcher).build("1")

        assert [child.page.id for child in tree.children] == ["3"]

    def test_child_network_error_is_skipped(self):
        """API failures on a child are logged, not raised."""
        fetcher = make_fetcher(TITLES, CHILDREN)
        original = fetcher.fetch_page.side_effect

        def flaky(page_id):
            if page_id == "3":
                raise APIAccessError()
            return original(page_id)

        fetcher.fetch_page.side_effect = flaky

        tree = TreeBuilder(fetcher).build("1")

        assert [child.page.id for child in tree.children] == ["2"]

    def test_missing_root_raises(self):
        """Failures on the root page propagate."""
        fetcher = make_fetcher(TITLES, CHILDREN, missing={"1"})

        with pytest.raises(PageNotFoundError):
            TreeBuilder(fetcher).build("1")
