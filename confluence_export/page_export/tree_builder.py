"""Depth-bounded discovery of a page and its descendants.

The tree is built depth-first from a root page. A failure below the root
(a missing child, a network error, a circular reference) is logged and
that child is left out; only failures on the root page itself propagate.
"""

import logging
from typing import Optional, Set

from confluence_export.confluence_client.errors import ExportError
from .errors import CircularReferenceError
from .models import PageTree
from .page_fetcher import PageFetcher

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Builds a PageTree rooted at a given page.

    Example:
        >>> builder = TreeBuilder(fetcher)
        >>> tree = builder.build("123456", max_depth=2)
        >>> print(f"Found {tree.count()} pages")
    """

    def __init__(self, fetcher: PageFetcher):
        self._fetcher = fetcher

    def build(self, root_page_id: str, max_depth: Optional[int] = None) -> PageTree:
        """Build the tree below ``root_page_id``.

        Args:
            root_page_id: Page ID of the root
            max_depth: Deepest level to fetch (0 = root only, None = unbounded)

        Returns:
            PageTree whose root has depth 0

        Raises:
            PageNotFoundError: If the root page doesn't exist
            APIUnreachableError: If API is unreachable
            APIAccessError: If API access fails after retries
            InvalidCredentialsError: If credentials are invalid
        """
        visited: Set[str] = set()
        return self._build_node(root_page_id, 0, max_depth, visited)

    def _build_node(
        self,
        page_id: str,
        depth: int,
        max_depth: Optional[int],
        visited: Set[str],
    ) -> PageTree:
        if page_id in visited:
            raise CircularReferenceError(page_id)
        visited.add(page_id)

        page = self._fetcher.fetch_page(page_id)
        node = PageTree(page=page, depth=depth)

        if max_depth is not None and depth >= max_depth:
            return node

        for child in self._fetcher.fetch_children(page_id):
            try:
                node.children.append(
                    self._build_node(child.id, depth + 1, max_depth, visited)
                )
            except ExportError as e:
                logger.warning(f"Failed to fetch child page {child.id}: {e}")

        logger.info(f"Page {page_id} ('{page.title}'): {len(node.children)} child page(s) at depth {depth + 1}")
        return node
