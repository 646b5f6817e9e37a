"""Parsing of Confluence page URLs and page ID arguments.

Supported URL formats:
    https://example.atlassian.net/wiki/spaces/SPACE/pages/123456/Title
    https://example.atlassian.net/wiki/spaces/SPACE/pages/123456
    https://confluence.example.com/pages/123456
"""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from .errors import InvalidURLError

PAGE_ID_PATTERN = re.compile(r'^\d+$')


@dataclass
class UrlInfo:
    """Components extracted from a Confluence page URL.

    Attributes:
        base_url: Scheme and host, e.g. "https://example.atlassian.net"
        page_id: Numeric page ID
        space_key: Space key when the URL contains a spaces/<KEY> segment
    """
    base_url: str
    page_id: str
    space_key: Optional[str] = None


def is_page_id(value: str) -> bool:
    """Return True when the value is a bare numeric page ID."""
    return bool(PAGE_ID_PATTERN.match(value.strip()))


def parse_confluence_url(url: str) -> UrlInfo:
    """Extract base URL, page ID and space key from a page URL.

    Args:
        url: Full Confluence page URL

    Returns:
        UrlInfo with the parsed components

    Raises:
        InvalidURLError: If the URL is malformed or has no numeric page ID
    """
    parsed = urlparse(url.strip())

    if parsed.scheme not in ('http', 'https'):
        raise InvalidURLError(url, "Invalid URL format")
    if not parsed.hostname:
        raise InvalidURLError(url, "URL missing host")

    base_url = f"{parsed.scheme}://{parsed.netloc.rsplit('@', 1)[-1]}"
    segments = [segment for segment in parsed.path.split('/') if segment]

    if 'pages' not in segments:
        raise InvalidURLError(url, "URL does not contain 'pages' segment")

    pages_index = segments.index('pages')
    if pages_index + 1 >= len(segments):
        raise InvalidURLError(
            url, "URL does not contain page ID after 'pages' segment"
        )

    page_id = segments[pages_index + 1]
    if not PAGE_ID_PATTERN.match(page_id):
        raise InvalidURLError(url, f"Page ID is not numeric: {page_id}")

    space_key = None
    if 'spaces' in segments:
        spaces_index = segments.index('spaces')
        if spaces_index + 1 < pages_index:
            space_key = segments[spaces_index + 1]

    return UrlInfo(base_url=base_url, page_id=page_id, space_key=space_key)


def resolve_page_input(value: str, base_url: Optional[str] = None) -> UrlInfo:
    """Interpret the page argument, which is either a URL or a numeric ID.

    Args:
        value: Page URL or numeric page ID
        base_url: Base URL used with a numeric ID

    Returns:
        UrlInfo for the page

    Raises:
        InvalidURLError: If the value is neither a page URL nor a numeric ID,
            or if a numeric ID is given without a base URL
    """
    value = value.strip()

    if is_page_id(value):
        if not base_url:
            raise InvalidURLError(
                value, "--url is required when using a numeric page ID"
            )
        return UrlInfo(base_url=normalize_base_url(base_url), page_id=value)

    if '://' not in value:
        raise InvalidURLError(value, f"Page ID is not numeric: {value}")

    return parse_confluence_url(value)


def normalize_base_url(base_url: str) -> str:
    """Strip trailing slashes and a trailing /wiki context path."""
    normalized = base_url.strip().rstrip('/')
    if normalized.endswith('/wiki'):
        normalized = normalized[:-len('/wiki')]
    return normalized
