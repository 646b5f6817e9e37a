"""Parsing of Confluence storage-format documents.

Storage format is XHTML with undeclared namespace prefixes (``ac:``, ``ri:``
and friends) and HTML named entities such as ``&nbsp;`` that a strict XML
parser rejects. Parsing therefore happens in three steps:

1. decode_entities() turns HTML entities into characters while keeping the
   five XML entities intact
2. wrap_storage() puts the fragment under a synthetic root that declares
   every prefix in use
3. parse_storage() parses the result strictly with lxml
"""

import html.entities
import logging
import re
from typing import List, Set

import lxml.etree as ET

from confluence_export.confluence_client.errors import ConversionError

logger = logging.getLogger(__name__)

ElementType = ET._Element

SYNTHETIC_NS_BASE = "https://confluence-export.invalid/ns"
WRAPPER_TAG = "confluence-storage"
ALWAYS_DECLARED_PREFIXES = ("ac", "ri")

XML_ENTITIES = frozenset(["lt", "gt", "amp", "quot", "apos"])
XML_ESCAPES = {
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    '"': "&quot;",
    "'": "&apos;",
}

CDATA_PATTERN = re.compile(r'(<!\[CDATA\[.*?\]\]>)', re.DOTALL)
ENTITY_PATTERN = re.compile(
    r'&(?:(#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);)?'
)
INVALID_XML_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]')
XML_DECLARATION = re.compile(r'^\s*<\?xml[^>]*\?>')

ELEMENT_PREFIX_PATTERN = re.compile(r'</?([A-Za-z_][A-Za-z0-9_-]*):[A-Za-z_]')
ATTRIBUTE_PREFIX_PATTERN = re.compile(
    r'\s([A-Za-z_][A-Za-z0-9_-]*):[A-Za-z_][A-Za-z0-9_.-]*\s*='
)
VALID_PREFIX = re.compile(r'^[A-Za-z0-9_-]+$')


def namespace_uri(prefix: str) -> str:
    """Synthetic namespace URI bound to a storage-format prefix."""
    return f"{SYNTHETIC_NS_BASE}/{prefix}"


def is_valid_prefix(prefix: str) -> bool:
    """A prefix is declared only if it is made of ASCII letters, digits, - and _."""
    return bool(VALID_PREFIX.match(prefix)) and prefix.lower() not in ("xml", "xmlns")


def _is_xml_char(codepoint: int) -> bool:
    return (
        codepoint in (0x9, 0xA, 0xD)
        or 0x20 <= codepoint <= 0xD7FF
        or 0xE000 <= codepoint <= 0xFFFD
        or 0x10000 <= codepoint <= 0x10FFFF
    )


def _escape(text: str) -> str:
    return "".join(XML_ESCAPES.get(char, char) for char in text)


def _decode_reference(match: 're.Match') -> str:
    reference = match.group(1)
    if reference is None:
        # A bare ampersand that does not start a reference
        return "&amp;"

    if reference.startswith("#"):
        try:
            if reference[1:2] in ("x", "X"):
                codepoint = int(reference[2:], 16)
            else:
                codepoint = int(reference[1:])
        except ValueError:
            return ""
        if not _is_xml_char(codepoint):
            return ""
        return _escape(chr(codepoint))

    if reference in XML_ENTITIES:
        return match.group(0)

    decoded = html.entities.html5.get(f"{reference};")
    if decoded is None:
        return f"&amp;{reference};"
    return _escape(decoded)


def decode_entities(text: str) -> str:
    """Decode HTML entities so the document becomes well-formed XML.

    ``&lt; &gt; &amp; &quot; &apos;`` are kept as they are. Other named and
    numeric references become the characters they stand for, re-escaped
    when the character is XML-significant. Unknown entity names and stray
    ampersands are escaped, and references to characters XML forbids are
    dropped. CDATA sections are left untouched.

    Example:
        >>> decode_entities("a&nbsp;&amp;&nbsp;b")
        'a\\xa0&amp;\\xa0b'
    """
    parts: List[str] = []
    for segment in CDATA_PATTERN.split(text):
        if segment.startswith("<![CDATA["):
            parts.append(segment)
        else:
            segment = INVALID_XML_CHARS.sub("", segment)
            parts.append(ENTITY_PATTERN.sub(_decode_reference, segment))
    return "".join(parts)


def collect_prefixes(text: str) -> List[str]:
    """Return the sorted namespace prefixes used by element and attribute names."""
    prefixes: Set[str] = set(ALWAYS_DECLARED_PREFIXES)
    for segment in CDATA_PATTERN.split(text):
        if segment.startswith("<![CDATA["):
            continue
        for pattern in (ELEMENT_PREFIX_PATTERN, ATTRIBUTE_PREFIX_PATTERN):
            for prefix in pattern.findall(segment):
                if is_valid_prefix(prefix):
                    prefixes.add(prefix)
    return sorted(prefixes)


def wrap_storage(text: str) -> str:
    """Wrap a storage fragment in a root element declaring its prefixes."""
    declarations = " ".join(
        f'xmlns:{prefix}="{namespace_uri(prefix)}"'
        for prefix in collect_prefixes(text)
    )
    return f"<{WRAPPER_TAG} {declarations}>{text}</{WRAPPER_TAG}>"


def parse_storage(storage: str) -> ElementType:
    """Parse a storage-format document into an lxml element tree.

    Args:
        storage: Storage-format XHTML as returned by the API

    Returns:
        The synthetic root element; its children are the page content

    Raises:
        ConversionError: If the document is not well-formed after decoding
    """
    body = XML_DECLARATION.sub("", storage)
    wrapped = wrap_storage(decode_entities(body))

    parser = ET.XMLParser(
        resolve_entities=False,
        remove_comments=True,
        remove_pis=True,
        strip_cdata=True,
        huge_tree=True,
    )
    try:
        return ET.fromstring(wrapped, parser)
    except ET.XMLSyntaxError as e:
        logger.error(f"Failed to parse storage format ({len(wrapped)} chars): {e}")
        raise ConversionError(
            f"Failed to parse storage format: {e}", document=wrapped
        ) from e
