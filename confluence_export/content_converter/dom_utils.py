"""Namespace-aware helpers for walking a parsed storage document.

Tag and attribute names are given the way they appear in storage format,
for example ``"ac:image"`` or ``"ri:filename"``.
"""

from typing import Iterator, List, Optional

import lxml.etree as ET

from .storage_parser import SYNTHETIC_NS_BASE, ElementType, namespace_uri


def is_element(node) -> bool:
    """True for element nodes (comments and processing instructions excluded)."""
    return isinstance(node.tag, str)


def expand_name(name: str) -> str:
    """Turn ``"ac:image"`` into lxml's ``"{uri}image"`` notation."""
    if ":" not in name:
        return name
    prefix, local = name.split(":", 1)
    return f"{{{namespace_uri(prefix)}}}{local}"


def qualified_name(element: ElementType) -> str:
    """Return the storage-format name of an element, e.g. ``"ac:link"``."""
    qname = ET.QName(element)
    if qname.namespace is None:
        return qname.localname

    base = f"{SYNTHETIC_NS_BASE}/"
    if qname.namespace.startswith(base):
        return f"{qname.namespace[len(base):]}:{qname.localname}"
    if element.prefix:
        return f"{element.prefix}:{qname.localname}"
    return qname.localname


def matches_tag(element: ElementType, name: str) -> bool:
    """Check whether an element has the given storage-format name."""
    return is_element(element) and element.tag == expand_name(name)


def get_attribute(element: ElementType, name: str, default: Optional[str] = None) -> Optional[str]:
    """Read an attribute by its storage-format name."""
    return element.get(expand_name(name), default)


def element_text(element: ElementType) -> str:
    """Concatenate all descendant text of an element."""
    return "".join(element.itertext())


def child_elements(element: ElementType) -> Iterator[ElementType]:
    for child in element:
        if is_element(child):
            yield child


def find_child(element: ElementType, name: str) -> Optional[ElementType]:
    """Return the first direct child with the given name."""
    for child in child_elements(element):
        if matches_tag(child, name):
            return child
    return None


def find_children(element: ElementType, name: str) -> List[ElementType]:
    return [child for child in child_elements(element) if matches_tag(child, name)]


def find_child_with_attribute(
    element: ElementType,
    name: str,
    attribute: str,
    value: str,
) -> Optional[ElementType]:
    """Return the first direct child with the given name and attribute value."""
    for child in find_children(element, name):
        if get_attribute(child, attribute) == value:
            return child
    return None


def find_descendants(element: ElementType, name: str) -> List[ElementType]:
    """Return all descendants with the given name in document order."""
    return list(element.iter(expand_name(name)))


def macro_parameter(element: ElementType, name: str) -> Optional[ElementType]:
    """Return the ``ac:parameter`` child of a macro with the given ``ac:name``."""
    return find_child_with_attribute(element, "ac:parameter", "ac:name", name)


def macro_parameter_text(element: ElementType, name: str) -> Optional[str]:
    """Return the trimmed text of a macro parameter, or None when blank."""
    parameter = macro_parameter(element, name)
    if parameter is None:
        return None
    text = element_text(parameter).strip()
    return text or None
