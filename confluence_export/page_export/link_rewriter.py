"""Rewriting of asset references to their downloaded local paths."""

import re
from typing import Dict

MARKDOWN_TARGET = r'\]\(({names})\)'
ASCIIDOC_TARGET = r'(image::|link:)({names})\['


def _names_pattern(mapping: Dict[str, str]) -> str:
    # Longest first so a name is never shadowed by one of its prefixes
    names = sorted(mapping, key=len, reverse=True)
    return "|".join(re.escape(name) for name in names)


def rewrite_links(content: str, mapping: Dict[str, str]) -> str:
    """Point references to original asset names at their local paths.

    Rewrites Markdown targets ``](original)`` as well as AsciiDoc
    ``image::original[`` and ``link:original[`` macros. Local paths always
    use forward slashes. Each occurrence is replaced once, so rewriting a
    document twice with the same mapping changes nothing more.

    Args:
        content: Converted document
        mapping: Original filename → relative local path

    Returns:
        The rewritten document
    """
    mapping = {
        original: local.replace("\\", "/")
        for original, local in mapping.items()
        if original and original != local
    }
    if not mapping:
        return content

    names = _names_pattern(mapping)
    content = re.sub(
        MARKDOWN_TARGET.format(names=names),
        lambda match: f"]({mapping[match.group(1)]})",
        content,
    )
    return re.sub(
        ASCIIDOC_TARGET.format(names=names),
        lambda match: f"{match.group(1)}{mapping[match.group(2)]}[",
        content,
    )
