"""Resolution of Confluence emoji markup to Unicode characters.

Confluence stores emoji as ``ac:emoji`` / ``ac:emoticon`` elements, as an
``emoji`` macro, or as spans carrying ``data-emoji-*`` attributes. All of
them may name the emoji by a hex code point id (``1f600``, ``1f44d-1f3fb``),
a fallback character, a shortcut or a shortname.
"""

from typing import Optional

from .dom_utils import element_text, get_attribute, macro_parameter_text
from .storage_parser import ElementType

EMOJI_ID_PREFIXES = ("emoji-", "emoji/")
SPAN_EMOJI_ATTRIBUTES = ("data-emoji-id", "data-emoji-shortname", "data-emoji-fallback")


def emoji_id_to_unicode(emoji_id: Optional[str]) -> Optional[str]:
    """Convert a hex emoji id such as ``"1f44d-1f3fb"`` into characters.

    Code points may be separated by ``-`` or ``_``; an ``emoji-`` or
    ``emoji/`` prefix is ignored.

    Returns:
        The emoji string, or None if the id is empty or not valid hex
    """
    if not emoji_id:
        return None

    value = emoji_id.strip()
    for prefix in EMOJI_ID_PREFIXES:
        if value.startswith(prefix):
            value = value[len(prefix):]
    if not value:
        return None

    characters = []
    for part in value.replace("_", "-").split("-"):
        if not part:
            continue
        try:
            codepoint = int(part, 16)
        except ValueError:
            return None
        if codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
            return None
        characters.append(chr(codepoint))

    return "".join(characters) or None


def _first_present(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value and value.strip():
            return value.strip()
    return None


def resolve_emoji_element(element: ElementType) -> str:
    """Render an ``ac:emoji`` or ``ac:emoticon`` element."""
    resolved = emoji_id_to_unicode(get_attribute(element, "ac:emoji-id"))
    if resolved:
        return resolved

    return _first_present(
        get_attribute(element, "ac:emoji-fallback"),
        get_attribute(element, "ac:shortcut"),
        get_attribute(element, "ac:shortname"),
        get_attribute(element, "ac:emoji-shortname"),
        element_text(element),
    ) or ""


def has_emoji_metadata(element: ElementType) -> bool:
    """True if a span carries any ``data-emoji-*`` attribute."""
    return any(element.get(name) is not None for name in SPAN_EMOJI_ATTRIBUTES)


def resolve_span_emoji(element: ElementType) -> Optional[str]:
    """Render a span with emoji metadata, or None if nothing usable is present."""
    if not has_emoji_metadata(element):
        return None

    resolved = emoji_id_to_unicode(element.get("data-emoji-id"))
    if resolved:
        return resolved

    return _first_present(
        element_text(element),
        element.get("data-emoji-shortname"),
        element.get("data-emoji-fallback"),
    )


def resolve_emoji_macro(element: ElementType) -> str:
    """Render an ``emoji`` structured macro from its parameters."""
    resolved = emoji_id_to_unicode(macro_parameter_text(element, "emoji-id"))
    if resolved:
        return resolved

    return _first_present(
        macro_parameter_text(element, "emoji-fallback"),
        macro_parameter_text(element, "emoji"),
        macro_parameter_text(element, "shortcut"),
        macro_parameter_text(element, "shortname"),
    ) or ""
