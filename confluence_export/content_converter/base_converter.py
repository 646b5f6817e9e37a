"""Element dispatcher shared by the Markdown and AsciiDoc converters.

StorageConverter walks the parsed storage document in document order and
dispatches each element by its storage-format name. Everything that is
target-syntax specific (headings, emphasis markers, lists, admonitions...)
is delegated to hook methods implemented by the subclasses.
"""

import logging
from typing import List, Optional

from confluence_export.models.conversion_options import ConversionOptions

from .decision_macros import convert_adf_extension
from .dom_utils import (
    element_text,
    find_child,
    find_children,
    get_attribute,
    is_element,
    qualified_name,
)
from .emoji import resolve_emoji_element, resolve_span_emoji
from .macro_handlers import render_macro
from .output_cleaner import clean_output
from .storage_parser import ElementType, parse_storage
from .tables import TableRow, collect_rows

logger = logging.getLogger(__name__)

SKIPPED_ELEMENTS = frozenset([
    "ri:url",
    "ac:parameter",
    "ac:task-id",
    "ac:task-status",
    "ac:placeholder",
])

TRANSPARENT_ELEMENTS = frozenset([
    "ac:layout",
    "ac:layout-section",
    "ac:layout-cell",
    "ac:rich-text-body",
])

LEGACY_ADMONITIONS = frozenset(["ac:note", "ac:info", "ac:tip", "ac:warning"])

ELEMENT_HANDLERS = {
    "h1": "convert_heading",
    "h2": "convert_heading",
    "h3": "convert_heading",
    "h4": "convert_heading",
    "h5": "convert_heading",
    "h6": "convert_heading",
    "p": "convert_paragraph",
    "strong": "convert_strong",
    "b": "convert_strong",
    "em": "convert_emphasis",
    "i": "convert_emphasis",
    "u": "convert_underline",
    "s": "convert_strikethrough",
    "del": "convert_strikethrough",
    "code": "convert_code",
    "sub": "convert_subscript",
    "sup": "convert_superscript",
    "blockquote": "convert_blockquote",
    "ul": "convert_list",
    "ol": "convert_list",
    "a": "convert_hyperlink",
    "br": "convert_line_break",
    "hr": "convert_rule",
    "pre": "convert_preformatted",
    "table": "convert_table",
    "time": "convert_time",
    "span": "convert_span",
    "ac:link": "convert_link_macro",
    "ac:image": "convert_image",
    "ac:structured-macro": "convert_macro",
    "ac:macro": "convert_macro",
    "ac:task-list": "convert_task_list",
    "ac:task-body": "convert_task_body",
    "ac:emoji": "convert_emoji",
    "ac:emoticon": "convert_emoji",
    "ac:adf-extension": "convert_adf_extension",
    "ac:note": "convert_legacy_admonition",
    "ac:info": "convert_legacy_admonition",
    "ac:tip": "convert_legacy_admonition",
    "ac:warning": "convert_legacy_admonition",
}


def wrap_inline(content: str, opening: str, closing: Optional[str] = None) -> str:
    """Wrap inline content in markers, keeping surrounding whitespace outside.

    Blank content is returned unchanged so no empty marker pairs are produced.
    """
    if closing is None:
        closing = opening
    stripped = content.strip()
    if not stripped:
        return content
    leading = content[:len(content) - len(content.lstrip())]
    trailing = content[len(content.rstrip()):]
    return f"{leading}{opening}{stripped}{closing}{trailing}"


class StorageConverter:
    """Converts storage-format XHTML into a lightweight markup language.

    Subclasses set ``file_extension`` and implement the syntax hooks.

    Example:
        >>> converter = MarkdownConverter(ConversionOptions(compact_tables=True))
        >>> converter.convert("<p>Hello <strong>world</strong></p>")
        'Hello **world**\\n'
    """

    file_extension = ""
    bullet_marker = "- "

    def __init__(self, options: Optional[ConversionOptions] = None):
        self.options = options or ConversionOptions()
        self._list_depth = 0

    def convert(self, storage: str) -> str:
        """Convert a complete storage document.

        Raises:
            ConversionError: If the document cannot be parsed
        """
        root = parse_storage(storage)
        self._list_depth = 0
        return clean_output(self.convert_children(root))

    def convert_children(self, element: ElementType) -> str:
        """Convert the text and child elements of an element in order."""
        parts = [element.text or ""]
        for child in element:
            if is_element(child):
                parts.append(self.convert_element(child))
            if child.tail:
                parts.append(child.tail)
        return "".join(parts)

    def convert_element(self, element: ElementType) -> str:
        """Dispatch a single element by its qualified name."""
        name = qualified_name(element)
        if name in SKIPPED_ELEMENTS:
            return ""
        if name in TRANSPARENT_ELEMENTS:
            return self.convert_children(element)

        method = ELEMENT_HANDLERS.get(name)
        if method is None:
            logger.debug(f"Unknown tag: {name}")
            return self.convert_children(element)
        return getattr(self, method)(element)

    # Element handlers

    def convert_heading(self, element: ElementType) -> str:
        text = self.convert_children(element).strip()
        if not text:
            return ""
        level = int(qualified_name(element)[1])
        return self.heading(level, text)

    def convert_paragraph(self, element: ElementType) -> str:
        content = self.convert_children(element).strip()
        return f"{content}\n\n" if content else ""

    def convert_strong(self, element: ElementType) -> str:
        return self.strong(self.convert_children(element))

    def convert_emphasis(self, element: ElementType) -> str:
        return wrap_inline(self.convert_children(element), "_")

    def convert_underline(self, element: ElementType) -> str:
        return self.underline(self.convert_children(element))

    def convert_strikethrough(self, element: ElementType) -> str:
        return self.strikethrough(self.convert_children(element))

    def convert_code(self, element: ElementType) -> str:
        return wrap_inline(self.convert_children(element), "`")

    def convert_subscript(self, element: ElementType) -> str:
        return self.subscript(self.convert_children(element))

    def convert_superscript(self, element: ElementType) -> str:
        return self.superscript(self.convert_children(element))

    def convert_blockquote(self, element: ElementType) -> str:
        content = self.convert_children(element).strip()
        return self.blockquote(content) if content else ""

    def convert_list(self, element: ElementType) -> str:
        ordered = qualified_name(element) == "ol"
        self._list_depth += 1
        try:
            items = [self.convert_children(item) for item in find_children(element, "li")]
            return self.render_list(items, ordered, self._list_depth)
        finally:
            self._list_depth -= 1

    def convert_hyperlink(self, element: ElementType) -> str:
        href = element.get("href") or ""
        return self.link(self.convert_children(element).strip(), href)

    def convert_line_break(self, element: ElementType) -> str:
        return "\n"

    def convert_rule(self, element: ElementType) -> str:
        return self.horizontal_rule()

    def convert_preformatted(self, element: ElementType) -> str:
        return self.code_block(element_text(element).strip(), None)

    def convert_table(self, element: ElementType) -> str:
        return self.table(collect_rows(element, self.convert_children))

    def convert_time(self, element: ElementType) -> str:
        text = element_text(element).strip()
        return text or element.get("datetime") or ""

    def convert_span(self, element: ElementType) -> str:
        emoji = resolve_span_emoji(element)
        if emoji is not None:
            return emoji
        return self.convert_children(element)

    def convert_emoji(self, element: ElementType) -> str:
        return resolve_emoji_element(element)

    def convert_image(self, element: ElementType) -> str:
        alt = get_attribute(element, "ac:alt") or "image"

        url = find_child(element, "ri:url")
        if url is not None and get_attribute(url, "ri:value"):
            return self.image(alt, get_attribute(url, "ri:value"))

        attachment = find_child(element, "ri:attachment")
        if attachment is not None and get_attribute(attachment, "ri:filename"):
            return self.image(alt, get_attribute(attachment, "ri:filename"))

        return self.image(alt, "")

    def convert_link_macro(self, element: ElementType) -> str:
        """Render ``ac:link`` pointing at a user, page, attachment or URL."""
        text = self._link_body_text(element)

        user = find_child(element, "ri:user")
        if user is not None:
            return self.user_mention(get_attribute(user, "ri:account-id") or "")

        page = find_child(element, "ri:page")
        if page is not None:
            title = get_attribute(page, "ri:content-title") or get_attribute(page, "ri:value") or ""
            return self.page_link(title, text)

        attachment = find_child(element, "ri:attachment")
        if attachment is not None:
            filename = get_attribute(attachment, "ri:filename") or ""
            return self.attachment_link(text or filename, filename)

        url = find_child(element, "ri:url")
        if url is not None and get_attribute(url, "ri:value"):
            return self.link(text, get_attribute(url, "ri:value"))

        href = get_attribute(element, "ac:href") or element.get("href")
        if href:
            return self.link(text, href)
        return text

    def _link_body_text(self, element: ElementType) -> str:
        plain = find_child(element, "ac:plain-text-link-body")
        if plain is not None:
            return element_text(plain).strip()
        body = find_child(element, "ac:link-body")
        if body is not None:
            return self.convert_children(body).strip()
        return ""

    def convert_macro(self, element: ElementType) -> str:
        name = (get_attribute(element, "ac:name") or "").strip().lower()
        return render_macro(name, element, self)

    def convert_task_list(self, element: ElementType) -> str:
        tasks = []
        for task in find_children(element, "ac:task"):
            status_element = find_child(task, "ac:task-status")
            status = element_text(status_element).strip() if status_element is not None else ""
            body_element = find_child(task, "ac:task-body")
            body = element_text(body_element).strip() if body_element is not None else ""
            tasks.append(self.task(status == "complete", body))
        return "".join(tasks) + "\n"

    def convert_task_body(self, element: ElementType) -> str:
        return element_text(element)

    def convert_adf_extension(self, element: ElementType) -> str:
        return convert_adf_extension(element, self)

    def convert_legacy_admonition(self, element: ElementType) -> str:
        kind = qualified_name(element).split(":", 1)[1]
        return self.admonition(kind, None, self.convert_children(element).strip())

    # Syntax hooks shared by both formats

    def details(self, title: str, body: str) -> str:
        return f"\n<details>\n<summary>{title}</summary>\n\n{body.strip()}\n</details>\n\n"

    def user_mention(self, account_id: str) -> str:
        return f"@user:{account_id}"

    def task(self, complete: bool, body: str) -> str:
        return f"{self.bullet_marker}[{'x' if complete else ' '}] {body}\n"

    # Syntax hooks implemented per format

    def heading(self, level: int, text: str) -> str:
        raise NotImplementedError

    def strong(self, content: str) -> str:
        raise NotImplementedError

    def strong_text(self, text: str) -> str:
        return self.strong(text)

    def underline(self, content: str) -> str:
        raise NotImplementedError

    def strikethrough(self, content: str) -> str:
        raise NotImplementedError

    def subscript(self, content: str) -> str:
        raise NotImplementedError

    def superscript(self, content: str) -> str:
        raise NotImplementedError

    def blockquote(self, content: str) -> str:
        raise NotImplementedError

    def render_list(self, items: List[str], ordered: bool, depth: int) -> str:
        raise NotImplementedError

    def link(self, text: str, href: str) -> str:
        raise NotImplementedError

    def horizontal_rule(self) -> str:
        raise NotImplementedError

    def code_block(self, code: str, language: Optional[str]) -> str:
        raise NotImplementedError

    def table(self, rows: List[TableRow]) -> str:
        raise NotImplementedError

    def image(self, alt: str, source: str) -> str:
        raise NotImplementedError

    def page_link(self, title: str, text: str) -> str:
        raise NotImplementedError

    def attachment_link(self, text: str, filename: str) -> str:
        raise NotImplementedError

    def toc(self) -> str:
        raise NotImplementedError

    def admonition(self, kind: str, title: Optional[str], body: str) -> str:
        raise NotImplementedError

    def anchor(self, name: str) -> str:
        raise NotImplementedError

    def inert_note(self, text: str) -> str:
        raise NotImplementedError
