"""Storage format to AsciiDoc converter."""

import re
from typing import List, Optional

from .base_converter import StorageConverter, wrap_inline
from .tables import TableRow, render_asciidoc_table

ADMONITION_STYLES = {
    "info": "NOTE",
    "note": "NOTE",
    "tip": "TIP",
    "warning": "WARNING",
}

NESTED_LIST_MARKER = re.compile(r'^(?:\*{2,}|\.{2,}) ')
URL_SCHEME = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*:')


def format_list_item(item: str, marker: str) -> str:
    """Render list item content after an AsciiDoc list marker.

    Extra lines are attached to the item with ``+`` list continuations,
    except nested list items which follow directly.
    """
    lines = [line.strip() for line in item.strip().split("\n")]
    if not lines or not lines[0]:
        return f"{marker}\n"

    result = [f"{marker} {lines[0]}\n"]
    for line in lines[1:]:
        if not line:
            continue
        if NESTED_LIST_MARKER.match(line):
            result.append(f"{line}\n")
        else:
            result.append(f"+\n{line}\n")
    return "".join(result)


class AsciiDocConverter(StorageConverter):
    """Renders storage format as AsciiDoc (Asciidoctor dialect)."""

    file_extension = "adoc"
    bullet_marker = "* "

    def heading(self, level: int, text: str) -> str:
        return f"\n{'=' * level} {text}\n\n"

    def strong(self, content: str) -> str:
        return wrap_inline(content, "*")

    def underline(self, content: str) -> str:
        return wrap_inline(content, "[underline]#", "#")

    def strikethrough(self, content: str) -> str:
        return wrap_inline(content, "[line-through]#", "#")

    def subscript(self, content: str) -> str:
        return wrap_inline(content, "~")

    def superscript(self, content: str) -> str:
        return wrap_inline(content, "^")

    def blockquote(self, content: str) -> str:
        return f"\n[quote]\n____\n{content}\n____\n\n"

    def render_list(self, items: List[str], ordered: bool, depth: int) -> str:
        marker = ("." if ordered else "*") * depth
        return "\n" + "".join(format_list_item(item, marker) for item in items) + "\n"

    def link(self, text: str, href: str) -> str:
        if not href:
            return text
        if href.startswith("#"):
            anchor = href[1:]
            return f"<<{anchor},{text}>>" if text else f"<<{anchor}>>"
        if not URL_SCHEME.match(href):
            return f"link:{href}[{text}]"
        if not text or text == href:
            return href
        return f"{href}[{text}]"

    def horizontal_rule(self) -> str:
        return "\n'''\n\n"

    def code_block(self, code: str, language: Optional[str]) -> str:
        style = f"[source,{language}]\n" if language else ""
        return f"\n{style}----\n{code}\n----\n\n"

    def table(self, rows: List[TableRow]) -> str:
        return render_asciidoc_table(rows)

    def image(self, alt: str, source: str) -> str:
        if not source:
            return ""
        return f"\nimage::{source}[{alt}]\n\n"

    def page_link(self, title: str, text: str) -> str:
        if text and text != title:
            return f"<<{title},{text}>>"
        return f"<<{title}>>"

    def attachment_link(self, text: str, filename: str) -> str:
        return f"link:{filename}[{text}]"

    def toc(self) -> str:
        return "\ntoc::[]\n\n"

    def admonition(self, kind: str, title: Optional[str], body: str) -> str:
        style = ADMONITION_STYLES.get(kind)
        lines = ["\n"]
        if style:
            lines.append(f"[{style}]\n")
        heading = title or (None if style else kind.capitalize())
        if heading:
            lines.append(f".{heading}\n")
        lines.append(f"====\n{body}\n====\n\n" if body else "====\n====\n\n")
        return "".join(lines)

    def anchor(self, name: str) -> str:
        return f"[[{name}]]"

    def inert_note(self, text: str) -> str:
        return f"\n[NOTE]\n====\n_{text}_\n====\n\n"
