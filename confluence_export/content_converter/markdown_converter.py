"""Storage format to Markdown converter."""

import re
from typing import List, Optional

from .base_converter import StorageConverter, wrap_inline
from .tables import TableRow, render_markdown_table

LIST_MARKER = re.compile(r'^(?:[-*+] |\d+\. )')

ADMONITION_HEADINGS = {
    "info": "Info",
    "note": "Note",
    "tip": "Tip",
    "warning": "Warning",
    "excerpt": "Excerpt",
}


def quote_lines(content: str) -> str:
    """Prefix every line with ``> `` (blank lines get a bare ``>``)."""
    return "\n".join(f"> {line}" if line.strip() else ">" for line in content.split("\n"))


def format_list_item(item: str, prefix: str) -> str:
    """Render converted list item content under a list prefix.

    Continuation lines are indented by the prefix width so nested lists and
    paragraphs stay inside the item. When the item itself starts with a list
    marker, the prefix goes on its own line.
    """
    indentation = " " * len(prefix)
    lines = item.rstrip().split("\n")

    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start >= len(lines):
        return f"{prefix.rstrip()}\n"

    first = lines[start].strip()
    if LIST_MARKER.match(first):
        result = [f"{prefix.rstrip()}\n{indentation}{first}\n"]
    else:
        result = [f"{prefix}{first}\n"]

    for line in lines[start + 1:]:
        if not line.strip():
            result.append("\n")
        else:
            result.append(f"{indentation}{line}\n")
    return "".join(result)


class MarkdownConverter(StorageConverter):
    """Renders storage format as CommonMark with GitHub-style tables and tasks."""

    file_extension = "md"
    bullet_marker = "- "

    def heading(self, level: int, text: str) -> str:
        return f"\n{'#' * level} {text}\n\n"

    def strong(self, content: str) -> str:
        return wrap_inline(content, "**")

    def underline(self, content: str) -> str:
        return wrap_inline(content, "_")

    def strikethrough(self, content: str) -> str:
        return wrap_inline(content, "~~")

    def subscript(self, content: str) -> str:
        return content

    def superscript(self, content: str) -> str:
        return content

    def blockquote(self, content: str) -> str:
        return f"\n{quote_lines(content)}\n\n"

    def render_list(self, items: List[str], ordered: bool, depth: int) -> str:
        rendered = []
        for index, item in enumerate(items):
            prefix = f"{index + 1}. " if ordered else self.bullet_marker
            rendered.append(format_list_item(item, prefix))
        return "\n" + "".join(rendered) + "\n"

    def link(self, text: str, href: str) -> str:
        if not href:
            return text
        if not text or text == href:
            return href
        return f"[{text}]({href})"

    def horizontal_rule(self) -> str:
        return "\n---\n\n"

    def code_block(self, code: str, language: Optional[str]) -> str:
        return f"\n```{language or ''}\n{code}\n```\n\n"

    def table(self, rows: List[TableRow]) -> str:
        return render_markdown_table(rows, compact=self.options.compact_tables)

    def image(self, alt: str, source: str) -> str:
        return f"\n![{alt}]({source})\n\n"

    def page_link(self, title: str, text: str) -> str:
        return f"[[{title}]]"

    def attachment_link(self, text: str, filename: str) -> str:
        return f"[{text}]({filename})"

    def toc(self) -> str:
        return "\n**Table of Contents**\n\n"

    def admonition(self, kind: str, title: Optional[str], body: str) -> str:
        heading = title or ADMONITION_HEADINGS.get(kind, kind.capitalize())
        if not body:
            return f"\n> **{heading}:**\n\n"

        lines = body.split("\n")
        result = [f"\n> **{heading}:** {lines[0]}"]
        for line in lines[1:]:
            result.append(f"\n> {line}" if line.strip() else "\n>")
        result.append("\n\n")
        return "".join(result)

    def anchor(self, name: str) -> str:
        return f'<a id="{name}"></a>'

    def inert_note(self, text: str) -> str:
        return f"\n> _{text}_\n\n"
