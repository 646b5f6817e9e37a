"""Handlers for ``ac:structured-macro`` elements.

Each handler has the signature ``handler(macro_name, element, converter)``
and returns rendered text. The converter is both the recursive callback for
nested content and the source of the target syntax, so one table serves
Markdown and AsciiDoc alike.
"""

import logging
from typing import Callable, Dict, Optional

from .decision_macros import handle_decision_macro
from .dom_utils import element_text, find_child, macro_parameter_text
from .emoji import resolve_emoji_macro
from .storage_parser import ElementType

logger = logging.getLogger(__name__)

MacroHandler = Callable[[str, ElementType, object], str]

JIRA_SERVER_PARAMETERS = ("server", "baseurl", "base-url")


def rich_text_body(element: ElementType, converter) -> str:
    """Convert a macro's ``ac:rich-text-body``, trimmed; empty if absent."""
    body = find_child(element, "ac:rich-text-body")
    if body is None:
        return ""
    return converter.convert_children(body).strip()


def handle_toc(macro_name: str, element: ElementType, converter) -> str:
    return converter.toc()


def handle_panel(macro_name: str, element: ElementType, converter) -> str:
    body = rich_text_body(element, converter)
    return converter.blockquote(body) if body else ""


def handle_status(macro_name: str, element: ElementType, converter) -> str:
    title = macro_parameter_text(element, "title") or ""
    return f"`[{title}]`"


def handle_admonition(macro_name: str, element: ElementType, converter) -> str:
    """Render info, note, tip and warning macros."""
    title = macro_parameter_text(element, "title")
    return converter.admonition(macro_name, title, rich_text_body(element, converter))


def handle_excerpt(macro_name: str, element: ElementType, converter) -> str:
    if macro_parameter_text(element, "hidden") == "true":
        return ""

    body = rich_text_body(element, converter)
    if macro_parameter_text(element, "nopanel") == "true":
        return f"{body}\n\n" if body else ""
    return converter.admonition("excerpt", None, body)


def handle_code(macro_name: str, element: ElementType, converter) -> str:
    """Render code and code-block macros as a fenced block."""
    language = macro_parameter_text(element, "language")

    plain = find_child(element, "ac:plain-text-body")
    if plain is not None:
        code = element_text(plain)
    elif find_child(element, "ac:rich-text-body") is not None:
        code = rich_text_body(element, converter)
    else:
        code = element_text(element)

    return converter.code_block(code.strip("\r\n"), language)


def handle_expand(macro_name: str, element: ElementType, converter) -> str:
    title = macro_parameter_text(element, "title") or "Details"
    return converter.details(title, rich_text_body(element, converter))


def handle_emoji(macro_name: str, element: ElementType, converter) -> str:
    return resolve_emoji_macro(element)


def handle_anchor(macro_name: str, element: ElementType, converter) -> str:
    if not converter.options.preserve_anchors:
        return ""

    # The anchor name is the macro's unnamed default parameter
    name = macro_parameter_text(element, "") or element_text(element).strip()
    return converter.anchor(name) if name else ""


def _jira_server(element: ElementType) -> Optional[str]:
    for parameter in JIRA_SERVER_PARAMETERS:
        value = macro_parameter_text(element, parameter)
        if value and value.startswith(("http://", "https://")):
            return value.rstrip("/")
    return None


def handle_jira(macro_name: str, element: ElementType, converter) -> str:
    """Render a single Jira issue as a link; issue queries become a note."""
    key = macro_parameter_text(element, "key")
    if key:
        server = _jira_server(element)
        rendered = converter.link(key, f"{server}/browse/{key}") if server else key
        summary = macro_parameter_text(element, "summary")
        if summary:
            rendered += f": {summary}"
        return rendered

    query = macro_parameter_text(element, "jql") or macro_parameter_text(element, "jqlQuery")
    if not query:
        body = find_child(element, "ac:plain-text-body")
        query = element_text(body).strip() if body is not None else None

    if query:
        return converter.inert_note(
            f"Jira issues macro (JQL: {query}). Dynamic content not exported."
        )
    return converter.inert_note("Jira issues macro (dynamic content not exported).")


MACRO_HANDLERS: Dict[str, MacroHandler] = {
    "toc": handle_toc,
    "panel": handle_panel,
    "status": handle_status,
    "note": handle_admonition,
    "info": handle_admonition,
    "warning": handle_admonition,
    "tip": handle_admonition,
    "excerpt": handle_excerpt,
    "code": handle_code,
    "code-block": handle_code,
    "expand": handle_expand,
    "emoji": handle_emoji,
    "anchor": handle_anchor,
    "decisionreport": handle_decision_macro,
    "decision": handle_decision_macro,
    "decision-list": handle_decision_macro,
    "jira": handle_jira,
}


def render_macro(macro_name: str, element: ElementType, converter) -> str:
    """Dispatch a macro to its handler; unknown macros degrade to their text."""
    handler = MACRO_HANDLERS.get(macro_name)
    if handler is None:
        logger.debug(f"Unknown macro: {macro_name}")
        return element_text(element)
    return handler(macro_name, element, converter)
