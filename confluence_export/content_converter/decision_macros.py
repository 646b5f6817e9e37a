"""Rendering of decision macros and ADF decision lists.

Confluence has two representations of decisions:

* the legacy ``decision``, ``decision-list`` and ``decisionreport``
  structured macros, whose data lives in ``ac:parameter`` elements
* ``ac:adf-extension`` blocks wrapping an ADF ``decision-list`` node, whose
  items carry ``ac:adf-attribute`` key/value pairs and ADF paragraphs

Both are rendered as a list of decision summaries. Decision reports are
dynamic queries and are rendered as an inert note.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .dom_utils import (
    child_elements,
    element_text,
    find_child,
    find_children,
    find_descendants,
    get_attribute,
    is_element,
    macro_parameter,
    macro_parameter_text,
    matches_tag,
)
from .storage_parser import ElementType

UNTITLED_DECISION = "Untitled decision"

ADF_TITLE_KEYS = ("title", "text", "value")
ADF_STATUS_KEYS = ("state", "status")
ADF_OWNER_KEYS = (
    "owner", "owner-id", "ownerid", "assignee", "assignee-id", "decider",
    "atlassian:user-context",
)
ADF_DATE_KEYS = ("date", "decision-date", "created-date")
ADF_DUE_DATE_KEYS = ("due-date", "duedate")
ADF_OUTCOME_KEYS = ("outcome", "result")

ADF_PARAGRAPH_TYPES = ("paragraph", "heading", "blockquote", "listItem")
ADF_INLINE_ATTRIBUTE_KEYS = ("text", "title", "emoji-fallback", "emoji-shortname")


@dataclass
class Decision:
    """A single decision extracted from a macro or ADF node.

    Attributes:
        title: Decision title
        status: Decision state (e.g., "DECIDED")
        owner: Owner mention or name
        date: Date the decision was made
        due_date: Due date
        outcome: Recorded outcome
        body: Converted body text
    """
    title: str = ""
    status: Optional[str] = None
    owner: Optional[str] = None
    date: Optional[str] = None
    due_date: Optional[str] = None
    outcome: Optional[str] = None
    body: Optional[str] = None

    def has_content(self) -> bool:
        return bool(self.title.strip()) or bool(self.body and self.body.strip())


def handle_decision_macro(macro_name: str, element: ElementType, converter) -> str:
    """Macro handler for decision, decision-list and decisionreport."""
    if macro_name == "decisionreport":
        query = macro_parameter_text(element, "cql")
        if query:
            return converter.inert_note(
                f"Decision report macro (CQL: {query}). Dynamic content not exported."
            )
        return converter.inert_note("Decision report macro (dynamic content not exported).")

    if macro_name == "decision":
        content = format_decision_content(parse_decision(element, converter), converter).rstrip()
        return f"\n{content}\n\n" if content.strip() else ""

    return format_decision_list(element, converter)


def _append_segment(buffer: str, segment: str) -> str:
    segment = segment.strip()
    if not segment:
        return buffer
    return f"{buffer} {segment}" if buffer else segment


def get_parameter_value(element: ElementType, name: str, converter) -> Optional[str]:
    """Resolve a decision parameter to display text.

    Text and converted child markup come first; user and page references
    are used when the parameter holds nothing else.
    """
    parameter = macro_parameter(element, name)
    if parameter is None:
        return None

    value = _append_segment("", parameter.text or "")
    for child in parameter:
        if is_element(child):
            value = _append_segment(value, converter.convert_element(child))
        value = _append_segment(value, child.tail or "")

    if not value:
        user = find_child(parameter, "ri:user")
        if user is not None:
            account_id = get_attribute(user, "ri:account-id")
            username = get_attribute(user, "ri:username")
            if account_id:
                value = f"@user:{account_id}"
            elif username:
                value = f"@{username}"
            else:
                value = get_attribute(user, "ri:display-name") or ""

    if not value:
        page = find_child(parameter, "ri:page")
        if page is not None:
            title = get_attribute(page, "ri:content-title")
            value = f"[[{title}]]" if title else get_attribute(page, "ri:value") or ""

    if not value:
        value = element_text(parameter)

    return value.strip() or None


def parse_decision(element: ElementType, converter) -> Decision:
    """Read a legacy decision macro."""
    body_element = find_child(element, "ac:rich-text-body")
    body = None
    if body_element is not None:
        body = converter.convert_children(body_element).strip() or None

    return Decision(
        title=get_parameter_value(element, "title", converter) or UNTITLED_DECISION,
        status=get_parameter_value(element, "status", converter),
        owner=get_parameter_value(element, "owner", converter),
        date=get_parameter_value(element, "date", converter),
        due_date=(
            get_parameter_value(element, "due-date", converter)
            or get_parameter_value(element, "dueDate", converter)
        ),
        outcome=get_parameter_value(element, "outcome", converter),
        body=body,
    )


def format_decision_content(decision: Decision, converter) -> str:
    """Render a decision as a bold title line, metadata and body."""
    title = decision.title.strip() or UNTITLED_DECISION
    content = f"{converter.strong_text('Decision:')} {title}"

    metadata = []
    for label, value in (
        ("Status", decision.status),
        ("Owner", decision.owner),
        ("Date", decision.date),
        ("Due date", decision.due_date),
        ("Outcome", decision.outcome),
    ):
        if value and value.strip():
            metadata.append(f"{label}: {value.strip()}")
    if metadata:
        content += f" ({'; '.join(metadata)})"

    if decision.body and decision.body.strip():
        content += f"\n\n{decision.body.strip()}"
    return content


def render_list_item(content: str, marker: str) -> Optional[str]:
    """Render multi-line content as one list item with indented continuation."""
    lines = content.split("\n")
    first = lines[0].strip()
    if not first:
        return None

    indentation = " " * len(marker)
    result = [f"{marker}{first}\n"]
    for line in lines[1:]:
        if not line.strip():
            result.append("\n")
        else:
            result.append(f"{indentation}{line.rstrip()}\n")
    return "".join(result)


def render_decisions(decisions: List[Decision], converter, skip_empty: bool) -> str:
    items = []
    for decision in decisions:
        if skip_empty and not decision.has_content():
            continue
        item = render_list_item(
            format_decision_content(decision, converter), converter.bullet_marker
        )
        if item:
            items.append(item)

    if not items:
        return ""
    return "\n" + "".join(items) + "\n"


def format_decision_list(element: ElementType, converter) -> str:
    """Render a decision-list macro from the decision macros in its body."""
    body = find_child(element, "ac:rich-text-body")
    if body is None:
        text = element_text(element).strip()
        return f"\n{text}\n\n" if text else ""

    decisions = [
        parse_decision(macro, converter)
        for macro in find_descendants(body, "ac:structured-macro")
        if get_attribute(macro, "ac:name") == "decision"
    ]
    if decisions:
        return render_decisions(decisions, converter, skip_empty=False)

    content = converter.convert_children(body).strip()
    return f"\n{content}\n\n" if content else ""


def convert_adf_extension(element: ElementType, converter) -> str:
    """Render an ``ac:adf-extension`` element.

    A decision list inside the extension replaces the ``ac:adf-fallback``
    content. Without one, the fallback is rendered along with any other
    node.
    """
    result: List[str] = []
    segments: List[Tuple[str, bool]] = []
    decision_rendered = False

    def flush(include_fallback: bool) -> None:
        for content, is_fallback in segments:
            if include_fallback or not is_fallback:
                result.append(content)
        segments.clear()

    for child in child_elements(element):
        if matches_tag(child, "ac:adf-node") and child.get("type") == "decision-list":
            rendered = render_adf_decision_list(child, converter)
            if rendered:
                flush(include_fallback=False)
                result.append(rendered)
                decision_rendered = True
            continue

        if matches_tag(child, "ac:adf-fallback"):
            _append_adf_segment(segments, converter.convert_children(child), True)
        else:
            _append_adf_segment(segments, converter.convert_element(child), False)

    flush(include_fallback=not decision_rendered)
    return "".join(result)


def _append_adf_segment(segments: List[Tuple[str, bool]], content: str, is_fallback: bool) -> None:
    if not content.strip():
        return
    if segments and segments[-1][1] == is_fallback:
        segments[-1] = (segments[-1][0] + content, is_fallback)
    else:
        segments.append((content, is_fallback))


def render_adf_decision_list(node: ElementType, converter) -> str:
    decisions = []
    for item in find_children(node, "ac:adf-node"):
        if item.get("type") != "decision-item":
            continue
        decision = parse_adf_decision(item)
        if decision is not None:
            decisions.append(decision)
    return render_decisions(decisions, converter, skip_empty=True)


def parse_adf_decision(item: ElementType) -> Optional[Decision]:
    """Build a Decision from an ADF ``decision-item`` node.

    Returns:
        The decision, or None when it has neither a title nor text
    """
    attributes: Dict[str, str] = {}
    for attribute in find_children(item, "ac:adf-attribute"):
        key = (attribute.get("key") or "").strip().lower()
        value = element_text(attribute).strip()
        if key and value and key not in attributes:
            attributes[key] = value

    def lookup(keys) -> Optional[str]:
        for key in keys:
            if key in attributes:
                return attributes[key]
        return None

    paragraphs: List[str] = []
    _collect_adf_paragraphs(item, paragraphs)

    title = lookup(ADF_TITLE_KEYS) or ""
    if not title and paragraphs:
        title = paragraphs.pop(0)

    body = "\n\n".join(paragraphs) or None
    if not title and not body:
        return None

    return Decision(
        title=title,
        status=lookup(ADF_STATUS_KEYS),
        owner=lookup(ADF_OWNER_KEYS),
        date=lookup(ADF_DATE_KEYS),
        due_date=lookup(ADF_DUE_DATE_KEYS),
        outcome=lookup(ADF_OUTCOME_KEYS),
        body=body,
    )


def _collect_adf_paragraphs(element: ElementType, paragraphs: List[str]) -> None:
    for child in child_elements(element):
        if matches_tag(child, "ac:adf-attribute"):
            continue
        if matches_tag(child, "ac:adf-content") or matches_tag(child, "ac:adf-fallback"):
            text = element_text(child).strip()
            if text:
                paragraphs.append(text)
        elif matches_tag(child, "ac:adf-node") and child.get("type") in ADF_PARAGRAPH_TYPES:
            text = collect_adf_inline(child)
            if text:
                paragraphs.append(text)
        else:
            _collect_adf_paragraphs(child, paragraphs)


def collect_adf_inline(node: ElementType) -> Optional[str]:
    """Flatten the inline content of an ADF node to text.

    ``hardBreak`` nodes become line breaks; text-like attributes such as
    emoji fallbacks are included.
    """
    buffer: List[str] = []

    def text_so_far() -> str:
        return "".join(buffer)

    def append_text(text: str) -> None:
        text = text.strip()
        if not text:
            return
        current = text_so_far()
        if current and not current.endswith((" ", "\n")):
            buffer.append(" ")
        buffer.append(text)

    def walk(element: ElementType) -> None:
        append_text(element.text or "")
        for child in element:
            if not is_element(child):
                append_text(child.tail or "")
                continue
            if matches_tag(child, "ac:adf-attribute"):
                key = (child.get("key") or "").strip().lower()
                if key in ADF_INLINE_ATTRIBUTE_KEYS:
                    append_text(element_text(child))
            else:
                if (
                    (matches_tag(child, "ac:adf-node") or matches_tag(child, "ac:adf-leaf"))
                    and child.get("type") == "hardBreak"
                    and not text_so_far().endswith("\n")
                ):
                    buffer.append("\n")
                walk(child)
            append_text(child.tail or "")

    walk(node)
    lines = [line.strip() for line in text_so_far().split("\n")]
    text = "\n".join(line for line in lines if line)
    return text or None
