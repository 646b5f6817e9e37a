"""Unit tests for content_converter.macro_handlers module."""

import pytest

from confluence_export.content_converter.markdown_converter import MarkdownConverter
from confluence_export.models.conversion_options import ConversionOptions


def md(storage, **options):
    """Convert storage format to Markdown with the given options."""
    return MarkdownConverter(ConversionOptions(**options)).convert(storage)


def macro(name, *parts):
    """Build a structured macro from its inner markup parts."""
    return f'<ac:structured-macro ac:name="{name}">{"".join(parts)}</ac:structured-macro>'


def param(name, value):
    return f'<ac:parameter ac:name="{name}">{value}</ac:parameter>'


def rich_body(content):
    return f"<ac:rich-text-body>{content}</ac:rich-text-body>"


class TestBasicMacros:
    """Test cases for toc, panel and status macros."""

    def test_toc(self):
        """toc renders a table of contents marker."""
        assert md(macro("toc")) == "**Table of Contents**\n"

    def test_panel(self):
        """panel renders its body as a blockquote."""
        assert md(macro("panel", rich_body("<p>A</p><p>B</p>"))) == "> A\n>\n> B\n"

    def test_status(self):
        """status renders an inline code span."""
        assert md(f"<p>State: {macro('status', param('title', 'DONE'))}</p>") == (
            "State: `[DONE]`\n"
        )

    def test_legacy_macro_element(self):
        """Old ac:macro elements are dispatched like structured macros."""
        assert md('<ac:macro ac:name="toc"></ac:macro>') == "**Table of Contents**\n"


class TestAdmonitions:
    """Test cases for info, note, tip and warning macros."""

    @pytest.mark.parametrize("name, heading", [
        ("info", "Info"),
        ("note", "Note"),
        ("tip", "Tip"),
        ("warning", "Warning"),
    ])
    def test_default_heading(self, name, heading):
        """The heading defaults to the capitalized macro name."""
        assert md(macro(name, rich_body("<p>Body</p>"))) == f"> **{heading}:** Body\n"

    def test_title_overrides_heading(self):
        """A title parameter replaces the heading."""
        assert md(macro("note", param("title", "Heads up"), rich_body("<p>Body</p>"))) == (
            "> **Heads up:** Body\n"
        )

    def test_multiline_body(self):
        """Later body lines continue the blockquote; blank lines stay bare."""
        result = md(macro("info", rich_body("<p>Line one</p><p>Line two</p>")))
        assert result == "> **Info:** Line one\n>\n> Line two\n"


class TestCodeMacro:
    """Test cases for code and code-block macros."""

    def test_plain_text_body_with_language(self):
        """The language follows the opening fence and CDATA is kept verbatim."""
        storage = macro(
            "code",
            param("language", "python"),
            '<ac:plain-text-body><![CDATA[\nif a < b & c:\n    pass\n]]></ac:plain-text-body>',
        )
        assert md(storage) == "```python\nif a < b & c:\n    pass\n```\n"

    def test_without_language(self):
        """Without a language the fence is bare."""
        storage = macro("code-block", "<ac:plain-text-body><![CDATA[x = 1]]></ac:plain-text-body>")
        assert md(storage) == "```\nx = 1\n```\n"

    def test_rich_text_body_fallback(self):
        """A rich-text body is used when there is no plain-text body."""
        assert md(macro("code", rich_body("<p>echo hi</p>"))) == "```\necho hi\n```\n"

    def test_trailing_spaces_are_kept(self):
        """Whitespace at line ends inside a code block is part of the code."""
        storage = macro(
            "code",
            "<ac:plain-text-body><![CDATA[line one  \nline two\t\n]]></ac:plain-text-body>",
        )
        assert md(storage) == "```\nline one  \nline two\t\n```\n"


class TestExpandAndExcerpt:
    """Test cases for expand and excerpt macros."""

    def test_expand_with_title(self):
        """expand renders an HTML details block."""
        storage = macro("expand", param("title", "More"), rich_body("<p>Hidden</p>"))
        assert md(storage) == "<details>\n<summary>More</summary>\n\nHidden\n</details>\n"

    def test_expand_default_title(self):
        """The summary defaults to Details."""
        assert "<summary>Details</summary>" in md(macro("expand", rich_body("<p>x</p>")))

    def test_hidden_excerpt(self):
        """Hidden excerpts produce nothing."""
        storage = macro("excerpt", param("hidden", "true"), rich_body("<p>Secret</p>"))
        assert md(f"<p>a</p>{storage}") == "a\n"

    def test_nopanel_excerpt(self):
        """nopanel excerpts render the body inline."""
        storage = macro("excerpt", param("nopanel", "true"), rich_body("<p>Summary</p>"))
        assert md(storage) == "Summary\n"

    def test_panel_excerpt(self):
        """Other excerpts render as an Excerpt admonition."""
        assert md(macro("excerpt", rich_body("<p>Summary</p>"))) == "> **Excerpt:** Summary\n"


class TestJiraMacro:
    """Test cases for the jira macro."""

    def test_issue_with_server_and_summary(self):
        """A single issue links to the server's browse page."""
        storage = macro(
            "jira",
            param("server", "https://jira.example.com/"),
            param("key", "PROJ-1"),
            param("summary", "Fix it"),
        )
        assert md(f"<p>{storage}</p>") == (
            "[PROJ-1](https://jira.example.com/browse/PROJ-1): Fix it\n"
        )

    def test_issue_with_server_name_only(self):
        """A server given by name only renders the bare key."""
        storage = macro("jira", param("server", "System JIRA"), param("key", "PROJ-2"))
        assert md(f"<p>{storage}</p>") == "PROJ-2\n"

    def test_jql_query(self):
        """Issue queries render as an inert note with the query."""
        storage = macro("jira", param("jqlQuery", "project = X"))
        assert md(storage) == "> _Jira issues macro (JQL: project = X). Dynamic content not exported._\n"

    def test_query_without_parameters(self):
        """Queries without JQL still render the note."""
        assert md(macro("jira")) == "> _Jira issues macro (dynamic content not exported)._\n"


class TestAnchorAndUnknown:
    """Test cases for anchors and unknown macros."""

    def test_anchor_dropped_by_default(self):
        """Anchors are omitted unless preserved."""
        assert md(f"<p>a{macro('anchor', param('', 'top'))}b</p>") == "ab\n"

    def test_anchor_preserved(self):
        """preserve_anchors emits an HTML anchor."""
        result = md(f"<p>{macro('anchor', param('', 'top'))}Text</p>", preserve_anchors=True)
        assert result == '<a id="top"></a>Text\n'

    def test_unknown_macro_renders_text(self):
        """Unknown macros fall back to their text content."""
        assert md(f"<p>{macro('mystery', rich_body('<p>Body</p>'))}</p>") == "Body\n"


class TestEmojiMacros:
    """Test cases for emoji markup."""

    def test_emoticon_with_id(self):
        """Emoticons resolve their hex id."""
        storage = '<p><ac:emoticon ac:name="smile" ac:emoji-id="1f600" ac:emoji-fallback=":)" /></p>'
        assert md(storage) == "\U0001F600\n"

    def test_emoticon_fallback(self):
        """Without a valid id the fallback is used."""
        storage = '<p><ac:emoticon ac:name="smile" ac:emoji-id="atlassian-smile" ac:emoji-fallback=":)" /></p>'
        assert md(storage) == ":)\n"

    def test_emoji_macro(self):
        """The emoji macro resolves its parameters."""
        storage = macro("emoji", param("emoji-id", "emoji-1f44d"), param("shortname", ":thumbsup:"))
        assert md(f"<p>{storage}</p>") == "\U0001F44D\n"

    def test_span_emoji(self):
        """Spans with emoji metadata resolve like emoji elements."""
        assert md('<p><span data-emoji-id="1f680">x</span></p>') == "\U0001F680\n"

    def test_plain_span_is_transparent(self):
        """Spans without emoji metadata render their children."""
        assert md('<p><span style="color: red">red</span></p>') == "red\n"
