"""Final normalisation applied to every converted document."""

import re

EXCESS_NEWLINES = re.compile(r'\n{3,}')


def clean_output(text: str) -> str:
    """Normalise whitespace of a converted document.

    Runs of three or more newlines collapse to a single blank line, and the
    document is trimmed and terminated by exactly one newline. Whitespace
    inside lines is left alone, since code blocks keep it verbatim.
    """
    text = EXCESS_NEWLINES.sub("\n\n", text)
    return f"{text.strip()}\n"
