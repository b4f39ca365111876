"""Stage 0 — Strip markup tags (<i>, <font ...>) from subtitle text lines."""

import re

_TAG_RE = re.compile(r"<[^>]*>")


def strip_tags(text: str) -> str:
    """Remove every <...> tag from a single line of text."""
    return _TAG_RE.sub("", text)


def strip_block(block: str) -> str:
    """Strip tags from the text lines of one SRT block.

    The index (line 0) and timing (line 1) lines are left untouched.
    """
    lines = block.split("\n")
    return "\n".join(line if i < 2 else strip_tags(line) for i, line in enumerate(lines))


def strip_markup(content: str) -> str:
    """Strip tags from every block of SRT content.

    Idempotent: stripping already-clean content returns it unchanged.
    """
    return "\n\n".join(strip_block(block) for block in content.split("\n\n"))
