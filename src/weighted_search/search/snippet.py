"""
Excerpt Generation for Search Results

Builds an HTML excerpt showing the needle in context, with every
occurrence wrapped in <mark>. Everything outside the <mark> elements is
escaped, so the excerpt can be placed inside a block element as-is.
"""

import html
import re

ELLIPSIS = "…"
MAX_CHARS_BEFORE_NEEDLE = 100
MAX_CHARS_AFTER_NEEDLE = 100


def build_excerpt(
    full_text: str,
    needle: str,
    chars_before: int = MAX_CHARS_BEFORE_NEEDLE,
    chars_after: int = MAX_CHARS_AFTER_NEEDLE,
) -> str:
    """
    Build an HTML excerpt around the first occurrence of needle.

    Args:
        full_text: Plain text of the field.
        needle: Substring to highlight (matched literally, case-insensitively).
        chars_before: Characters of context kept before the first match.
        chars_after: Characters of context kept after the first match.

    Returns:
        The excerpt, with an ellipsis at either end where text was clipped.
        Empty if full_text is empty. If the needle does not occur, the
        excerpt is the start of the text without highlighting.
    """
    if not full_text:
        return ""

    pattern = re.compile(re.escape(needle), re.IGNORECASE) if needle else None

    if pattern is None:
        needle_start = 0
    else:
        first = pattern.search(full_text)
        needle_start = first.start() if first else -1

    window_start = max(needle_start - chars_before, 0)
    window_end = min(needle_start + len(needle) + chars_after, len(full_text))

    prefix = ELLIPSIS if window_start > 0 else ""
    suffix = ELLIPSIS if window_end < len(full_text) else ""

    window = full_text[window_start:window_end]
    return prefix + _highlight(window, pattern) + suffix


def _highlight(text: str, pattern: re.Pattern[str] | None) -> str:
    """Escape text, wrapping non-overlapping matches (left to right) in <mark>."""
    if pattern is None:
        return html.escape(text)

    parts = []
    last_end = 0
    for match in pattern.finditer(text):
        parts.append(html.escape(text[last_end : match.start()]))
        parts.append(f"<mark>{html.escape(match.group(0))}</mark>")
        last_end = match.end()
    parts.append(html.escape(text[last_end:]))
    return "".join(parts)
