"""
Field Text Extraction

Turns a record field into plain text suitable for excerpts.
Rich text is handled with a best-effort conversion, not a full renderer.
"""

import re
import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

from weighted_search.models import FieldKind, FieldMeta, Record

warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

BLOCK_ELEMENTS = (
    "blockquote",
    "div",
    "dd",
    "dl",
    "dt",
    "figure",
    "figcaption",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "hr",
    "li",
    "ol",
    "p",
    "td",
    "th",
    "ul",
)

_BLOCK_OPEN_TAG = re.compile(
    r"<(?=(?:" + "|".join(BLOCK_ELEMENTS) + r")[\s/>])", re.IGNORECASE
)


def html_to_text(value: str) -> str:
    """
    Convert lightly marked-up HTML into plain text.

    A space is inserted before each block-level opening tag so that
    "<h3>Heading</h3><p>text</p>" becomes " Heading text" rather than
    "Headingtext". Remaining markup is dropped and entities are decoded.
    """
    if not value:
        return ""
    spaced = _BLOCK_OPEN_TAG.sub(" <", value)
    soup = BeautifulSoup(spaced, "html.parser")
    return soup.get_text()


def extract_field_text(record: Record, field: FieldMeta | None) -> str:
    """
    Return the plain text of a record field for excerpting.

    Unsupported field kinds (tables, assets, ...) and hits without a field
    (title attributes) yield an empty string.
    """
    if field is None or not field.handle:
        return ""

    value = record.get_field_value(field.handle) or ""

    if field.kind == FieldKind.RICH_TEXT:
        return html_to_text(value)
    elif field.kind == FieldKind.PLAIN_TEXT:
        return value
    else:
        return ""
