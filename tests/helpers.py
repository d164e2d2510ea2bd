"""Shared test data."""

from weighted_search.models import FieldKind, FieldMeta

BODY = FieldMeta(id=1, handle="body", kind=FieldKind.RICH_TEXT.value)
SUMMARY = FieldMeta(id=2, handle="summary", kind=FieldKind.PLAIN_TEXT.value)
SPECS = FieldMeta(id=3, handle="specs", kind="Table")

FIELDS = {f.id: f for f in (BODY, SUMMARY, SPECS)}
