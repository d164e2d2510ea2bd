"""
Search Data Model

Records as read from the content store, raw keyword index hits, and the
aggregated results handed to the presentation layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class RecordStatus(str, Enum):
    """Publication status of a record"""

    LIVE = "live"
    PENDING = "pending"
    EXPIRED = "expired"
    DISABLED = "disabled"


class FieldKind(str, Enum):
    """Field kinds with excerpt support. Other kinds are stored as plain strings."""

    RICH_TEXT = "RichText"
    PLAIN_TEXT = "PlainText"


class HitAttribute(str, Enum):
    """Index attributes that take part in a search."""

    TITLE = "title"
    FIELD = "field"


@dataclass(frozen=True)
class FieldMeta:
    """Field definition: numeric id, handle used on records, and kind."""

    id: int
    handle: str
    kind: str


@dataclass(frozen=True)
class Record:
    """A content record in one locale."""

    id: int
    title: str
    status: str = RecordStatus.LIVE.value
    locale: str = "en"
    section_id: int | None = None
    url: str | None = None
    prioritized_search_terms: frozenset[str] = frozenset()
    fields: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_live(self) -> bool:
        return self.status == RecordStatus.LIVE

    def get_field_value(self, handle: str) -> str | None:
        """Return the raw value of a field, or None if the record has no such field."""
        return self.fields.get(handle)


@dataclass(frozen=True)
class IndexHit:
    """One index row whose keywords contain the normalized needle."""

    record_id: int
    attribute: str  # 'title' or 'field'
    keywords: str
    field_id: int | None = None

    @property
    def is_title(self) -> bool:
        return self.attribute == HitAttribute.TITLE


@dataclass
class SearchResult:
    """A ranked record with its excerpt (HTML, may be empty) and score."""

    record: Record
    excerpt: str = ""
    score: int = 0
