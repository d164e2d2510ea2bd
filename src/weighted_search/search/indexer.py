"""
Keyword Search Indexer

Stores records and writes their normalized title and field keywords
into the search index.
"""

import logging
from typing import Any, Callable

from weighted_search.analyzer import analyzer
from weighted_search.db.content import ContentStore
from weighted_search.db.keywords import KeywordIndex
from weighted_search.db.search import get_connection
from weighted_search.models import FieldKind, HitAttribute, Record
from weighted_search.search.text import html_to_text

logger = logging.getLogger(__name__)


class SearchIndexer:
    """Builds and maintains the keyword index."""

    def __init__(
        self,
        db_path: str,
        normalize: Callable[[str], str] = analyzer.normalize,
    ):
        self.db_path = db_path
        self.normalize = normalize
        self.content = ContentStore(db_path)
        self.keywords = KeywordIndex(db_path)

    def index_record(self, record: Record, conn: Any | None = None) -> int:
        """
        Store a record and (re)build its index rows.

        Args:
            record: Record to index (in its own locale)
            conn: Optional existing connection (for batch operations)

        Returns:
            Number of index rows written
        """
        fields_by_handle = {f.handle: f for f in self.content.list_fields()}

        should_close = conn is None
        if conn is None:
            conn = get_connection(self.db_path)

        try:
            self.content.save_record(record, conn=conn)
            self.keywords.delete_record(record.id, record.locale, conn=conn)

            written = 0
            title_keywords = self.normalize(record.title)
            if title_keywords:
                self.keywords.write_row(
                    record.id,
                    record.locale,
                    HitAttribute.TITLE.value,
                    title_keywords,
                    conn=conn,
                )
                written += 1

            for handle, value in record.fields.items():
                field = fields_by_handle.get(handle)
                if field is None:
                    logger.warning(
                        f"Record {record.id} has value for undefined field '{handle}'; not indexed"
                    )
                    continue

                text = html_to_text(value) if field.kind == FieldKind.RICH_TEXT else value
                field_keywords = self.normalize(text or "")
                if not field_keywords:
                    continue
                self.keywords.write_row(
                    record.id,
                    record.locale,
                    HitAttribute.FIELD.value,
                    field_keywords,
                    field_id=field.id,
                    conn=conn,
                )
                written += 1

            if should_close:
                conn.commit()

        finally:
            if should_close:
                conn.close()

        logger.debug(f"Indexed record {record.id} ({record.locale}): {written} rows")
        return written

    def delete_record(self, record_id: int, locale: str, conn: Any | None = None) -> None:
        """Remove a record and its index rows."""
        should_close = conn is None
        if conn is None:
            conn = get_connection(self.db_path)

        try:
            self.content.delete_record(record_id, locale, conn=conn)
            self.keywords.delete_record(record_id, locale, conn=conn)

            if should_close:
                conn.commit()

        finally:
            if should_close:
                conn.close()
