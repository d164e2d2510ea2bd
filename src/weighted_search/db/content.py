"""
Content Store

Read and write access to sections, field definitions and records.
Provides the record, field and section lookups used by the search engine.
"""

import logging
from typing import Any, Iterable

from weighted_search.db.search import (
    get_connection,
    is_postgres_mode,
    sql_placeholder,
    sql_placeholders,
)
from weighted_search.models import FieldMeta, Record

logger = logging.getLogger(__name__)


class ContentStore:
    """Sections, fields and records stored in the search database."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    # --- Writes ---

    def save_section(self, section_id: int, handle: str, conn: Any | None = None) -> None:
        """Create or rename a section."""
        self._execute(
            self._upsert_sql("sections", ("id", "handle"), ("id",)),
            (section_id, handle),
            conn,
        )

    def save_field(self, field: FieldMeta, conn: Any | None = None) -> None:
        """Create or update a field definition."""
        self._execute(
            self._upsert_sql("fields", ("id", "handle", "type"), ("id",)),
            (field.id, field.handle, _plain(field.kind)),
            conn,
        )

    def save_record(self, record: Record, conn: Any | None = None) -> None:
        """
        Store a record with its field values and prioritized search terms.

        Existing field values and terms for the record's locale are replaced.
        """
        should_close = conn is None
        if conn is None:
            conn = get_connection(self.db_path)

        ph = sql_placeholder()

        try:
            cur = conn.cursor()
            cur.execute(
                self._upsert_sql(
                    "records",
                    ("id", "locale", "section_id", "status", "title", "url"),
                    ("id", "locale"),
                ),
                (
                    record.id,
                    record.locale,
                    record.section_id,
                    _plain(record.status),
                    record.title,
                    record.url,
                ),
            )

            cur.execute(
                f"DELETE FROM record_fields WHERE record_id = {ph} AND locale = {ph}",
                (record.id, record.locale),
            )
            for handle, value in record.fields.items():
                cur.execute(
                    f"""
                    INSERT INTO record_fields (record_id, locale, handle, value)
                    VALUES ({ph}, {ph}, {ph}, {ph})
                    """,
                    (record.id, record.locale, handle, value),
                )

            cur.execute(
                f"DELETE FROM record_search_terms WHERE record_id = {ph} AND locale = {ph}",
                (record.id, record.locale),
            )
            for term in sorted(record.prioritized_search_terms):
                cur.execute(
                    f"""
                    INSERT INTO record_search_terms (record_id, locale, term)
                    VALUES ({ph}, {ph}, {ph})
                    """,
                    (record.id, record.locale, term),
                )
            cur.close()

            if should_close:
                conn.commit()

        finally:
            if should_close:
                conn.close()

    def delete_record(self, record_id: int, locale: str, conn: Any | None = None) -> None:
        """Remove a record and its field values and terms."""
        should_close = conn is None
        if conn is None:
            conn = get_connection(self.db_path)

        ph = sql_placeholder()

        try:
            cur = conn.cursor()
            for table, id_column in (
                ("records", "id"),
                ("record_fields", "record_id"),
                ("record_search_terms", "record_id"),
            ):
                cur.execute(
                    f"DELETE FROM {table} WHERE {id_column} = {ph} AND locale = {ph}",
                    (record_id, locale),
                )
            cur.close()

            if should_close:
                conn.commit()

        finally:
            if should_close:
                conn.close()

    # --- Lookups ---

    def lookup_record(self, record_id: int, locale: str) -> Record | None:
        """Load a record in the given locale, or None if it does not exist."""
        ph = sql_placeholder()
        conn = get_connection(self.db_path)
        try:
            cur = conn.cursor()
            cur.execute(
                f"""
                SELECT section_id, status, title, url FROM records
                WHERE id = {ph} AND locale = {ph}
                """,
                (record_id, locale),
            )
            row = cur.fetchone()
            if row is None:
                cur.close()
                return None
            section_id, status, title, url = row

            cur.execute(
                f"SELECT handle, value FROM record_fields WHERE record_id = {ph} AND locale = {ph}",
                (record_id, locale),
            )
            fields = {handle: value for handle, value in cur.fetchall()}

            cur.execute(
                f"SELECT term FROM record_search_terms WHERE record_id = {ph} AND locale = {ph}",
                (record_id, locale),
            )
            terms = frozenset(r[0] for r in cur.fetchall())
            cur.close()
        finally:
            conn.close()

        return Record(
            id=record_id,
            title=title,
            status=status,
            locale=locale,
            section_id=section_id,
            url=url,
            prioritized_search_terms=terms,
            fields=fields,
        )

    def lookup_field_meta(self, field_id: int) -> FieldMeta | None:
        """Field definition by id, or None if unknown."""
        ph = sql_placeholder()
        conn = get_connection(self.db_path)
        try:
            cur = conn.cursor()
            cur.execute(
                f"SELECT id, handle, type FROM fields WHERE id = {ph}",
                (field_id,),
            )
            row = cur.fetchone()
            cur.close()
        finally:
            conn.close()
        return FieldMeta(id=row[0], handle=row[1], kind=row[2]) if row else None

    def list_fields(self) -> list[FieldMeta]:
        """All field definitions."""
        conn = get_connection(self.db_path)
        try:
            cur = conn.cursor()
            cur.execute("SELECT id, handle, type FROM fields ORDER BY id")
            rows = cur.fetchall()
            cur.close()
        finally:
            conn.close()
        return [FieldMeta(id=i, handle=h, kind=k) for i, h, k in rows]

    def resolve_section_ids(self, handles: Iterable[str]) -> list[int]:
        """
        Map section handles to ids.

        Unknown handles are dropped (they do not restrict the search).
        """
        handles = [h for h in handles if h]
        if not handles:
            return []

        conn = get_connection(self.db_path)
        try:
            cur = conn.cursor()
            cur.execute(
                f"SELECT handle, id FROM sections WHERE handle IN ({sql_placeholders(len(handles))})",
                tuple(handles),
            )
            by_handle = {handle: section_id for handle, section_id in cur.fetchall()}
            cur.close()
        finally:
            conn.close()

        section_ids = []
        for handle in handles:
            section_id = by_handle.get(handle)
            if section_id is None:
                logger.debug(f"Ignoring unknown section handle '{handle}'")
                continue
            section_ids.append(section_id)
        return section_ids

    # --- Helpers ---

    def _execute(self, sql: str, params: tuple, conn: Any | None) -> None:
        should_close = conn is None
        if conn is None:
            conn = get_connection(self.db_path)
        try:
            cur = conn.cursor()
            cur.execute(sql, params)
            cur.close()
            if should_close:
                conn.commit()
        finally:
            if should_close:
                conn.close()

    @staticmethod
    def _upsert_sql(table: str, columns: tuple[str, ...], keys: tuple[str, ...]) -> str:
        column_list = ", ".join(columns)
        values = sql_placeholders(len(columns))
        if is_postgres_mode():
            updates = ", ".join(f"{c} = EXCLUDED.{c}" for c in columns if c not in keys)
            return (
                f"INSERT INTO {table} ({column_list}) VALUES ({values}) "
                f"ON CONFLICT ({', '.join(keys)}) DO UPDATE SET {updates}"
            )
        return f"INSERT OR REPLACE INTO {table} ({column_list}) VALUES ({values})"


def _plain(value: Any) -> str:
    """Store enum members by value."""
    return getattr(value, "value", value)
