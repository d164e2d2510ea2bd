"""
Keyword Index

Storage and lookup of normalized keywords per record attribute.
Lookups are plain substring matches, so the needle must already be
normalized the same way as the stored keywords.
"""

from typing import Any, Sequence

from weighted_search.db.search import (
    escape_like,
    get_connection,
    is_postgres_mode,
    sql_placeholder,
    sql_placeholders,
)
from weighted_search.models import HitAttribute, IndexHit

# Stored in place of NULL for attribute rows that belong to no field
NO_FIELD_ID = 0


class KeywordIndex:
    """The searchindex table."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def write_row(
        self,
        record_id: int,
        locale: str,
        attribute: str,
        keywords: str,
        field_id: int | None = None,
        conn: Any | None = None,
    ) -> None:
        """Insert or replace the keywords of one record attribute."""
        should_close = conn is None
        if conn is None:
            conn = get_connection(self.db_path)

        ph = sql_placeholder()
        params = (
            record_id,
            HitAttribute(attribute).value,
            field_id or NO_FIELD_ID,
            locale,
            keywords,
        )

        try:
            cur = conn.cursor()
            if is_postgres_mode():
                cur.execute(
                    f"""
                    INSERT INTO searchindex (record_id, attribute, field_id, locale, keywords)
                    VALUES ({ph}, {ph}, {ph}, {ph}, {ph})
                    ON CONFLICT (record_id, attribute, field_id, locale) DO UPDATE SET
                        keywords = EXCLUDED.keywords
                    """,
                    params,
                )
            else:
                cur.execute(
                    f"""
                    INSERT OR REPLACE INTO searchindex (record_id, attribute, field_id, locale, keywords)
                    VALUES ({ph}, {ph}, {ph}, {ph}, {ph})
                    """,
                    params,
                )
            cur.close()

            if should_close:
                conn.commit()

        finally:
            if should_close:
                conn.close()

    def delete_record(self, record_id: int, locale: str, conn: Any | None = None) -> None:
        """Remove all keyword rows of a record in one locale."""
        should_close = conn is None
        if conn is None:
            conn = get_connection(self.db_path)

        ph = sql_placeholder()

        try:
            cur = conn.cursor()
            cur.execute(
                f"DELETE FROM searchindex WHERE record_id = {ph} AND locale = {ph}",
                (record_id, locale),
            )
            cur.close()

            if should_close:
                conn.commit()

        finally:
            if should_close:
                conn.close()

    def query(
        self,
        normalized_needle: str,
        locale: str,
        section_ids: Sequence[int] = (),
    ) -> list[IndexHit]:
        """
        Find title and field rows whose keywords contain the needle.

        Args:
            normalized_needle: Needle after keyword normalization. '%', '_'
                and '\\' are matched literally.
            locale: Locale of the rows to search
            section_ids: Restrict to records in these sections; empty means all

        Returns:
            Hits ordered by record id, title rows before field rows
        """
        ph = sql_placeholder()
        pattern = f"%{escape_like(normalized_needle)}%"

        sql = "SELECT si.record_id, si.attribute, si.field_id, si.keywords FROM searchindex si"
        params: list[Any] = []
        if section_ids:
            sql += " JOIN records r ON r.id = si.record_id AND r.locale = si.locale"

        sql += (
            f" WHERE si.attribute IN ({ph}, {ph})"
            f" AND si.locale = {ph}"
            f" AND si.keywords LIKE {ph} ESCAPE '\\'"
        )
        params += [HitAttribute.TITLE.value, HitAttribute.FIELD.value, locale, pattern]

        if section_ids:
            sql += f" AND r.section_id IN ({sql_placeholders(len(section_ids))})"
            params += list(section_ids)

        sql += " ORDER BY si.record_id, si.field_id"

        conn = get_connection(self.db_path)
        try:
            cur = conn.cursor()
            cur.execute(sql, tuple(params))
            rows = cur.fetchall()
            cur.close()
        finally:
            conn.close()

        return [
            IndexHit(
                record_id=record_id,
                attribute=attribute,
                field_id=field_id or None,
                keywords=keywords,
            )
            for record_id, attribute, field_id, keywords in rows
        ]
