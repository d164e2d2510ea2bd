"""
Weighted Substring Search

Finds records containing a substring and ranks them by where and how
often it occurs, with manual overrides through prioritized search terms.

The engine itself holds no storage: the index query, record and field
lookups, section resolution and keyword normalization are passed in.
SearchEngine.for_database() wires them to the bundled SQL store.
"""

import logging
from typing import Callable, Sequence

from weighted_search.analyzer import analyzer
from weighted_search.core.config import settings
from weighted_search.db.content import ContentStore
from weighted_search.db.keywords import KeywordIndex
from weighted_search.models import FieldMeta, IndexHit, Record, SearchResult
from weighted_search.search.aggregator import HitAggregator, ViewablePolicy, same_record
from weighted_search.search.scoring import WeightConfig, WeightScorer

logger = logging.getLogger(__name__)

# Collaborator signatures
NormalizeFunc = Callable[[str], str]
SectionResolver = Callable[[Sequence[str]], list[int]]
IndexQuery = Callable[[str, str, Sequence[int]], list[IndexHit]]
LocaleRecordLookup = Callable[[int, str], Record | None]
FieldLookup = Callable[[int], FieldMeta | None]


class SearchEngine:
    """
    Substring search over the keyword index.

    Scoring:
    - Each occurrence of the needle in a normal field counts 1.
    - Each occurrence in part of the record's title counts 1000.
    - A title that is exactly the needle counts 10000.
    - A needle in the record's prioritized search terms counts 100000.
    """

    def __init__(
        self,
        query_index: IndexQuery,
        lookup_record: LocaleRecordLookup,
        lookup_field: FieldLookup,
        resolve_section_ids: SectionResolver,
        normalize: NormalizeFunc = analyzer.normalize,
        aggregator: HitAggregator | None = None,
        default_locale: str = settings.DEFAULT_LOCALE,
    ):
        self._query_index = query_index
        self._lookup_record = lookup_record
        self._lookup_field = lookup_field
        self._resolve_section_ids = resolve_section_ids
        self._normalize = normalize
        self.aggregator = aggregator or HitAggregator()
        self.default_locale = default_locale

    @classmethod
    def for_database(
        cls,
        db_path: str,
        weight_config: WeightConfig | None = None,
        resolve_viewable: ViewablePolicy = same_record,
        default_locale: str = settings.DEFAULT_LOCALE,
    ) -> "SearchEngine":
        """
        Build an engine backed by the SQL content store and keyword index.

        Args:
            db_path: Path to SQLite database (ignored when DATABASE_URL is set)
            weight_config: Scoring weights
            resolve_viewable: Maps a live record to the record credited for its hits
            default_locale: Locale used when search() is called without one
        """
        content = ContentStore(db_path)
        index = KeywordIndex(db_path)
        return cls(
            query_index=index.query,
            lookup_record=content.lookup_record,
            lookup_field=content.lookup_field_meta,
            resolve_section_ids=content.resolve_section_ids,
            aggregator=HitAggregator(WeightScorer(weight_config), resolve_viewable),
            default_locale=default_locale,
        )

    def search(
        self,
        needle: str,
        locale: str | None = None,
        sections: Sequence[str] = (),
    ) -> list[SearchResult]:
        """
        Search records for a substring.

        Matching is case- and diacritic-insensitive (see KeywordAnalyzer).

        Args:
            needle: Substring to search for
            locale: Locale to search in; defaults to the configured locale
            sections: Section handles to search in; empty means all sections

        Returns:
            Results with the most relevant first. Each has the record, an
            HTML excerpt with the needle in <mark> elements (possibly empty)
            and a positive integer score.

        Errors from the index or content store are not caught.
        """
        locale = locale or self.default_locale
        normalized_needle = self._normalize(needle or "")
        if not normalized_needle:
            return []

        section_ids = self._resolve_section_ids(list(sections)) if sections else []
        if sections and len(section_ids) < len(sections):
            logger.debug(
                f"Resolved {len(section_ids)} of {len(sections)} section handles"
            )

        hits = self._query_index(normalized_needle, locale, section_ids)

        results = self.aggregator.aggregate(
            hits,
            needle,
            normalized_needle,
            lambda record_id: self._lookup_record(record_id, locale),
            self._lookup_field,
        )

        logger.info(
            "Search completed",
            extra={
                "needle": needle,
                "locale": locale,
                "hit_count": len(hits),
                "result_count": len(results),
            },
        )
        return results
