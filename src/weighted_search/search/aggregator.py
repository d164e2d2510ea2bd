"""
Hit Aggregation

Folds the raw index hits of one query into a single result per viewable
record, summing weights and keeping the first non-empty excerpt.
"""

import logging
from typing import Callable, Iterable

from weighted_search.models import FieldMeta, IndexHit, Record, SearchResult
from weighted_search.search.scoring import WeightScorer
from weighted_search.search.snippet import build_excerpt
from weighted_search.search.text import extract_field_text

logger = logging.getLogger(__name__)

RecordLookup = Callable[[int], Record | None]
FieldLookup = Callable[[int], FieldMeta | None]
ViewablePolicy = Callable[[Record], Record | None]


def same_record(record: Record) -> Record | None:
    """Default viewability policy: a live record is credited for its own hits.

    A record that is only displayed through another one (a "child" rendered
    by its "parent") can instead be mapped to that parent here.
    """
    return record


class HitAggregator:
    """Merges index hits into ranked search results."""

    def __init__(
        self,
        scorer: WeightScorer | None = None,
        resolve_viewable: ViewablePolicy = same_record,
    ):
        self.scorer = scorer or WeightScorer()
        self.resolve_viewable = resolve_viewable

    def aggregate(
        self,
        hits: Iterable[IndexHit],
        needle: str,
        normalized_needle: str,
        lookup_record: RecordLookup,
        lookup_field: FieldLookup,
    ) -> list[SearchResult]:
        """
        Aggregate hits into results sorted by score (highest first).

        Args:
            hits: Index hits in the order delivered by the index
            needle: Needle as entered (used for overrides and excerpts)
            normalized_needle: Needle after index normalization (used for weights)
            lookup_record: Record by id, None if it does not exist
            lookup_field: Field definition by id, None if unknown

        Returns:
            One SearchResult per viewable record. Ties keep encounter order.
        """
        results: dict[int, SearchResult] = {}

        for hit in hits:
            record = lookup_record(hit.record_id)
            viewable = self._viewable(record)
            if viewable is None:
                logger.debug(f"Skipping hit for non-viewable record {hit.record_id}")
                continue

            is_viewable_title = hit.is_title and viewable.id == record.id
            weight = self.scorer.weight(is_viewable_title, hit.keywords, normalized_needle)

            result = results.get(viewable.id)
            if result is None:
                override = self.scorer.override_weight(viewable, needle)
                result = SearchResult(record=viewable, score=override + weight)
                results[viewable.id] = result
            else:
                result.score += weight

            # Retried on later hits only while no text has been found
            if result.excerpt == "":
                field = lookup_field(hit.field_id) if hit.field_id else None
                field_text = extract_field_text(record, field)
                result.excerpt = build_excerpt(field_text, needle)

        return sorted(results.values(), key=lambda r: r.score, reverse=True)

    def _viewable(self, record: Record | None) -> Record | None:
        if record is None or not record.is_live:
            return None
        return self.resolve_viewable(record)
