"""Weighted Substring Search Engine.

The scoring, aggregation and excerpt core is importable without any
settings. ``SearchEngine`` and ``SearchIndexer`` read the service
configuration and live in ``searcher`` and ``indexer``.
"""

from weighted_search.search.aggregator import HitAggregator, same_record
from weighted_search.search.scoring import WeightConfig, WeightScorer
from weighted_search.search.snippet import build_excerpt
from weighted_search.search.text import extract_field_text, html_to_text

__all__ = [
    "HitAggregator",
    "same_record",
    "WeightConfig",
    "WeightScorer",
    "build_excerpt",
    "extract_field_text",
    "html_to_text",
]
