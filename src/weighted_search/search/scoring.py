"""
Weighted Scoring

Scores index hits by where and how often the needle occurs:
- Each occurrence in a normal field counts 1.
- Each occurrence in part of the record's own title counts 1000.
- A title that is exactly the needle counts 10000.
- A needle listed in the record's prioritized search terms adds 100000,
  once per record.
"""

from dataclasses import dataclass

from weighted_search.models import Record


@dataclass
class WeightConfig:
    """Scoring weights."""

    partial_title_match: int = 1000
    full_title_match: int = 10000
    prioritized_term: int = 100000


class WeightScorer:
    """Computes per-hit weights and the one-time override weight."""

    def __init__(self, config: WeightConfig | None = None):
        self.config = config or WeightConfig()

    def weight(
        self,
        is_viewable_title: bool,
        keywords: str,
        normalized_needle: str,
    ) -> int:
        """
        Weight of a single index hit.

        Args:
            is_viewable_title: Hit is on the title of the record being credited
            keywords: Normalized keywords stored for the hit
            normalized_needle: Needle after index normalization

        Returns:
            Non-negative integer weight
        """
        if is_viewable_title and normalized_needle == keywords.strip():
            return self.config.full_title_match

        count = keywords.count(normalized_needle) if normalized_needle else 0
        if is_viewable_title:
            return count * self.config.partial_title_match
        return count

    def override_weight(self, record: Record, needle: str) -> int:
        """Bonus when the raw needle is one of the record's prioritized search terms."""
        if needle in record.prioritized_search_terms:
            return self.config.prioritized_term
        return 0
