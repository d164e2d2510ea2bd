"""
Tests for the weighted search engine
"""

from unittest.mock import MagicMock

import pytest

from weighted_search.models import IndexHit, Record, RecordStatus
from weighted_search.search.indexer import SearchIndexer
from weighted_search.search.searcher import SearchEngine
from weighted_search.search.scoring import WeightConfig


@pytest.fixture
def indexer(test_db_path, content_store):
    return SearchIndexer(test_db_path)


@pytest.fixture
def engine(test_db_path, content_store):
    return SearchEngine.for_database(test_db_path, default_locale="en")


class TestSearchEngine:
    """End-to-end search against the SQL store."""

    def test_full_title_match_ranks_first(self, indexer, engine):
        indexer.index_record(
            Record(id=1, title="Contact", section_id=1, fields={"body": "<p>Contact us by phone.</p>"})
        )
        indexer.index_record(
            Record(id=2, title="Contact form help", section_id=1, fields={"summary": "Forms"})
        )
        indexer.index_record(
            Record(
                id=3,
                title="About",
                section_id=1,
                fields={"summary": "To contact us, use the contact form."},
            )
        )

        results = engine.search("Contact")

        assert [r.record.id for r in results] == [1, 2, 3]
        assert [r.score for r in results] == [10001, 1000, 2]
        assert results[0].excerpt == " <mark>Contact</mark> us by phone."
        # Title-only hit has no field text
        assert results[1].excerpt == ""
        assert results[2].excerpt == "To <mark>contact</mark> us, use the <mark>contact</mark> form."

    def test_prioritized_term(self, indexer, engine):
        indexer.index_record(
            Record(id=1, title="Boots", fields={"summary": "shoes and boots, more shoes"})
        )
        indexer.index_record(
            Record(
                id=2,
                title="Store",
                prioritized_search_terms=frozenset({"shoes"}),
                fields={"summary": "Our shoes"},
            )
        )

        results = engine.search("shoes")

        assert [r.record.id for r in results] == [2, 1]
        assert results[0].score == 100001
        assert results[1].score == 2

    def test_diacritic_and_case_insensitive(self, indexer, engine):
        indexer.index_record(Record(id=1, title="Café"))

        for needle in ("cafe", "CAFÉ", "Café"):
            results = engine.search(needle)
            assert [r.score for r in results] == [10000]

    def test_unpublished_records_excluded(self, indexer, engine):
        indexer.index_record(Record(id=1, title="Shoes", status=RecordStatus.PENDING.value))
        indexer.index_record(Record(id=2, title="Shoes"))

        assert [r.record.id for r in engine.search("shoes")] == [2]

    def test_section_filter(self, indexer, engine):
        indexer.index_record(Record(id=1, title="Shoes guide", section_id=1))
        indexer.index_record(Record(id=2, title="Shoes", section_id=2))

        assert [r.record.id for r in engine.search("shoes", sections=["products"])] == [2]
        assert [r.record.id for r in engine.search("shoes", sections=["products", "nope"])] == [2]
        # Unknown handles do not restrict the search
        assert sorted(r.record.id for r in engine.search("shoes", sections=["nope"])) == [1, 2]
        assert sorted(r.record.id for r in engine.search("shoes")) == [1, 2]

    def test_locale(self, indexer, engine):
        indexer.index_record(Record(id=1, title="Sko", locale="nb"))
        indexer.index_record(Record(id=1, title="Shoes", locale="en"))

        assert engine.search("sko") == []
        results = engine.search("sko", locale="nb")
        assert [r.record.title for r in results] == ["Sko"]

    def test_wildcards_match_literally(self, indexer, engine):
        indexer.index_record(Record(id=1, title="Sale", fields={"summary": "50% off"}))
        indexer.index_record(Record(id=2, title="Sale", fields={"summary": "500 off"}))
        indexer.index_record(Record(id=3, title="Code", fields={"summary": "snake_case"}))

        results = engine.search("%")
        assert [r.record.id for r in results] == [1]
        assert results[0].excerpt == "50<mark>%</mark> off"

        results = engine.search("_")
        assert [r.record.id for r in results] == [3]
        assert results[0].excerpt == "snake<mark>_</mark>case"

    def test_unsupported_field_gives_empty_excerpt(self, indexer, engine):
        indexer.index_record(Record(id=1, title="Sizes", fields={"specs": "shoes | 42"}))

        results = engine.search("shoes")
        assert len(results) == 1
        assert results[0].score == 1
        assert results[0].excerpt == ""

    def test_custom_weights(self, indexer, test_db_path):
        indexer.index_record(Record(id=1, title="Shoes"))
        engine = SearchEngine.for_database(
            test_db_path, weight_config=WeightConfig(full_title_match=7)
        )
        assert engine.search("shoes")[0].score == 7

    def test_no_results(self, indexer, engine):
        indexer.index_record(Record(id=1, title="Shoes"))
        assert engine.search("hats") == []


class TestSearchEngineCollaborators:
    """Facade behaviour with stubbed collaborators."""

    def _engine(self, **overrides):
        collaborators = {
            "query_index": MagicMock(return_value=[]),
            "lookup_record": MagicMock(return_value=None),
            "lookup_field": MagicMock(return_value=None),
            "resolve_section_ids": MagicMock(return_value=[]),
        }
        collaborators.update(overrides)
        return SearchEngine(default_locale="en", **collaborators), collaborators

    def test_blank_needle_skips_index(self):
        engine, collaborators = self._engine()

        assert engine.search("") == []
        assert engine.search("   ") == []
        collaborators["query_index"].assert_not_called()

    def test_normalized_needle_and_locale_passed_to_index(self):
        engine, collaborators = self._engine()

        engine.search("  Blue SKY ")
        collaborators["query_index"].assert_called_once_with("blue sky", "en", [])
        collaborators["resolve_section_ids"].assert_not_called()

    def test_sections_resolved(self):
        engine, collaborators = self._engine(resolve_section_ids=MagicMock(return_value=[4]))

        engine.search("sky", locale="nb", sections=["news", "missing"])
        collaborators["resolve_section_ids"].assert_called_once_with(["news", "missing"])
        collaborators["query_index"].assert_called_once_with("sky", "nb", [4])

    def test_record_lookup_uses_locale(self):
        record = Record(id=7, title="Sky", locale="nb")
        engine, collaborators = self._engine(
            query_index=MagicMock(return_value=[IndexHit(record_id=7, attribute="title", keywords="sky")]),
            lookup_record=MagicMock(return_value=record),
        )

        results = engine.search("Sky", locale="nb")
        collaborators["lookup_record"].assert_called_once_with(7, "nb")
        assert results[0].record is record
        assert results[0].score == 10000

    def test_index_errors_propagate(self):
        """Infrastructure failures must not look like an empty result."""
        engine, _ = self._engine(query_index=MagicMock(side_effect=ConnectionError("index down")))

        with pytest.raises(ConnectionError):
            engine.search("shoes")

    def test_record_lookup_errors_propagate(self):
        engine, _ = self._engine(
            query_index=MagicMock(return_value=[IndexHit(record_id=1, attribute="field", keywords="shoes", field_id=2)]),
            lookup_record=MagicMock(side_effect=RuntimeError("store down")),
        )

        with pytest.raises(RuntimeError):
            engine.search("shoes")
