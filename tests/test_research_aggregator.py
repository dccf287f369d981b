"""
Tests for the research aggregator.

Tests:
- Query expansion
- Fan-out caps and call routing per source
- Merge order, deduplication, relevance filtering and the 6-record cap
- Partial-failure tolerance (exceptions and timeouts)
- Fallback advisory
"""

import asyncio
from typing import List

import pytest

from src.research.models import ResearchRecord
from src.research.services.research_aggregator import ResearchAggregator
from src.research.vocabulary import QUERY_TEMPLATES


class StubSearcher:
    """Records calls and returns a fixed list (or per-query lists)."""

    def __init__(self, records=None, by_query=None):
        self.records = records or []
        self.by_query = by_query or {}
        self.calls = []

    async def search(self, query: str, max_results: int = 2) -> List[ResearchRecord]:
        self.calls.append((query, max_results))
        return list(self.by_query.get(query, self.records))[:max_results]


class FailingSearcher:
    async def search(self, query: str, max_results: int = 2) -> List[ResearchRecord]:
        raise ConnectionError("upstream unavailable")


class SlowSearcher:
    async def search(self, query: str, max_results: int = 2) -> List[ResearchRecord]:
        await asyncio.sleep(5)
        return [_record("pmid:slow", "Parenting and sleep")]


class EmptyLibrary:
    def lookup(self, query: str, max_results: int = 4) -> List[ResearchRecord]:
        return []


def _record(record_id: str, title: str, abstract: str = "") -> ResearchRecord:
    return ResearchRecord(id=record_id, title=title, abstract=abstract)


def _run(aggregator: ResearchAggregator, query: str):
    return asyncio.run(aggregator.search(query))


class TestQueryExpansion:
    """Tests for expand_query()."""

    def test_seven_sub_queries_in_order(self):
        """One sub-query per template, in template order, with the raw query appended."""
        sub_queries = ResearchAggregator().expand_query("  picky eating ")

        assert len(sub_queries) == 7
        assert sub_queries[0] == "parenting AND child behavior AND picky eating"
        assert sub_queries == [t.format(query="picky eating") for t in QUERY_TEMPLATES]


class TestFanOut:
    """Tests for source routing and caps."""

    def test_primary_called_per_sub_query_with_cap(self):
        """Primary source gets every sub-query with a cap of 2."""
        primary = StubSearcher()
        aggregator = ResearchAggregator(primary_searcher=primary, static_library=EmptyLibrary())

        _run(aggregator, "naps")

        assert sorted(q for q, _ in primary.calls) == sorted(aggregator.expand_query("naps"))
        assert {cap for _, cap in primary.calls} == {2}

    def test_secondary_called_once_with_first_sub_query(self):
        """Secondary source is called once, with the first sub-query and a cap of 3."""
        secondary = StubSearcher()
        aggregator = ResearchAggregator(secondary_searcher=secondary, static_library=EmptyLibrary())

        _run(aggregator, "naps")

        assert secondary.calls == [("parenting AND child behavior AND naps", 3)]

    def test_static_library_uses_raw_query(self):
        """The curated library is matched against the raw query, not a sub-query."""
        response = _run(ResearchAggregator(), "What helps with bedtime?")
        assert [r.id for r in response.records] == ["accessible-sleep-001"]


class TestMergeAndRank:
    """Tests for merge order, dedup, filtering and the cap."""

    def test_source_priority_order(self):
        """Primary results come first (sub-query order), then secondary, then curated."""
        queries = ResearchAggregator().expand_query("tantrum")
        primary = StubSearcher(by_query={
            queries[0]: [_record("pmid:1", "Parent coaching for tantrums")],
            queries[3]: [_record("pmid:4", "Toddler tantrums and sleep")],
        })
        secondary = StubSearcher(records=[_record("doaj:a", "Family routines and tantrums")])

        response = _run(ResearchAggregator(primary_searcher=primary, secondary_searcher=secondary), "tantrum")

        assert [r.id for r in response.records] == ["pmid:1", "pmid:4", "doaj:a", "hawaii-tantrum-001"]

    def test_slow_source_does_not_reorder(self):
        """Completion order never changes the merge order."""

        class DelayedSearcher(StubSearcher):
            async def search(self, query, max_results=2):
                await asyncio.sleep(0.05)
                return await super().search(query, max_results)

        primary = DelayedSearcher(records=[_record("pmid:9", "Parenting stress")])
        secondary = StubSearcher(records=[_record("doaj:z", "Child play")])
        aggregator = ResearchAggregator(
            primary_searcher=primary, secondary_searcher=secondary, static_library=EmptyLibrary()
        )

        response = _run(aggregator, "stress")

        assert [r.id for r in response.records] == ["pmid:9", "doaj:z"]

    def test_duplicates_keep_first_occurrence(self):
        """A record seen in several sub-queries is kept once, at its first position, unmerged."""
        first = _record("pmid:1", "Parenting styles", "first copy")
        later = _record("PMID:1 ", "Parenting styles (revised)", "second copy")
        primary = StubSearcher(records=[first, _record("pmid:2", "Child sleep")])
        secondary = StubSearcher(records=[later])
        aggregator = ResearchAggregator(
            primary_searcher=primary, secondary_searcher=secondary, static_library=EmptyLibrary()
        )

        response = _run(aggregator, "styles")

        assert [r.id for r in response.records] == ["pmid:1", "pmid:2"]
        assert response.records[0].abstract == "first copy"
        assert response.duplicates_removed == 13

    def test_deduplicate_is_identity_on_unique_input(self):
        """Deduplicating an already-unique list returns it unchanged."""
        records = [_record(f"pmid:{i}", "Parent") for i in range(5)]
        assert ResearchAggregator.deduplicate(records) == records
        once = ResearchAggregator.deduplicate(records + records)
        assert ResearchAggregator.deduplicate(once) == once

    def test_capped_at_six(self):
        """No more than six records are returned."""
        queries = ResearchAggregator().expand_query("play")
        primary = StubSearcher(by_query={
            q: [_record(f"pmid:{i}a", "Child play"), _record(f"pmid:{i}b", "Parent play")]
            for i, q in enumerate(queries)
        })

        response = _run(ResearchAggregator(primary_searcher=primary, static_library=EmptyLibrary()), "play")

        assert len(response.records) == 6
        assert [r.id for r in response.records] == ["pmid:0a", "pmid:0b", "pmid:1a", "pmid:1b", "pmid:2a", "pmid:2b"]
        assert response.total_found == 14

    def test_irrelevant_records_removed(self):
        """Deny-listed records are filtered out and counted."""
        primary = StubSearcher(records=[
            _record("pmid:1", "Chemotherapy in pediatric cancer"),
            _record("pmid:2", "Parenting through transitions"),
        ])

        response = _run(ResearchAggregator(primary_searcher=primary, static_library=EmptyLibrary()), "transitions")

        assert [r.id for r in response.records] == ["pmid:2"]
        assert response.filtered_out == 1

    def test_every_record_passes_relevance(self):
        """Each returned record satisfies the relevance predicate."""
        primary = StubSearcher(records=[
            _record("pmid:1", "Infant sleep"),
            _record("pmid:2", "Bacterial growth"),
            _record("pmid:3", "Marine sediment"),
        ])
        aggregator = ResearchAggregator(primary_searcher=primary)

        response = _run(aggregator, "sleep")

        assert response.records
        assert all(aggregator.relevance_filter.is_relevant(r, "sleep") for r in response.records)


class TestPartialFailure:
    """Tests for source failure isolation."""

    def test_failing_primary_still_returns_curated(self):
        """A raising source contributes nothing; others still count."""
        aggregator = ResearchAggregator(primary_searcher=FailingSearcher(), secondary_searcher=FailingSearcher())

        response = _run(aggregator, "How can I help my child with tantrums?")

        assert [r.id for r in response.records] == ["hawaii-tantrum-001"]
        assert "DOAJ" in response.failed_sources
        assert len(response.failed_sources) == 8

    def test_timeout_treated_as_empty(self):
        """A source slower than the adapter timeout is dropped."""
        secondary = StubSearcher(records=[_record("doaj:ok", "Parent sleep habits")])
        aggregator = ResearchAggregator(
            primary_searcher=SlowSearcher(),
            secondary_searcher=secondary,
            static_library=EmptyLibrary(),
            adapter_timeout=0.05,
        )

        response = _run(aggregator, "sleep")

        assert [r.id for r in response.records] == ["doaj:ok"]
        assert response.failed_sources == [f"PubMed[{i}]" for i in range(1, 8)]

    def test_all_sources_fail_gives_fallback(self):
        """When every source fails the result is the fallback advisory, not an error."""
        aggregator = ResearchAggregator(
            primary_searcher=FailingSearcher(),
            secondary_searcher=FailingSearcher(),
            static_library=EmptyLibrary(),
        )

        response = _run(aggregator, "sibling rivalry")

        assert response.is_fallback
        assert "sibling rivalry" in response.fallback_message


class TestFallback:
    """Tests for the empty-result advisory."""

    def test_tantrum_question_includes_curated_paper(self):
        """The tantrum question returns the curated tantrum paper."""
        response = _run(ResearchAggregator(primary_searcher=StubSearcher(), secondary_searcher=StubSearcher()),
                        "How can I help my child with tantrums?")

        titles = [r.title for r in response.records]
        assert "Temper Tantrums in Young Children" in titles
        assert response.fallback_message is None

    def test_clinical_query_falls_back(self):
        """Only off-topic clinical results and no curated trigger gives the advisory."""
        primary = StubSearcher(records=[_record("pmid:1", "Cancer treatment options in children")])
        secondary = StubSearcher(records=[_record("doaj:1", "Radiation therapy outcomes")])

        response = _run(ResearchAggregator(primary_searcher=primary, secondary_searcher=secondary),
                        "cancer treatment options")

        assert response.records == []
        assert response.is_fallback
        assert response.fallback_message.startswith(
            'I couldn\'t find specific research articles related to "cancer treatment options".'
        )

    def test_follow_ups_delegate(self):
        """follow_ups() uses the follow-up service."""
        follow_ups = ResearchAggregator().follow_ups("my toddler won't sleep")
        assert follow_ups[0] == "Can you help me with a specific situation?"
