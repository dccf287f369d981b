"""
Research Aggregator

Answers a parenting question with a small ranked set of research records:
1. Expand the query into qualifier sub-queries
2. Fan out to PubMed (every sub-query), DOAJ (first sub-query) and the
   curated library (raw query), concurrently, each under a timeout
3. Merge in source-priority order, deduplicate by id, filter for relevance
4. Cap to max_sources, or return the fallback advisory when nothing survives

A source that raises or times out contributes nothing; it never aborts the run.
"""

import asyncio
import logging
import time
from typing import Awaitable, List, Optional, Set, Tuple

from src.research.models import ResearchRecord, ResearchResponse
from src.research.prompts import build_fallback_message
from src.research.protocols.search_protocol import (
    PrimarySearcher,
    SecondarySearcher,
    StaticLibrary,
)
from src.research.services.follow_up_service import FollowUpService
from src.research.services.relevance_filter import RelevanceFilter
from src.research.services.static_library import CuratedLibrary
from src.research.vocabulary import DEFAULT_VOCABULARY, ResearchVocabulary

logger = logging.getLogger(__name__)


class ResearchAggregator:
    """
    Multi-source research search with partial-failure tolerance.

    Holds no per-query state, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        primary_searcher: Optional[PrimarySearcher] = None,
        secondary_searcher: Optional[SecondarySearcher] = None,
        static_library: Optional[StaticLibrary] = None,
        vocabulary: ResearchVocabulary = DEFAULT_VOCABULARY,
        relevance_filter: Optional[RelevanceFilter] = None,
        follow_up_service: Optional[FollowUpService] = None,
        adapter_timeout: float = 15.0,
        max_sources: int = 6,
        primary_results_per_query: int = 2,
        secondary_max_results: int = 3,
        static_max_results: int = 4,
    ):
        """
        Initialize the aggregator.

        Args:
            primary_searcher: Primary bibliographic source (PubMed)
            secondary_searcher: Supplementary source (DOAJ)
            static_library: Curated library; defaults to the built-in table
            vocabulary: Query templates and word lists
            relevance_filter: Defaults to a filter over the same vocabulary
            follow_up_service: Defaults to a service over the same vocabulary
            adapter_timeout: Seconds each source call may take
            max_sources: Cap on returned records
            primary_results_per_query: Per-sub-query cap for the primary source
            secondary_max_results: Cap for the secondary source
            static_max_results: Cap for the curated library
        """
        self._primary = primary_searcher
        self._secondary = secondary_searcher
        self._static = static_library if static_library is not None else CuratedLibrary()
        self.vocabulary = vocabulary
        self.relevance_filter = relevance_filter or RelevanceFilter(vocabulary)
        self.follow_up_service = follow_up_service or FollowUpService(vocabulary)
        self.adapter_timeout = adapter_timeout
        self.max_sources = max_sources
        self.primary_results_per_query = primary_results_per_query
        self.secondary_max_results = secondary_max_results
        self.static_max_results = static_max_results

    def expand_query(self, query: str) -> List[str]:
        """Build the qualifier sub-queries for a user query, in fixed order."""
        query = query.strip()
        return [template.format(query=query) for template in self.vocabulary.query_templates]

    async def search(self, query: str) -> ResearchResponse:
        """
        Run the full search pipeline for one user query.

        Args:
            query: Raw user query

        Returns:
            ResearchResponse with up to max_sources records, or with
            fallback_message set and no records
        """
        sub_queries = self.expand_query(query)
        response = ResearchResponse(query=query, sub_queries=sub_queries)

        # Task order is merge priority: primary (sub-query order), secondary, static
        tasks: List[Tuple[str, Awaitable[List[ResearchRecord]]]] = []
        if self._primary is not None:
            for i, sub_query in enumerate(sub_queries, 1):
                tasks.append((
                    f"PubMed[{i}]",
                    self._primary.search(sub_query, max_results=self.primary_results_per_query),
                ))
        if self._secondary is not None and sub_queries:
            tasks.append((
                "DOAJ",
                self._secondary.search(sub_queries[0], max_results=self.secondary_max_results),
            ))
        tasks.append(("Curated", self._lookup_static(query)))

        logger.info(f"Running {len(tasks)} research source calls in parallel...")
        start_time = time.time()

        results = await asyncio.gather(
            *(self._run_source(name, call) for name, call in tasks),
            return_exceptions=True,
        )

        merged: List[ResearchRecord] = []
        for (name, _), records_or_error in zip(tasks, results):
            if isinstance(records_or_error, BaseException):
                # _run_source already isolates errors; this only catches cancellation races
                logger.error(f"{name} search failed: {records_or_error}")
                response.failed_sources.append(name)
            elif records_or_error is None:
                response.failed_sources.append(name)
            else:
                merged.extend(records_or_error)

        logger.info(f"Parallel research search completed in {time.time() - start_time:.1f}s")

        response.total_found = len(merged)
        deduped = self.deduplicate(merged)
        response.duplicates_removed = len(merged) - len(deduped)

        relevant = self.relevance_filter.filter(deduped, query)
        response.filtered_out = len(deduped) - len(relevant)

        response.records = relevant[:self.max_sources]

        logger.info(
            f"Research search for {query!r}: raw={response.total_found}, "
            f"deduped={len(deduped)}, relevant={len(relevant)}, returned={len(response.records)}"
        )

        if not response.records:
            logger.info(f"No relevant research for {query!r}, returning fallback advisory")
            response.fallback_message = build_fallback_message(query)

        return response

    def follow_ups(self, query: str, is_personal: Optional[bool] = None) -> List[str]:
        """Follow-up questions for a query (see FollowUpService)."""
        return self.follow_up_service.follow_ups(query, is_personal)

    @staticmethod
    def deduplicate(records: List[ResearchRecord]) -> List[ResearchRecord]:
        """Keep the first record for each normalized id; later copies are dropped whole."""
        seen: Set[str] = set()
        unique = []
        for record in records:
            key = record.dedup_key
            if key in seen:
                continue
            seen.add(key)
            unique.append(record)
        return unique

    async def _lookup_static(self, query: str) -> List[ResearchRecord]:
        return self._static.lookup(query, max_results=self.static_max_results)

    async def _run_source(
        self,
        name: str,
        call: Awaitable[List[ResearchRecord]],
    ) -> Optional[List[ResearchRecord]]:
        """
        Await one source call under the adapter timeout.

        Returns:
            The records, or None if the source failed or timed out
        """
        try:
            records = await asyncio.wait_for(call, timeout=self.adapter_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{name} search timed out after {self.adapter_timeout}s")
            return None
        except Exception as e:
            logger.warning(f"{name} search failed: {e}")
            return None

        records = list(records or [])
        logger.debug(f"{name} returned {len(records)} records")
        return records

    def close(self) -> None:
        """Close source clients that hold connections."""
        for source in (self._primary, self._secondary):
            close = getattr(source, "close", None)
            if callable(close):
                close()
