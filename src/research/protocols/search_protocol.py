"""
Search Protocol Definitions

Defines interfaces for the research source adapters.
"""

from typing import Protocol, List

from src.research.models import ResearchRecord


class PrimarySearcher(Protocol):
    """Protocol for the primary bibliographic source (PubMed)."""

    async def search(self, query: str, max_results: int = 2) -> List[ResearchRecord]:
        """
        Search the primary source with one sub-query.

        Args:
            query: Expanded sub-query
            max_results: Maximum number of records to return

        Returns:
            Normalized records, best match first. May raise on failure;
            the aggregator treats any exception as an empty result.
        """
        ...


class SecondarySearcher(Protocol):
    """Protocol for the supplementary open-access source (DOAJ)."""

    async def search(self, query: str, max_results: int = 3) -> List[ResearchRecord]:
        """
        Search the supplementary source.

        Args:
            query: Expanded sub-query
            max_results: Maximum number of records to return

        Returns:
            Normalized records
        """
        ...


class StaticLibrary(Protocol):
    """Protocol for the curated in-process library (never fails, no I/O)."""

    def lookup(self, query: str, max_results: int = 4) -> List[ResearchRecord]:
        """
        Return curated records whose trigger terms appear in the query.

        Args:
            query: Raw user query
            max_results: Maximum number of records to return

        Returns:
            Curated records in table order
        """
        ...
