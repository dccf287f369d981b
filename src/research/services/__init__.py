"""
Research services.

- Relevance filtering over allow/deny word lists
- Curated library lookup
- Follow-up question selection
- Multi-source aggregation
- LLM answer composition
"""

from src.research.services.relevance_filter import RelevanceFilter, extract_query_terms
from src.research.services.static_library import CuratedEntry, CuratedLibrary, CURATED_ENTRIES
from src.research.services.follow_up_service import FollowUpService, is_personal_query
from src.research.services.research_aggregator import ResearchAggregator
from src.research.services.answer_service import ResearchAnswer, ResearchAnswerService

__all__ = [
    "RelevanceFilter",
    "extract_query_terms",
    "CuratedEntry",
    "CuratedLibrary",
    "CURATED_ENTRIES",
    "FollowUpService",
    "is_personal_query",
    "ResearchAggregator",
    "ResearchAnswer",
    "ResearchAnswerService",
]
