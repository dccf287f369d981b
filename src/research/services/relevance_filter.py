"""
Relevance Filter

Keeps research records that are on-topic for a parenting question:
- title + abstract mention a parenting/child-development keyword, or a
  word (3+ characters) of the user's query
- and mention none of the clinical off-topic terms

Matching is a case-insensitive substring test, so "behavior" also matches
"behavioral" and "child" matches "childhood".
"""

import logging
import re
from typing import List

from src.research.models import ResearchRecord
from src.research.vocabulary import DEFAULT_VOCABULARY, ResearchVocabulary

logger = logging.getLogger(__name__)

MIN_QUERY_TERM_LENGTH = 3

_WORD_RE = re.compile(r"\w+")


def extract_query_terms(query: str) -> List[str]:
    """Lowercased words of the query that are long enough to match on."""
    return [term for term in _WORD_RE.findall(query.lower()) if len(term) >= MIN_QUERY_TERM_LENGTH]


class RelevanceFilter:
    """Stateless allow/deny predicate over research records."""

    def __init__(self, vocabulary: ResearchVocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    def is_relevant(self, record: ResearchRecord, query: str) -> bool:
        """
        Check a single record against the allow and deny lists.

        Args:
            record: Record to check
            query: Raw user query (its words count as allow-list terms)

        Returns:
            True if the record is on-topic
        """
        text = record.searchable_text

        if any(term in text for term in self.vocabulary.irrelevant_terms):
            return False

        if any(keyword in text for keyword in self.vocabulary.relevance_keywords):
            return True

        return any(term in text for term in extract_query_terms(query))

    def filter(self, records: List[ResearchRecord], query: str) -> List[ResearchRecord]:
        """Return the relevant records, preserving input order."""
        kept = [record for record in records if self.is_relevant(record, query)]
        if len(kept) < len(records):
            logger.info(f"Relevance filter removed {len(records) - len(kept)} of {len(records)} records")
        return kept
