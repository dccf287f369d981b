"""
Follow-up Question Service

Suggests up to four follow-up questions for a chat turn. Personal queries
("my toddler won't sleep") get supportive, situation-focused prompts;
general queries get the question set of the first matching topic.
"""

import logging
import re
from typing import List, Optional

from src.research.vocabulary import DEFAULT_VOCABULARY, ResearchVocabulary

logger = logging.getLogger(__name__)

MAX_FOLLOW_UPS = 4


def _phrase_pattern(phrases) -> re.Pattern:
    alternatives = "|".join(re.escape(phrase) for phrase in phrases)
    return re.compile(rf"\b(?:{alternatives})")


_DEFAULT_PERSONAL_PATTERN = _phrase_pattern(DEFAULT_VOCABULARY.personal_phrases)


def is_personal_query(query: str, vocabulary: Optional[ResearchVocabulary] = None) -> bool:
    """
    Classify a query as personal (first-person family situation) or general.

    A phrase matches anywhere in the lowercased query as long as it starts a
    word, so "my child" also covers "my children" and "my kid" covers "my kids".
    """
    if vocabulary is None or vocabulary.personal_phrases == DEFAULT_VOCABULARY.personal_phrases:
        pattern = _DEFAULT_PERSONAL_PATTERN
    else:
        pattern = _phrase_pattern(vocabulary.personal_phrases)
    return bool(pattern.search((query or "").lower()))


class FollowUpService:
    """Deterministic follow-up lookup; no I/O and no state."""

    def __init__(self, vocabulary: ResearchVocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    def is_personal(self, query: str) -> bool:
        return is_personal_query(query, self.vocabulary)

    def follow_ups(self, query: str, is_personal: Optional[bool] = None) -> List[str]:
        """
        Select follow-up questions for a query.

        Args:
            query: Raw user query
            is_personal: Pre-computed classification; classified here when None

        Returns:
            At most four follow-up questions
        """
        if is_personal is None:
            is_personal = self.is_personal(query)

        if is_personal:
            return list(self.vocabulary.personal_follow_ups[:MAX_FOLLOW_UPS])

        text = (query or "").lower()
        for triggers, questions in self.vocabulary.topic_follow_ups:
            if any(trigger in text for trigger in triggers):
                logger.debug(f"Follow-ups matched topic {triggers[0]!r}")
                return list(questions[:MAX_FOLLOW_UPS])

        return list(self.vocabulary.generic_follow_ups[:MAX_FOLLOW_UPS])
