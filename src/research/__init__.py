"""
Research Module

Evidence search for parenting questions.

Components:
- models: normalized research records and aggregation results
- vocabulary: query templates and relevance/follow-up word lists
- protocols: interfaces for source adapters and the LLM client
- services: relevance filter, curated library, follow-ups, aggregator, answers
- chat_session: chat turn lifecycle
- factory: wiring from Settings
"""

from src.research.models import ResearchRecord, ResearchResponse
from src.research.vocabulary import DEFAULT_VOCABULARY, ResearchVocabulary
from src.research.services import (
    CuratedLibrary,
    FollowUpService,
    RelevanceFilter,
    ResearchAggregator,
    ResearchAnswer,
    ResearchAnswerService,
    is_personal_query,
)
from src.research.chat_session import ChatSession, ChatTurn, TurnInProgressError, TurnState
from src.research.factory import create_aggregator, create_answer_service

__all__ = [
    "ResearchRecord",
    "ResearchResponse",
    "DEFAULT_VOCABULARY",
    "ResearchVocabulary",
    "CuratedLibrary",
    "FollowUpService",
    "RelevanceFilter",
    "ResearchAggregator",
    "ResearchAnswer",
    "ResearchAnswerService",
    "is_personal_query",
    "ChatSession",
    "ChatTurn",
    "TurnInProgressError",
    "TurnState",
    "create_aggregator",
    "create_answer_service",
]
