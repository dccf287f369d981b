"""
Articles Module

Editorial articles (draft -> featured -> archived) kept in process memory,
plus the weekly generator that writes new drafts from research references.
"""

from .errors import ArticleGenerationError, InvalidStatusError
from .models import Article, ArticleCreate, ArticleReference, ArticleStatus
from .repository import ArticleRepositoryProtocol, InMemoryArticleRepository, parse_status
from .seed import sample_articles
from .generator import ArticleGenerator, GenerationReport, SEARCH_TOPICS
from .factory import create_article_generator

__all__ = [
    "ArticleGenerationError",
    "InvalidStatusError",
    "Article",
    "ArticleCreate",
    "ArticleReference",
    "ArticleStatus",
    "ArticleRepositoryProtocol",
    "InMemoryArticleRepository",
    "parse_status",
    "sample_articles",
    "ArticleGenerator",
    "GenerationReport",
    "SEARCH_TOPICS",
    "create_article_generator",
]
