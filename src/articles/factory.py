"""
Factory for the weekly article generator.
"""

import logging
from typing import Optional

from src.research.factory import create_llm_client, create_pubmed_searcher
from src.utils.config import Settings, get_settings

from .generator import ArticleGenerator

logger = logging.getLogger(__name__)


def create_article_generator(settings: Optional[Settings] = None) -> Optional[ArticleGenerator]:
    """
    Create an ArticleGenerator wired to Anthropic and PubMed.

    Returns:
        The generator, or None when no Anthropic API key is configured
    """
    settings = settings or get_settings()

    llm_client = create_llm_client(settings)
    if llm_client is None:
        logger.warning("No ANTHROPIC_API_KEY provided, article generation disabled")
        return None

    return ArticleGenerator(
        llm_client=llm_client,
        searcher=create_pubmed_searcher(settings),
        max_tokens=settings.article_max_tokens,
        temperature=settings.temperature,
    )
