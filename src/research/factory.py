"""
Factory Functions for Research Search

Provides factory functions to create fully-wired aggregators and answer
services from Settings.
"""

import asyncio
import logging
from typing import Optional

from src.research.models import ResearchRecord
from src.research.services.answer_service import ResearchAnswerService
from src.research.services.research_aggregator import ResearchAggregator
from src.research.services.static_library import CuratedLibrary
from src.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_aggregator(settings: Optional[Settings] = None) -> ResearchAggregator:
    """
    Create a ResearchAggregator wired to PubMed, DOAJ and the curated library.

    Args:
        settings: Settings to use (defaults to the global settings)

    Returns:
        Configured ResearchAggregator
    """
    settings = settings or get_settings()

    return ResearchAggregator(
        primary_searcher=create_pubmed_searcher(settings),
        secondary_searcher=_create_doaj_client(settings),
        static_library=CuratedLibrary(),
        adapter_timeout=settings.adapter_timeout_seconds,
        max_sources=settings.max_sources,
        primary_results_per_query=settings.primary_results_per_query,
        secondary_max_results=settings.secondary_max_results,
        static_max_results=settings.static_max_results,
    )


def create_answer_service(
    settings: Optional[Settings] = None,
    aggregator: Optional[ResearchAggregator] = None,
) -> ResearchAnswerService:
    """
    Create a ResearchAnswerService.

    Without an Anthropic API key the service still works, answering with a
    summary of the sources instead of a generated answer.
    """
    settings = settings or get_settings()
    aggregator = aggregator or create_aggregator(settings)

    llm_client = create_llm_client(settings)
    if llm_client is None:
        logger.warning("No ANTHROPIC_API_KEY provided, answers will be source summaries")

    return ResearchAnswerService(
        aggregator=aggregator,
        llm_client=llm_client,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
    )


def create_llm_client(settings: Optional[Settings] = None):
    """
    Create the Anthropic LLM client, or None when no API key is configured.
    """
    settings = settings or get_settings()
    if not settings.has_llm:
        return None
    client = _create_anthropic_client(settings.anthropic_api_key, model=settings.claude_model)
    logger.info(f"Created Anthropic LLM client ({settings.claude_model})")
    return client


def _create_anthropic_client(api_key: str, model: str):
    """Create Anthropic LLM client wrapper."""
    from anthropic import AsyncAnthropic

    class AnthropicLLMClient:
        """LLM client implementation using Anthropic."""

        def __init__(self, api_key: str, model: str):
            self._client = AsyncAnthropic(api_key=api_key)
            self._model = model
            self._usage = {
                'input_tokens': 0,
                'output_tokens': 0,
            }

        async def complete(
            self,
            prompt: str,
            max_tokens: int = 1500,
            temperature: float = 0.7,
            system: Optional[str] = None,
        ) -> str:
            kwargs = {
                "model": self._model,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "messages": [{"role": "user", "content": prompt}],
            }
            if system:
                kwargs["system"] = system

            response = await self._client.messages.create(**kwargs)
            self._track_usage(response)

            text_blocks = [block.text for block in response.content or [] if hasattr(block, 'text')]
            if text_blocks:
                return "".join(text_blocks)
            logger.warning("LLM returned empty content")
            return ""

        def get_usage_stats(self) -> dict:
            return self._usage.copy()

        def _track_usage(self, response) -> None:
            if hasattr(response, 'usage'):
                usage = response.usage
                self._usage['input_tokens'] += getattr(usage, 'input_tokens', 0) or 0
                self._usage['output_tokens'] += getattr(usage, 'output_tokens', 0) or 0

    return AnthropicLLMClient(api_key, model=model)


def create_pubmed_searcher(settings: Settings):
    """Create PubMed search client wrapper."""
    from src.tools.pubmed import PubMedAPI

    class PubMedSearcherWrapper:
        """PubMed search implementation (blocking client run in a worker thread)."""

        def __init__(self, api_key: Optional[str], email: str, timeout: int):
            self._api = PubMedAPI(api_key=api_key, email=email, timeout=timeout)
            if api_key:
                logger.info("PubMed API key configured (10 req/sec rate limit)")
            else:
                logger.info("No PUBMED_API_KEY - using default rate limit (3 req/sec)")

        async def search(self, query: str, max_results: int = 2) -> list:
            papers = await asyncio.to_thread(self._api.search_papers, query, max_results)
            return [ResearchRecord.from_pubmed(paper) for paper in papers]

        def close(self) -> None:
            self._api.close()

    return PubMedSearcherWrapper(
        api_key=settings.pubmed_api_key,
        email=settings.pubmed_email,
        timeout=settings.http_timeout_seconds,
    )


def _create_doaj_client(settings: Settings):
    """Create DOAJ search client wrapper."""
    from src.tools.doaj import DOAJAPI

    class DOAJSearcherWrapper:
        """DOAJ search implementation."""

        def __init__(self, base_url: str, timeout: int):
            self._api = DOAJAPI(base_url=base_url, timeout=timeout)

        async def search(self, query: str, max_results: int = 3) -> list:
            articles = await asyncio.to_thread(self._api.search_articles, query, max_results)
            return [ResearchRecord.from_doaj(article) for article in articles]

        def close(self) -> None:
            self._api.close()

    return DOAJSearcherWrapper(base_url=settings.doaj_base_url, timeout=settings.http_timeout_seconds)
