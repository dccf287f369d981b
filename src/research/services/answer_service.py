"""
Research Answer Service

Turns a chat message into an answer backed by the aggregated research:
- No relevant research: the fallback advisory, no sources
- Otherwise: a numbered research context rendered into a prompt and sent to
  the LLM, using the personal or research format depending on the message

Without an LLM client, or when the LLM call fails, the answer degrades to a
plain summary of the sources so the user still gets the research.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.research.models import ResearchRecord
from src.research.prompts import build_answer_prompt, build_system_prompt
from src.research.protocols.llm_protocol import LLMClient
from src.research.services.follow_up_service import is_personal_query
from src.research.services.research_aggregator import ResearchAggregator

logger = logging.getLogger(__name__)


@dataclass
class ResearchAnswer:
    """Answer payload returned to the chat client."""
    query: str
    answer: str
    sources: List[ResearchRecord] = field(default_factory=list)
    follow_up_questions: List[str] = field(default_factory=list)
    is_personal: bool = False
    used_llm: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "answer": self.answer,
            "sources": [source.to_dict() for source in self.sources],
            "follow_up_questions": list(self.follow_up_questions),
            "is_personal": self.is_personal,
        }


class ResearchAnswerService:
    """Composes aggregator results and the LLM into a chat answer."""

    def __init__(
        self,
        aggregator: ResearchAggregator,
        llm_client: Optional[LLMClient] = None,
        max_tokens: int = 1500,
        temperature: float = 0.7,
    ):
        self.aggregator = aggregator
        self._llm = llm_client
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def answer(self, message: str) -> ResearchAnswer:
        """
        Answer a chat message.

        Args:
            message: The user's question

        Returns:
            ResearchAnswer with answer text, sources and follow-ups
        """
        is_personal = is_personal_query(message, self.aggregator.vocabulary)
        follow_ups = self.aggregator.follow_ups(message, is_personal)

        response = await self.aggregator.search(message)

        if response.is_fallback:
            return ResearchAnswer(
                query=message,
                answer=response.fallback_message or "",
                follow_up_questions=follow_ups,
                is_personal=is_personal,
            )

        text = None
        if self._llm is not None:
            text = await self._generate(message, response.records, is_personal)

        return ResearchAnswer(
            query=message,
            answer=text if text else self.summarize_sources(response.records),
            sources=response.records,
            follow_up_questions=follow_ups,
            is_personal=is_personal,
            used_llm=bool(text),
        )

    async def _generate(
        self,
        message: str,
        sources: List[ResearchRecord],
        is_personal: bool,
    ) -> Optional[str]:
        system = build_system_prompt(is_personal)
        prompt = build_answer_prompt(message, sources, is_personal)

        try:
            text = await self._llm.complete(
                prompt,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=system,
            )
        except Exception as e:
            logger.error(f"LLM answer generation failed, falling back to source summary: {e}")
            return None

        if not text or not text.strip():
            logger.warning("LLM returned empty answer, falling back to source summary")
            return None
        return text.strip()

    def close(self) -> None:
        """Release the aggregator's HTTP clients."""
        self.aggregator.close()

    @staticmethod
    def summarize_sources(sources: List[ResearchRecord]) -> str:
        """Plain-text answer listing the research found, used when no LLM answer is available."""
        lines = ["Here is the research I found on this topic:", ""]
        for i, source in enumerate(sources, 1):
            year = f" ({source.year})" if source.year else ""
            lines.append(f"**Research {i}: {source.title}**{year}")
            if source.journal:
                lines.append(f"_{source.journal}_")
            abstract = source.abstract or ""
            if len(abstract) > 300:
                abstract = abstract[:297] + "..."
            if abstract:
                lines.append(abstract)
            if source.url:
                lines.append(source.url)
            lines.append("")
        return "\n".join(lines).strip()
