"""
Answer Prompt Builders

Functions for building the prompts used to answer a research chat message.
"""

from typing import List

from src.prompts import get_prompt_manager
from src.research.models import ResearchRecord

MAX_ABSTRACT_CHARS = 1500


def build_system_prompt(is_personal: bool) -> str:
    """
    Build the system prompt for an answer.

    Personal questions get a short, empathetic format; general questions get
    the structured Overview / Description / Key Points / Conclusion format.
    """
    prompts = get_prompt_manager()
    return prompts.render("research/system_personal" if is_personal else "research/system_research")


def build_answer_prompt(
    message: str,
    sources: List[ResearchRecord],
    is_personal: bool,
) -> str:
    """
    Build the user prompt: numbered research context followed by the question.

    Args:
        message: The user's chat message
        sources: Ranked research records ("Research 1" is sources[0])
        is_personal: Whether the message describes the user's own situation

    Returns:
        Rendered prompt string
    """
    prompts = get_prompt_manager()

    return prompts.render(
        "research/research_question",
        message=message,
        sources=[source.to_dict() for source in sources],
        is_personal=is_personal,
        max_abstract_chars=MAX_ABSTRACT_CHARS,
    )


def build_fallback_message(query: str) -> str:
    """Build the advisory returned when no relevant research was found."""
    prompts = get_prompt_manager()
    return prompts.render("research/fallback_advisory", query=query)
