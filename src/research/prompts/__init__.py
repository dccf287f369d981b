"""
Prompt builders for research answers.

Templates are stored as Jinja2 files under src/prompts/templates/research.
"""

from src.research.prompts.answer_prompts import (
    build_answer_prompt,
    build_fallback_message,
    build_system_prompt,
)

__all__ = [
    "build_answer_prompt",
    "build_fallback_message",
    "build_system_prompt",
]
