"""
Prompt Management Module

Jinja2 templates for the research assistant (answer system prompts, the
numbered research context and the no-results advisory), rendered through a
shared PromptManager.
"""

from .manager import PromptManager, get_prompt_manager

__all__ = [
    "PromptManager",
    "get_prompt_manager",
]
