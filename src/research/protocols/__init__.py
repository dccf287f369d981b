"""
Protocol definitions for dependency injection.

These protocols define the interfaces that research services depend on,
allowing for easy mocking in tests and swapping implementations.
"""

from src.research.protocols.llm_protocol import LLMClient
from src.research.protocols.search_protocol import (
    PrimarySearcher,
    SecondarySearcher,
    StaticLibrary,
)

__all__ = [
    "LLMClient",
    "PrimarySearcher",
    "SecondarySearcher",
    "StaticLibrary",
]
