"""
LLM Client Protocol

Defines the interface for LLM interactions, allowing the answer service to
run against Anthropic in production and a stub in tests.
"""

from typing import Protocol, Optional, Dict


class LLMClient(Protocol):
    """Protocol for LLM client implementations."""

    async def complete(
        self,
        prompt: str,
        max_tokens: int = 1500,
        temperature: float = 0.7,
        system: Optional[str] = None,
    ) -> str:
        """
        Generate a completion for the given prompt.

        Args:
            prompt: The user prompt to complete
            max_tokens: Maximum tokens in the response
            temperature: Sampling temperature
            system: Optional system prompt

        Returns:
            The generated text response
        """
        ...

    def get_usage_stats(self) -> Dict[str, int]:
        """
        Get cumulative token usage statistics.

        Returns:
            Dict with keys: input_tokens, output_tokens
        """
        ...
