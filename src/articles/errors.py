"""
Article store errors.
"""


class InvalidStatusError(ValueError):
    """Raised when a status string is not draft, featured, or archived."""

    def __init__(self, status: str):
        self.status = status
        super().__init__("Invalid status. Must be draft, featured, or archived")


class ArticleGenerationError(RuntimeError):
    """Raised when the LLM returns no usable article body."""
