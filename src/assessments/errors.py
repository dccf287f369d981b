"""
Assessment Errors

ConfigurationError signals a malformed assessment definition and is never
recoverable at runtime. AssessmentError and its subclasses signal bad input
from the caller (missing or invalid answers, unknown assessment ids).
"""

from typing import List


class ConfigurationError(Exception):
    """Raised when an assessment definition is invalid (gaps, overlaps, bad subscales)."""
    pass


class AssessmentError(Exception):
    """Base class for caller-side assessment errors."""
    pass


class UnknownAssessmentError(AssessmentError):
    """Raised when no assessment is registered under the requested id."""

    def __init__(self, assessment_id: str):
        self.assessment_id = assessment_id
        super().__init__(f"Unknown assessment: {assessment_id}")


class IncompleteAnswerSetError(AssessmentError):
    """Raised when scoring is requested before every question has an answer."""

    def __init__(self, assessment_id: str, missing_question_ids: List[str]):
        self.assessment_id = assessment_id
        self.missing_question_ids = list(missing_question_ids)
        super().__init__(
            f"Assessment '{assessment_id}' is missing answers for: {', '.join(self.missing_question_ids)}"
        )


class InvalidAnswerError(AssessmentError):
    """Raised when an answer references an unknown question or an undeclared option value."""

    def __init__(self, question_id: str, message: str):
        self.question_id = question_id
        super().__init__(f"Invalid answer for '{question_id}': {message}")
