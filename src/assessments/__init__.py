"""
Assessment Module

Self-assessment questionnaires scored on the server:
- definitions: static catalogue (DASS-21, parenting stress, relationship satisfaction)
- scorer: total, severity band and subscale scoring
- answer_sheet: incremental answer collection
"""

from src.assessments.errors import (
    AssessmentError,
    ConfigurationError,
    IncompleteAnswerSetError,
    InvalidAnswerError,
    UnknownAssessmentError,
)
from src.assessments.models import (
    AnswerOption,
    AssessmentDefinition,
    AssessmentResult,
    Question,
    ScoringRange,
    SubscaleGroup,
)
from src.assessments.scorer import AssessmentScorer, SUBSCALE_MULTIPLIER, validate_definition
from src.assessments.definitions import ASSESSMENTS, get_assessment, list_assessments
from src.assessments.answer_sheet import AnswerSheet

__all__ = [
    "AssessmentError",
    "ConfigurationError",
    "IncompleteAnswerSetError",
    "InvalidAnswerError",
    "UnknownAssessmentError",
    "AnswerOption",
    "AssessmentDefinition",
    "AssessmentResult",
    "Question",
    "ScoringRange",
    "SubscaleGroup",
    "AssessmentScorer",
    "SUBSCALE_MULTIPLIER",
    "validate_definition",
    "ASSESSMENTS",
    "get_assessment",
    "list_assessments",
    "AnswerSheet",
]
