"""
Pydantic schemas for self-assessment questionnaires.

Defines structured data models for:
- Assessment definitions (questions, options, scoring bands, subscales)
- Scoring results
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnswerOption(BaseModel):
    """A selectable answer and the numeric value it contributes"""
    model_config = ConfigDict(frozen=True)

    value: int = Field(..., description="Numeric value added to the score")
    label: str = Field(..., description="Display label")


class Question(BaseModel):
    """A single questionnaire item"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable question id, e.g. 'q1'")
    text: str = Field(..., description="Question text shown to the user")
    options: List[AnswerOption] = Field(..., description="Ordered answer options")

    @property
    def option_values(self) -> List[int]:
        return [option.value for option in self.options]


class ScoringRange(BaseModel):
    """Inclusive score band with its label and guidance"""
    model_config = ConfigDict(frozen=True)

    min: int = Field(..., description="Minimum score (inclusive)")
    max: int = Field(..., description="Maximum score (inclusive)")
    label: str = Field(..., description="Band label, e.g. 'Moderate Stress'")
    description: str = Field("", description="Guidance shown with the band")

    def contains(self, score: int) -> bool:
        return self.min <= score <= self.max


class SubscaleGroup(BaseModel):
    """Named subset of questions scored separately from the total"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Subscale name, e.g. 'depression'")
    question_ids: List[str] = Field(..., description="Question ids belonging to this subscale")


class AssessmentDefinition(BaseModel):
    """Immutable questionnaire definition loaded at startup"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable assessment id, e.g. 'dass-21'")
    title: str = Field(..., description="Display title")
    description: str = Field("", description="Short description")
    questions: List[Question] = Field(..., description="Ordered questions (order is display-only)")
    scoring_ranges: List[ScoringRange] = Field(..., description="Contiguous, non-overlapping score bands")
    subscales: Optional[List[SubscaleGroup]] = Field(None, description="Optional subscale partition")

    @property
    def question_ids(self) -> List[str]:
        return [question.id for question in self.questions]

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def max_option_value(self) -> int:
        """
        Highest option value declared by any question.

        Display maxima use this per-scale value rather than a fixed 5, so
        DASS-21 (options 0-3) shows out of 63 instead of 105.
        """
        return max(value for question in self.questions for value in question.option_values)

    @property
    def min_possible_score(self) -> int:
        return sum(min(question.option_values) for question in self.questions)

    @property
    def max_possible_score(self) -> int:
        return sum(max(question.option_values) for question in self.questions)

    def get_question(self, question_id: str) -> Optional[Question]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None


class AssessmentResult(BaseModel):
    """Derived scoring result; computed on demand and never mutated"""
    model_config = ConfigDict(frozen=True)

    assessment_id: str
    assessment_title: str
    total_score: int = Field(..., description="Sum of all answer values")
    max_possible_score: int = Field(..., description="question count x highest option value (display only)")
    band: ScoringRange = Field(..., description="The band containing total_score")
    subscale_scores: Optional[Dict[str, int]] = Field(None, description="Per-subscale scores (DASS-21 only)")
    answers: Dict[str, int] = Field(default_factory=dict)
    completed_at: datetime = Field(default_factory=datetime.now)
