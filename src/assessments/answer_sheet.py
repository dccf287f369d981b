"""
Answer Sheet

Collects answers one question at a time. The current question can be
(re)answered, but the sheet only advances once it has a value, so a sheet
that reaches the end is always complete.
"""

import logging
from typing import Dict, Optional

from src.assessments.errors import AssessmentError, InvalidAnswerError
from src.assessments.models import AssessmentDefinition, AssessmentResult, Question
from src.assessments.scorer import AssessmentScorer

logger = logging.getLogger(__name__)


class AnswerSheet:
    """Incremental, append-only answer collection for one assessment run."""

    def __init__(self, definition: AssessmentDefinition):
        self._definition = definition
        self._answers: Dict[str, int] = {}
        self._position = 0

    @property
    def definition(self) -> AssessmentDefinition:
        return self._definition

    @property
    def position(self) -> int:
        """Zero-based index of the current question."""
        return self._position

    @property
    def current_question(self) -> Optional[Question]:
        if self._position >= self._definition.question_count:
            return None
        return self._definition.questions[self._position]

    @property
    def is_complete(self) -> bool:
        return all(question_id in self._answers for question_id in self._definition.question_ids)

    def answer(self, question_id: str, value: int) -> None:
        """
        Record the answer for the current question.

        Raises:
            InvalidAnswerError: If question_id is not the current question or
                value is not one of its options
        """
        question = self.current_question
        if question is None or question.id != question_id:
            expected = question.id if question else "none (sheet finished)"
            raise InvalidAnswerError(question_id, f"expected current question {expected}")
        if value not in question.option_values:
            raise InvalidAnswerError(question_id, f"{value!r} is not one of {question.option_values}")
        self._answers[question_id] = value

    def advance(self) -> Optional[Question]:
        """
        Move to the next question.

        Returns:
            The new current question, or None once the last question is passed

        Raises:
            AssessmentError: If the current question has no answer yet
        """
        question = self.current_question
        if question is None:
            return None
        if question.id not in self._answers:
            raise AssessmentError(f"Question '{question.id}' must be answered before continuing")
        self._position += 1
        return self.current_question

    def to_answer_set(self) -> Dict[str, int]:
        return dict(self._answers)

    def score(self, scorer: Optional[AssessmentScorer] = None) -> AssessmentResult:
        """Score the collected answers (rejects incomplete sheets)."""
        scorer = scorer or AssessmentScorer()
        return scorer.score(self._definition, self._answers)
