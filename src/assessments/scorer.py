"""
Assessment Scorer

Scores completed questionnaires:
- Total score (order-independent sum keyed by question id)
- Severity band lookup against the definition's scoring ranges
- Subscale scores for definitions that declare them (DASS-21)

Scoring is pure: no I/O, no state between calls.
"""

import logging
from typing import Dict, List, Mapping, Optional

from src.assessments.errors import (
    ConfigurationError,
    IncompleteAnswerSetError,
    InvalidAnswerError,
)
from src.assessments.models import AssessmentDefinition, AssessmentResult, ScoringRange

logger = logging.getLogger(__name__)


# DASS-21 items are scored 0-3 over 7 items per subscale; doubling puts each
# subscale on the 0-42 clinical DASS-42 scale.
SUBSCALE_MULTIPLIER = 2


def validate_definition(definition: AssessmentDefinition) -> None:
    """
    Check the structural invariants of an assessment definition.

    - Question ids are unique and every question has options
    - Option values are unique within a question
    - Scoring ranges are ordered, contiguous, non-overlapping and cover
      every achievable total from min_possible_score to max_possible_score
    - Subscale question ids exist and no question belongs to two subscales

    Raises:
        ConfigurationError: If any invariant is violated
    """
    if not definition.questions:
        raise ConfigurationError(f"Assessment '{definition.id}' has no questions")

    seen_ids = set()
    for question in definition.questions:
        if question.id in seen_ids:
            raise ConfigurationError(f"Assessment '{definition.id}' has duplicate question id '{question.id}'")
        seen_ids.add(question.id)

        if not question.options:
            raise ConfigurationError(f"Question '{question.id}' in '{definition.id}' has no options")
        values = question.option_values
        if len(set(values)) != len(values):
            raise ConfigurationError(f"Question '{question.id}' in '{definition.id}' repeats an option value")

    _validate_ranges(definition)
    _validate_subscales(definition, seen_ids)


def _validate_ranges(definition: AssessmentDefinition) -> None:
    ranges = definition.scoring_ranges
    if not ranges:
        raise ConfigurationError(f"Assessment '{definition.id}' has no scoring ranges")

    for score_range in ranges:
        if score_range.min > score_range.max:
            raise ConfigurationError(
                f"Range '{score_range.label}' in '{definition.id}' has min {score_range.min} > max {score_range.max}"
            )

    for previous, current in zip(ranges, ranges[1:]):
        if current.min != previous.max + 1:
            kind = "overlap" if current.min <= previous.max else "gap"
            raise ConfigurationError(
                f"Scoring ranges in '{definition.id}' have a {kind} between "
                f"'{previous.label}' ({previous.min}-{previous.max}) and '{current.label}' ({current.min}-{current.max})"
            )

    lowest, highest = definition.min_possible_score, definition.max_possible_score
    if ranges[0].min > lowest or ranges[-1].max < highest:
        raise ConfigurationError(
            f"Scoring ranges in '{definition.id}' cover {ranges[0].min}-{ranges[-1].max} "
            f"but achievable totals are {lowest}-{highest}"
        )


def _validate_subscales(definition: AssessmentDefinition, question_ids: set) -> None:
    if not definition.subscales:
        return

    assigned: Dict[str, str] = {}
    names = set()
    for group in definition.subscales:
        if group.name in names:
            raise ConfigurationError(f"Assessment '{definition.id}' repeats subscale '{group.name}'")
        names.add(group.name)

        for question_id in group.question_ids:
            if question_id not in question_ids:
                raise ConfigurationError(
                    f"Subscale '{group.name}' in '{definition.id}' references unknown question '{question_id}'"
                )
            if question_id in assigned:
                raise ConfigurationError(
                    f"Question '{question_id}' in '{definition.id}' belongs to both "
                    f"'{assigned[question_id]}' and '{group.name}'"
                )
            assigned[question_id] = group.name


class AssessmentScorer:
    """
    Scores a complete answer set against an assessment definition.

    Answers are validated before scoring: every question must be answered with
    one of its declared option values. An under-filled answer set is rejected
    rather than silently producing a low total.
    """

    def validate_answers(self, definition: AssessmentDefinition, answers: Mapping[str, int]) -> None:
        """
        Check that answers form a complete, valid answer set.

        Raises:
            InvalidAnswerError: Unknown question id or undeclared option value
            IncompleteAnswerSetError: One or more questions unanswered
        """
        for question_id, value in answers.items():
            question = definition.get_question(question_id)
            if question is None:
                raise InvalidAnswerError(question_id, f"not a question of '{definition.id}'")
            if value not in question.option_values:
                raise InvalidAnswerError(
                    question_id, f"{value!r} is not one of {question.option_values}"
                )

        missing = [question_id for question_id in definition.question_ids if question_id not in answers]
        if missing:
            raise IncompleteAnswerSetError(definition.id, missing)

    def score(self, definition: AssessmentDefinition, answers: Mapping[str, int]) -> AssessmentResult:
        """
        Score an answer set.

        Args:
            definition: Assessment definition
            answers: Mapping of question id -> chosen option value

        Returns:
            AssessmentResult with total, band and (optionally) subscale scores

        Raises:
            AssessmentError: If the answer set is incomplete or invalid
            ConfigurationError: If no scoring band contains the total
        """
        self.validate_answers(definition, answers)

        total = sum(answers[question_id] for question_id in definition.question_ids)
        band = self.find_band(definition, total)
        subscale_scores = self.score_subscales(definition, answers)

        logger.info(f"Scored '{definition.id}': total={total}, band={band.label}")

        return AssessmentResult(
            assessment_id=definition.id,
            assessment_title=definition.title,
            total_score=total,
            max_possible_score=definition.question_count * definition.max_option_value,
            band=band,
            subscale_scores=subscale_scores,
            answers=dict(answers),
        )

    def find_band(self, definition: AssessmentDefinition, total: int) -> ScoringRange:
        """
        Find the single scoring range containing a total.

        Raises:
            ConfigurationError: If zero or several ranges contain the total
        """
        matches: List[ScoringRange] = [r for r in definition.scoring_ranges if r.contains(total)]
        if len(matches) != 1:
            logger.error(
                f"Scoring ranges for '{definition.id}' matched {len(matches)} bands for total {total}"
            )
            raise ConfigurationError(
                f"Assessment '{definition.id}' has {len(matches)} scoring bands for total {total}; expected exactly one"
            )
        return matches[0]

    def score_subscales(
        self,
        definition: AssessmentDefinition,
        answers: Mapping[str, int],
    ) -> Optional[Dict[str, int]]:
        """Score each declared subscale as SUBSCALE_MULTIPLIER x its raw sum."""
        if not definition.subscales:
            return None

        return {
            group.name: SUBSCALE_MULTIPLIER * sum(answers[question_id] for question_id in group.question_ids)
            for group in definition.subscales
        }
