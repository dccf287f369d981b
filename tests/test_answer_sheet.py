"""
Tests for incremental answer collection and the assessment catalogue.
"""

import pytest

from src.assessments import (
    AnswerSheet,
    AssessmentError,
    IncompleteAnswerSetError,
    InvalidAnswerError,
    UnknownAssessmentError,
    get_assessment,
    list_assessments,
)


class TestCatalogue:
    """Tests for list_assessments() and get_assessment()."""

    def test_catalogue_order(self):
        """Catalogue lists the three assessments in a fixed order."""
        assert [d.id for d in list_assessments()] == [
            "dass-21", "parenting-stress", "relationship-satisfaction",
        ]

    def test_dass_shape(self):
        """DASS-21 has 21 questions scored 0-3."""
        definition = get_assessment("dass-21")
        assert definition.question_count == 21
        assert all(q.option_values == [0, 1, 2, 3] for q in definition.questions)

    def test_unknown_assessment(self):
        """Unknown ids raise UnknownAssessmentError."""
        with pytest.raises(UnknownAssessmentError) as exc_info:
            get_assessment("burnout")
        assert exc_info.value.assessment_id == "burnout"

    def test_definitions_are_immutable(self):
        """Definitions cannot be modified at runtime."""
        definition = get_assessment("parenting-stress")
        with pytest.raises(Exception):
            definition.title = "Changed"


class TestAnswerSheet:
    """Tests for AnswerSheet."""

    @pytest.fixture
    def sheet(self):
        return AnswerSheet(get_assessment("parenting-stress"))

    def test_starts_at_first_question(self, sheet):
        """A new sheet points at the first question and is incomplete."""
        assert sheet.position == 0
        assert sheet.current_question.id == "q1"
        assert not sheet.is_complete

    def test_cannot_advance_unanswered(self, sheet):
        """advance() is refused until the current question has an answer."""
        with pytest.raises(AssessmentError):
            sheet.advance()

    def test_only_current_question_can_be_answered(self, sheet):
        """Answering ahead of the current question is rejected."""
        with pytest.raises(InvalidAnswerError):
            sheet.answer("q3", 3)

    def test_invalid_value_rejected(self, sheet):
        """Values outside the question's options are rejected."""
        with pytest.raises(InvalidAnswerError):
            sheet.answer("q1", 0)

    def test_current_answer_can_be_changed(self, sheet):
        """The current question may be re-answered before advancing."""
        sheet.answer("q1", 2)
        sheet.answer("q1", 4)
        assert sheet.to_answer_set() == {"q1": 4}

    def test_full_walkthrough_scores(self, sheet):
        """Answering and advancing through every question yields a scorable sheet."""
        while sheet.current_question is not None:
            sheet.answer(sheet.current_question.id, 3)
            sheet.advance()

        assert sheet.is_complete
        assert sheet.advance() is None

        result = sheet.score()
        assert result.total_score == 15
        assert result.band.label == "Moderate Stress"

    def test_partial_sheet_cannot_be_scored(self, sheet):
        """Scoring a partial sheet raises IncompleteAnswerSetError."""
        sheet.answer("q1", 3)
        sheet.advance()
        with pytest.raises(IncompleteAnswerSetError):
            sheet.score()

    def test_answer_set_is_a_copy(self, sheet):
        """Mutating the returned answer set does not change the sheet."""
        sheet.answer("q1", 3)
        answers = sheet.to_answer_set()
        answers["q2"] = 5
        assert sheet.to_answer_set() == {"q1": 3}
