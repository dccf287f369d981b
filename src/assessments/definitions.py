"""
Static assessment catalogue.

Definitions are built once at import time, validated, and exposed through a
read-only registry. Nothing here is mutated at runtime.
"""

import logging
from types import MappingProxyType
from typing import List, Mapping, Sequence, Tuple

from src.assessments.errors import UnknownAssessmentError
from src.assessments.models import (
    AnswerOption,
    AssessmentDefinition,
    Question,
    ScoringRange,
    SubscaleGroup,
)
from src.assessments.scorer import validate_definition

logger = logging.getLogger(__name__)


def _options(pairs: Sequence[Tuple[int, str]]) -> List[AnswerOption]:
    return [AnswerOption(value=value, label=label) for value, label in pairs]


def _questions(texts: Sequence[str], options: List[AnswerOption]) -> List[Question]:
    return [Question(id=f"q{i}", text=text, options=options) for i, text in enumerate(texts, 1)]


# ============================================================
# DASS-21
# ============================================================

DASS_OPTIONS = _options([
    (0, "Did not apply to me at all"),
    (1, "Applied to me to some degree, or some of the time"),
    (2, "Applied to me to a considerable degree, or a good part of the time"),
    (3, "Applied to me very much, or most of the time"),
])

DASS_ITEMS = [
    "I found it hard to wind down",
    "I was aware of dryness of my mouth",
    "I couldn't seem to experience any positive feeling at all",
    "I experienced breathing difficulty (e.g., excessively rapid breathing, breathlessness in the absence of physical exertion)",
    "I found it difficult to work up the initiative to do things",
    "I tended to over-react to situations",
    "I experienced trembling (e.g., in the hands)",
    "I felt that I was using a lot of nervous energy",
    "I was worried about situations in which I might panic and make a fool of myself",
    "I felt that I had nothing to look forward to",
    "I found myself getting agitated",
    "I found it difficult to relax",
    "I felt down-hearted and blue",
    "I was intolerant of anything that kept me from getting on with what I was doing",
    "I felt I was close to panic",
    "I was unable to become enthusiastic about anything",
    "I felt I wasn't worth much as a person",
    "I felt that I was rather touchy",
    "I was aware of the action of my heart in the absence of physical exertion (e.g., sense of heart rate increase, heart missing a beat)",
    "I felt scared without any good reason",
    "I felt that life was meaningless",
]

# Standard DASS-21 item keys, 7 items per subscale
DASS_SUBSCALES = [
    SubscaleGroup(name="depression", question_ids=["q3", "q5", "q10", "q13", "q16", "q17", "q21"]),
    SubscaleGroup(name="anxiety", question_ids=["q2", "q4", "q7", "q9", "q15", "q19", "q20"]),
    SubscaleGroup(name="stress", question_ids=["q1", "q6", "q8", "q11", "q12", "q14", "q18"]),
]

DASS_21 = AssessmentDefinition(
    id="dass-21",
    title="DASS-21: Depression, Anxiety & Stress Scale",
    description=(
        "A validated 21-item scale to assess depression, anxiety, and stress levels. "
        "This is a widely used clinical assessment tool."
    ),
    questions=_questions(DASS_ITEMS, DASS_OPTIONS),
    scoring_ranges=[
        ScoringRange(min=0, max=9, label="Normal",
                     description="Your depression, anxiety, and stress levels are within normal range."),
        ScoringRange(min=10, max=13, label="Mild",
                     description="You may be experiencing mild symptoms. Consider self-care strategies and monitoring."),
        ScoringRange(min=14, max=20, label="Moderate",
                     description="You are experiencing moderate symptoms. Professional support may be beneficial."),
        ScoringRange(min=21, max=27, label="Severe",
                     description="You are experiencing severe symptoms. Professional support is recommended."),
        # Upper bound is the full 21 x 3 raw total so every achievable score has a band
        ScoringRange(min=28, max=63, label="Extremely Severe",
                     description="You are experiencing extremely severe symptoms. Immediate professional support is strongly recommended."),
    ],
    subscales=DASS_SUBSCALES,
)


# ============================================================
# Parenting Stress
# ============================================================

_FREQUENCY_UP = [(1, "Never"), (2, "Rarely"), (3, "Sometimes"), (4, "Often"), (5, "Always")]
_FREQUENCY_DOWN = [(5, "Always"), (4, "Often"), (3, "Sometimes"), (2, "Rarely"), (1, "Never")]
_HOW_WELL = [(5, "Very well"), (4, "Well"), (3, "Neutral"), (2, "Poorly"), (1, "Very poorly")]

PARENTING_STRESS = AssessmentDefinition(
    id="parenting-stress",
    title="Parenting Stress Assessment",
    description="Evaluate your current stress levels related to parenting and identify areas for support.",
    questions=[
        Question(id="q1", text="How often do you feel overwhelmed by your parenting responsibilities?",
                 options=_options(_FREQUENCY_UP)),
        Question(id="q2", text="How confident do you feel in your parenting decisions?",
                 options=_options([(5, "Very confident"), (4, "Somewhat confident"), (3, "Neutral"),
                                   (2, "Somewhat uncertain"), (1, "Very uncertain")])),
        Question(id="q3", text="How often do you feel supported in your parenting role?",
                 options=_options(_FREQUENCY_DOWN)),
        Question(id="q4", text="How well do you manage work-life balance as a parent?",
                 options=_options(_HOW_WELL)),
        Question(id="q5", text="How often do you feel guilty about your parenting?",
                 options=_options(_FREQUENCY_UP)),
    ],
    scoring_ranges=[
        ScoringRange(min=5, max=10, label="Low Stress",
                     description="You're managing parenting stress well. Continue your current strategies."),
        ScoringRange(min=11, max=15, label="Moderate Stress",
                     description="You may benefit from additional support and stress management techniques."),
        ScoringRange(min=16, max=20, label="High Stress",
                     description="Consider seeking professional support and implementing stress reduction strategies."),
        ScoringRange(min=21, max=25, label="Very High Stress",
                     description="Professional support is strongly recommended to help manage your stress levels."),
    ],
)


# ============================================================
# Relationship Satisfaction
# ============================================================

RELATIONSHIP_SATISFACTION = AssessmentDefinition(
    id="relationship-satisfaction",
    title="Relationship Satisfaction Scale",
    description="Assess the quality of your relationship and identify areas for improvement.",
    questions=[
        Question(id="q1", text="How satisfied are you with your current relationship?",
                 options=_options([(5, "Very satisfied"), (4, "Satisfied"), (3, "Neutral"),
                                   (2, "Dissatisfied"), (1, "Very dissatisfied")])),
        Question(id="q2", text="How well do you communicate with your partner?",
                 options=_options(_HOW_WELL)),
        Question(id="q3", text="How often do you feel supported by your partner?",
                 options=_options(_FREQUENCY_DOWN)),
        Question(id="q4", text="How well do you resolve conflicts together?",
                 options=_options(_HOW_WELL)),
        Question(id="q5", text="How much do you trust your partner?",
                 options=_options([(5, "Completely"), (4, "Mostly"), (3, "Somewhat"),
                                   (2, "A little"), (1, "Not at all")])),
    ],
    scoring_ranges=[
        ScoringRange(min=5, max=10, label="Low Satisfaction",
                     description="Your relationship may benefit from professional counseling and communication work."),
        ScoringRange(min=11, max=15, label="Moderate Satisfaction",
                     description="There are areas for improvement. Consider relationship counseling or workshops."),
        ScoringRange(min=16, max=20, label="Good Satisfaction",
                     description="Your relationship is generally healthy with room for continued growth."),
        ScoringRange(min=21, max=25, label="High Satisfaction",
                     description="You have a strong, healthy relationship. Keep nurturing it!"),
    ],
)


def _build_registry(definitions: Sequence[AssessmentDefinition]) -> Mapping[str, AssessmentDefinition]:
    registry = {}
    for definition in definitions:
        validate_definition(definition)
        registry[definition.id] = definition
    logger.debug(f"Loaded {len(registry)} assessment definitions")
    return MappingProxyType(registry)


ASSESSMENTS: Mapping[str, AssessmentDefinition] = _build_registry(
    [DASS_21, PARENTING_STRESS, RELATIONSHIP_SATISFACTION]
)


def list_assessments() -> List[AssessmentDefinition]:
    """Return all registered assessments in catalogue order."""
    return list(ASSESSMENTS.values())


def get_assessment(assessment_id: str) -> AssessmentDefinition:
    """
    Look up an assessment by id.

    Raises:
        UnknownAssessmentError: If no assessment has this id
    """
    try:
        return ASSESSMENTS[assessment_id]
    except KeyError:
        raise UnknownAssessmentError(assessment_id) from None
