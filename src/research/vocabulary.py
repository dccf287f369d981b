"""
Research vocabulary.

Static word lists that drive query expansion, relevance filtering and
follow-up selection. Everything here is immutable; callers that need a
different vocabulary build their own ResearchVocabulary and inject it.
"""

from dataclasses import dataclass
from typing import Tuple


# Qualifier phrases prepended to the user's query, in sub-query order
QUERY_TEMPLATES: Tuple[str, ...] = (
    "parenting AND child behavior AND {query}",
    "child development AND parenting AND {query}",
    "family psychology AND {query}",
    "pediatric psychology AND {query}",
    "early childhood AND parenting AND {query}",
    "parent-child interaction AND {query}",
    "child behavior management AND {query}",
)

RELEVANCE_KEYWORDS: Tuple[str, ...] = (
    # People
    "parent", "child", "children", "infant", "toddler", "adolescent", "teen",
    "family", "maternal", "paternal", "caregiver", "guardian",
    # Development and psychology
    "development", "behavior", "behavioral", "psychology", "psychological",
    "education", "learning", "cognitive", "emotional", "social",
    # Parenting practices
    "discipline", "punishment", "reward", "reinforcement",
    "sleep", "bedtime", "routine", "schedule",
    "screen", "digital", "media", "technology",
    "nutrition", "feeding", "eating", "meal",
    "safety", "injury", "prevention", "health", "wellness", "mental health",
    "school", "academic", "achievement",
    "play", "toys", "activities",
    "communication", "language", "speech",
    "autism", "adhd", "special needs",
    "tantrum", "temper", "anger", "aggression",
    "anxiety", "depression", "stress",
    "attachment", "bonding", "relationship",
)

# Clinical topics that mark a result as off-topic even when it mentions children
IRRELEVANT_TERMS: Tuple[str, ...] = (
    "cancer", "tumor", "carcinoma", "metastasis",
    "diabetes", "hypertension", "cardiovascular",
    "surgery", "surgical", "operation",
    "drug", "pharmaceutical", "medication",
    "virus", "bacterial", "infection",
    "congenital", "genetic", "chromosomal",
    "disease", "disorder", "syndrome",
    "treatment", "therapy", "intervention",
    "mortality", "death", "fatal",
)

# First-person family phrases; any match makes a query "personal"
PERSONAL_PHRASES: Tuple[str, ...] = (
    "my child", "my son", "my daughter", "my kid", "my toddler", "my baby",
    "i have", "i am", "we are", "our family",
    "my situation", "my experience",
    "what should i do", "how can i help",
)

PERSONAL_FOLLOW_UPS: Tuple[str, ...] = (
    "Can you help me with a specific situation?",
    "What if this approach doesn't work for my family?",
    "How do I know if I'm on the right track?",
    "What should I do if things get worse?",
)

# (trigger terms, follow-up questions), checked in order; first match wins
TOPIC_FOLLOW_UPS: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (("tantrum", "temper"), (
        "What are the warning signs before a tantrum starts?",
        "How can I prevent tantrums in public places?",
        "When should I seek professional help for tantrums?",
        "What's the difference between normal and concerning tantrum behavior?",
    )),
    (("sleep", "bedtime"), (
        "How much sleep does my child need at different ages?",
        "What if my child refuses to go to bed?",
        "How can I handle night wakings?",
        "What are the effects of insufficient sleep on children?",
    )),
    (("screen", "digital"), (
        "What are the recommended screen time limits by age?",
        "How can I make screen time more educational?",
        "What are the signs of screen addiction in children?",
        "How does screen time affect sleep and behavior?",
    )),
    (("discipline", "behavior"), (
        "What's the difference between discipline and punishment?",
        "How can I use positive reinforcement effectively?",
        "What are age-appropriate consequences?",
        "How do I handle aggressive behavior in children?",
    )),
    (("development", "learning"), (
        "What are the key developmental milestones?",
        "How can I support my child's learning at home?",
        "What are signs of developmental delays?",
        "How does play contribute to development?",
    )),
)

GENERIC_FOLLOW_UPS: Tuple[str, ...] = (
    "What does the latest research say about this?",
    "Are there any age-specific considerations?",
    "What are common mistakes parents make?",
    "When should I consult a professional?",
)


@dataclass(frozen=True)
class ResearchVocabulary:
    """Injectable bundle of the word lists above."""
    query_templates: Tuple[str, ...] = QUERY_TEMPLATES
    relevance_keywords: Tuple[str, ...] = RELEVANCE_KEYWORDS
    irrelevant_terms: Tuple[str, ...] = IRRELEVANT_TERMS
    personal_phrases: Tuple[str, ...] = PERSONAL_PHRASES
    personal_follow_ups: Tuple[str, ...] = PERSONAL_FOLLOW_UPS
    topic_follow_ups: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = TOPIC_FOLLOW_UPS
    generic_follow_ups: Tuple[str, ...] = GENERIC_FOLLOW_UPS

    def __post_init__(self):
        # Matching is case-insensitive; store everything lowercased once
        object.__setattr__(self, "relevance_keywords", tuple(t.lower() for t in self.relevance_keywords))
        object.__setattr__(self, "irrelevant_terms", tuple(t.lower() for t in self.irrelevant_terms))
        object.__setattr__(self, "personal_phrases", tuple(p.lower() for p in self.personal_phrases))


DEFAULT_VOCABULARY = ResearchVocabulary()
