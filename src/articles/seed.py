"""
Sample articles loaded into a fresh store.
"""

from datetime import datetime
from typing import List

from .models import Article, ArticleReference, ArticleStatus


MILESTONES_CONTENT = """# Understanding Child Development Milestones: A Parent's Guide

Child development milestones are key indicators of your child's growth and development. Understanding these milestones can help parents support their child's learning and identify any potential concerns early.

## What Are Developmental Milestones?

Developmental milestones are skills or abilities that most children can do by a certain age. These include physical, cognitive, social, and emotional development areas.

## Key Milestones by Age

### 0-12 Months
- **Physical**: Lifts head, rolls over, sits without support
- **Cognitive**: Recognizes familiar faces, responds to name
- **Social**: Smiles at people, shows stranger anxiety

### 1-2 Years
- **Physical**: Walks independently, climbs stairs
- **Cognitive**: Says 10-20 words, follows simple instructions
- **Social**: Plays alongside other children, shows independence

### 2-3 Years
- **Physical**: Runs, jumps, uses utensils
- **Cognitive**: Speaks in 2-3 word sentences, sorts objects
- **Social**: Shows empathy, engages in pretend play

## Supporting Your Child's Development

1. **Provide a safe environment** for exploration
2. **Engage in interactive play** and conversation
3. **Read together** daily to support language development
4. **Encourage independence** while providing support
5. **Celebrate achievements** to build confidence

## When to Seek Help

If your child consistently misses milestones or shows regression, consult with your pediatrician or a child development specialist.
"""

DISCIPLINE_CONTENT = """# Positive Discipline Strategies for Toddlers

Disciplining toddlers can be challenging, but positive discipline strategies can help guide your child's behavior while maintaining a strong parent-child relationship.

## Understanding Toddler Behavior

Toddlers are learning to express themselves and test boundaries. Their behavior is often driven by curiosity, frustration, or the need for attention.

## Positive Discipline Techniques

### 1. Set Clear Expectations
- Use simple, clear language
- Be consistent with rules
- Explain consequences calmly

### 2. Redirect and Distract
- Guide your child to appropriate activities
- Offer alternatives to unwanted behavior

### 3. Time-In Instead of Time-Out
- Stay with your child during difficult moments
- Help them process their emotions

### 4. Natural Consequences
- Let children experience the natural results of their actions
- Ensure safety while allowing learning

## Consistency is Key

Consistent application of discipline strategies helps children understand expectations and feel secure in their environment.
"""


def sample_articles() -> List[Article]:
    """Fresh copies of the two featured sample articles."""
    return [
        Article(
            id="sample_1",
            title="Understanding Child Development Milestones: A Parent's Guide",
            content=MILESTONES_CONTENT,
            summary=(
                "A comprehensive guide to understanding child development milestones and how "
                "parents can support their child's growth and development."
            ),
            references=[
                ArticleReference(
                    id="ref_1",
                    article_id="sample_1",
                    title="Developmental Milestones in Early Childhood",
                    url="https://pediatrics.org/guidelines/developmental-milestones",
                    quote=(
                        "Developmental milestones are key indicators of healthy child development "
                        "and should be monitored regularly."
                    ),
                    domain="pediatrics.org",
                    published_date=datetime(2023, 12, 1),
                ),
            ],
            publish_date=datetime(2024, 1, 15),
            status=ArticleStatus.FEATURED,
            created_at=datetime(2024, 1, 15),
            updated_at=datetime(2024, 1, 15),
            tags=["child development", "milestones", "parenting", "growth"],
            category="Child Development",
        ),
        Article(
            id="sample_2",
            title="Positive Discipline Strategies for Toddlers",
            content=DISCIPLINE_CONTENT,
            summary=(
                "Learn effective positive discipline strategies for toddlers that promote good "
                "behavior while strengthening the parent-child relationship."
            ),
            references=[
                ArticleReference(
                    id="ref_2",
                    article_id="sample_2",
                    title="Positive Discipline in Early Childhood",
                    url="https://apa.org/psychology/positive-discipline",
                    quote=(
                        "Positive discipline strategies promote healthy child development and "
                        "strengthen parent-child relationships."
                    ),
                    domain="apa.org",
                    published_date=datetime(2023, 11, 15),
                ),
            ],
            publish_date=datetime(2024, 1, 10),
            status=ArticleStatus.FEATURED,
            created_at=datetime(2024, 1, 10),
            updated_at=datetime(2024, 1, 10),
            tags=["discipline", "toddlers", "positive parenting", "behavior"],
            category="Parenting Strategies",
        ),
    ]
