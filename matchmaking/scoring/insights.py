"""Qualitative insight text for category scores."""

from typing import Dict, List

from .categories import Category

STRONG_THRESHOLD = 80
MODERATE_THRESHOLD = 50

# Categories that produce insight lines, in output order, with their topic text.
# Age and location are left out of the narrative.
INSIGHT_TOPICS = [
    (Category.FAMILY_VALUES, "family values"),
    (Category.LIFESTYLE, "lifestyle preferences"),
    (Category.EDUCATION_CAREER, "life goals"),
]


def describe_score(topic: str, score: float) -> str:
    """Map one category score to its insight template."""
    if score > STRONG_THRESHOLD:
        return f"Strong alignment in {topic}."
    if score > MODERATE_THRESHOLD:
        return f"Moderate compatibility in {topic}."
    return f"Differing viewpoints in {topic}."


def generate_insights(scores: Dict[Category, float]) -> List[str]:
    """
    Build the ordered insight list: family values, lifestyle, education/career.

    Args:
        scores: Category scores for one pair

    Returns:
        Three insight strings
    """
    return [describe_score(topic, scores[category]) for category, topic in INSIGHT_TOPICS]
