"""Scoring module: eligibility gate, category scorers, insights and symbolic layer."""

from .eligibility import (
    EligibilityPolicy,
    opposite_gender_policy,
    allow_all_policy,
    DEFAULT_POLICY
)
from .categories import (
    Category,
    CategoryScorer,
    DEFAULT_SCORERS,
    RADAR_LABELS,
    compute_category_scores,
    resolve_scorers,
    score_age,
    score_location,
    score_education_career,
    score_lifestyle,
    score_family_values
)
from .insights import generate_insights
from .symbolic import symbolic_indicator, symbolic_value

__all__ = [
    "EligibilityPolicy",
    "opposite_gender_policy",
    "allow_all_policy",
    "DEFAULT_POLICY",
    "Category",
    "CategoryScorer",
    "DEFAULT_SCORERS",
    "RADAR_LABELS",
    "compute_category_scores",
    "resolve_scorers",
    "score_age",
    "score_location",
    "score_education_career",
    "score_lifestyle",
    "score_family_values",
    "generate_insights",
    "symbolic_indicator",
    "symbolic_value"
]
