"""
Category scorers for compatibility.

Each scorer maps a (subject, candidate) pair to an integer in [0, 100] for one
attribute category. Scorers are pure and total over validated profiles, and
are registered per Category so a single heuristic can be swapped without
touching the aggregator.

Scoring rules:
    age:              subject's preferred range if declared, else a gap table
    location:         city 100 > state 70 > country 40 > none 0
    education_career: 50 base, +30 same degree, +20 flat boost, capped at 100
    lifestyle:        100 minus diet / smoking / drinking mismatch penalties
    family_values:    equal 100, Moderate bridge 70, otherwise 30

The education/career and lifestyle constants are coarse placeholders kept
for parity with the deployed app.
"""

from enum import Enum
from typing import Callable, Dict, Mapping

from ..schema import Profile, Diet, FamilyValues

CategoryScorer = Callable[[Profile, Profile], int]


class Category(Enum):
    """Scored categories, in radar / weight order."""
    AGE = "age"
    LOCATION = "location"
    EDUCATION_CAREER = "education_career"
    LIFESTYLE = "lifestyle"
    FAMILY_VALUES = "family_values"

    @property
    def radar_label(self) -> str:
        return _RADAR_LABELS[self]


_RADAR_LABELS = {
    Category.AGE: "Age",
    Category.LOCATION: "Location",
    Category.EDUCATION_CAREER: "Career",
    Category.LIFESTYLE: "Lifestyle",
    Category.FAMILY_VALUES: "Family",
}

RADAR_LABELS = [c.radar_label for c in Category]

# Age gap table used when the subject declares no preferred range:
# (max gap inclusive, score)
AGE_GAP_TABLE = [(5, 100), (8, 80), (12, 50)]
AGE_GAP_FLOOR = 20
AGE_DECAY_PER_YEAR = 10

LOCATION_CITY = 100
LOCATION_STATE = 70
LOCATION_COUNTRY = 40

EDUCATION_BASE = 50
EDUCATION_DEGREE_BONUS = 30
EDUCATION_OPTIMISTIC_BOOST = 20

DIET_VEG_NON_VEG_PENALTY = 40
DIET_OTHER_PENALTY = 10
SMOKING_PENALTY = 20
DRINKING_PENALTY = 20

FAMILY_EXACT = 100
FAMILY_BRIDGE = 70
FAMILY_MISMATCH = 30


def score_age(subject: Profile, candidate: Profile) -> int:
    """
    Score the candidate's age against the subject.

    If the subject declares a preferred age range, a candidate inside it
    scores 100 and loses 10 points per year outside the nearest bound
    (floored at 0). Otherwise the absolute age gap is looked up in
    AGE_GAP_TABLE.

    Only the subject's preferences are consulted, so score_age(a, b) and
    score_age(b, a) can differ when just one side declares a range.

    Args:
        subject: Profile doing the searching
        candidate: Profile being scored

    Returns:
        Age score [0, 100]
    """
    age_range = subject.age_range
    if age_range is not None:
        if age_range.contains(candidate.age):
            return 100
        return max(0, 100 - age_range.distance(candidate.age) * AGE_DECAY_PER_YEAR)

    gap = abs(subject.age - candidate.age)
    for max_gap, score in AGE_GAP_TABLE:
        if gap <= max_gap:
            return score
    return AGE_GAP_FLOOR


def score_location(subject: Profile, candidate: Profile) -> int:
    """Tiered, case-insensitive location match. First matching tier wins."""
    a, b = subject.location, candidate.location
    if a.city.lower() == b.city.lower():
        return LOCATION_CITY
    if a.state.lower() == b.state.lower():
        return LOCATION_STATE
    if a.country.lower() == b.country.lower():
        return LOCATION_COUNTRY
    return 0


def score_education_career(subject: Profile, candidate: Profile) -> int:
    """
    Degree match with a flat optimistic boost.

    Every pair scores at least 70; a case-insensitive degree match
    scores 100.
    """
    score = EDUCATION_BASE
    if subject.education.degree.lower() == candidate.education.degree.lower():
        score += EDUCATION_DEGREE_BONUS
    return min(100, score + EDUCATION_OPTIMISTIC_BOOST)


def _diet_penalty(diet_a: Diet, diet_b: Diet) -> int:
    if diet_a == diet_b:
        return 0
    if {diet_a, diet_b} == {Diet.VEG, Diet.NON_VEG}:
        return DIET_VEG_NON_VEG_PENALTY
    return DIET_OTHER_PENALTY


def score_lifestyle(subject: Profile, candidate: Profile) -> int:
    """
    Start at 100 and subtract independent mismatch penalties.

    Penalties:
    - Veg vs Non-Veg: 40
    - any other diet mismatch: 10
    - smoking mismatch: 20
    - drinking mismatch: 20
    """
    a, b = subject.lifestyle, candidate.lifestyle
    score = 100 - _diet_penalty(a.diet, b.diet)
    if a.smoking != b.smoking:
        score -= SMOKING_PENALTY
    if a.drinking != b.drinking:
        score -= DRINKING_PENALTY
    return max(0, score)


def score_family_values(subject: Profile, candidate: Profile) -> int:
    a, b = subject.family.values, candidate.family.values
    if a == b:
        return FAMILY_EXACT
    # Moderate on either side bridges Traditional and Liberal
    if FamilyValues.MODERATE in (a, b):
        return FAMILY_BRIDGE
    return FAMILY_MISMATCH


DEFAULT_SCORERS: Dict[Category, CategoryScorer] = {
    Category.AGE: score_age,
    Category.LOCATION: score_location,
    Category.EDUCATION_CAREER: score_education_career,
    Category.LIFESTYLE: score_lifestyle,
    Category.FAMILY_VALUES: score_family_values,
}


def resolve_scorers(overrides: Mapping[Category, CategoryScorer] = None) -> Dict[Category, CategoryScorer]:
    """
    Merge scorer overrides onto the defaults.

    Args:
        overrides: Replacement scorers keyed by Category

    Returns:
        Complete scorer mapping covering every Category
    """
    scorers = dict(DEFAULT_SCORERS)
    if overrides:
        for category, scorer in overrides.items():
            if not isinstance(category, Category):
                raise ValueError(f"Unknown category: {category!r}")
            if not callable(scorer):
                raise ValueError(f"Scorer for {category.value} must be callable")
            scorers[category] = scorer
    return scorers


def compute_category_scores(
    subject: Profile,
    candidate: Profile,
    scorers: Mapping[Category, CategoryScorer] = None
) -> Dict[Category, int]:
    """
    Run every category scorer for one pair.

    Raises:
        ValueError: If a scorer returns a value outside [0, 100]
    """
    scorers = scorers if scorers is not None else DEFAULT_SCORERS
    scores = {}
    for category in Category:
        value = scorers[category](subject, candidate)
        if not 0 <= value <= 100:
            raise ValueError(
                f"Scorer for {category.value} returned {value}, expected a value in [0, 100]"
            )
        scores[category] = value
    return scores
