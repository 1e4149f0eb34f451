"""
Weighted fusion of category scores into one overall score.

Fusion Formula:
    overall = round_half_up(0.30 * age + 0.20 * location + 0.20 * education_career
                            + 0.15 * lifestyle + 0.15 * family_values)

The weighted sum is accumulated in category order so the float result is
identical to the one computed by the mobile and web clients, and rounding is
half-up (``floor(x + 0.5)``) rather than Python's round-half-to-even.
"""

import logging
import math
from dataclasses import dataclass, asdict
from typing import Dict, Any, Mapping

from ..scoring.categories import Category

logger = logging.getLogger(__name__)

WEIGHT_SUM_TOLERANCE = 1e-9


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negative input."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class WeightVector:
    """
    Category weights for the overall score.

    Attributes:
        age: Weight for the age score
        location: Weight for the location score
        education_career: Weight for the education/career score
        lifestyle: Weight for the lifestyle score
        family_values: Weight for the family values score
    """
    age: float = 0.30
    location: float = 0.20
    education_career: float = 0.20
    lifestyle: float = 0.15
    family_values: float = 0.15

    def validate(self) -> None:
        """Validate weights are in [0, 1] and sum to 1."""
        for name, weight in self.to_dict().items():
            if not 0 <= weight <= 1:
                raise ValueError(f"Weight '{name}' must be in [0, 1], got {weight}")
        total = self.total()
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Weights must sum to 1.0, got {total}")

    def total(self) -> float:
        return math.fsum(self.to_dict().values())

    def weight_for(self, category: Category) -> float:
        return getattr(self, category.value)

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "WeightVector":
        """Create from dictionary."""
        return cls(**d)


DEFAULT_WEIGHTS = WeightVector()


class WeightedAggregator:
    """
    Combines category scores into the overall compatibility score.

    Attributes:
        weights: WeightVector applied to the category scores
    """

    def __init__(self, weights: WeightVector = DEFAULT_WEIGHTS):
        """
        Initialize the aggregator.

        Args:
            weights: WeightVector instance
        """
        weights.validate()
        self.weights = weights

    def weighted_sum(self, scores: Mapping[Category, float]) -> float:
        """Unrounded weighted sum, accumulated in category order."""
        total = 0.0
        for category in Category:
            total += scores[category] * self.weights.weight_for(category)
        return total

    def aggregate(self, scores: Mapping[Category, float]) -> int:
        """
        Compute the overall score.

        Args:
            scores: Score per Category, each in [0, 100]

        Returns:
            Overall score [0, 100]
        """
        missing = [c.value for c in Category if c not in scores]
        if missing:
            raise ValueError(f"Missing category scores: {missing}")
        return round_half_up(self.weighted_sum(scores))

    def contributions(self, scores: Mapping[Category, float]) -> Dict[str, float]:
        """Per-category contribution to the weighted sum."""
        return {
            category.value: scores[category] * self.weights.weight_for(category)
            for category in Category
        }
