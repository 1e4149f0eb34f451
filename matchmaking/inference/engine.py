"""
Compatibility engine.

This module runs the single-pass scoring pipeline for one pair:
1. Ask the eligibility policy whether the pair may be scored
2. Run the five category scorers
3. Fuse category scores with the fixed weight vector
4. Generate insight text
5. Optionally attach the symbolic indicator
6. Assemble the CompatibilityResult

The engine holds no mutable state after construction, performs no I/O and
never modifies its inputs, so one instance may be shared across threads.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, Any, Mapping, Optional, Union

from ..schema import (
    Profile,
    CategoryScores,
    RadarData,
    CompatibilityResult,
    IneligiblePair,
)
from ..scoring.categories import (
    Category,
    CategoryScorer,
    RADAR_LABELS,
    compute_category_scores,
    resolve_scorers,
)
from ..scoring.eligibility import EligibilityPolicy, DEFAULT_POLICY, describe_rejection
from ..scoring.insights import generate_insights
from ..scoring.symbolic import symbolic_indicator
from ..fusion.weighted import WeightedAggregator, DEFAULT_WEIGHTS

logger = logging.getLogger(__name__)

DISCLAIMER = (
    "This compatibility insight is for informational purposes only and does not "
    "constitute medical, legal, or predictive advice."
)

MatchOutcome = Union[CompatibilityResult, IneligiblePair]


@dataclass(frozen=True)
class EngineOptions:
    """
    Per-call engine options.

    Attributes:
        include_symbolic: Attach the identifier-derived symbolic indicator
    """
    include_symbolic: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "EngineOptions":
        """Create from dictionary. Accepts the clients' camelCase key."""
        include = d.get("include_symbolic", d.get("includeSymbolic", False))
        return cls(include_symbolic=bool(include))

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "EngineOptions":
        """Create from main config dictionary."""
        return cls.from_dict(config.get("engine", {}) or {})


def _coerce_profile(profile: Union[Profile, Mapping[str, Any]]) -> Profile:
    if isinstance(profile, Profile):
        return profile
    return Profile.from_dict(profile)


def _coerce_options(options: Union[EngineOptions, Mapping[str, Any], None]) -> Optional[EngineOptions]:
    if options is None or isinstance(options, EngineOptions):
        return options
    return EngineOptions.from_dict(options)


class CompatibilityEngine:
    """
    Deterministic multi-factor compatibility scorer.

    Attributes:
        options: Default EngineOptions for calls that pass none
        policy: Eligibility policy consulted before scoring
        scorers: Category scorer per Category
        aggregator: WeightedAggregator producing the overall score
    """

    def __init__(
        self,
        options: Optional[EngineOptions] = None,
        policy: EligibilityPolicy = DEFAULT_POLICY,
        scorers: Optional[Mapping[Category, CategoryScorer]] = None
    ):
        """
        Initialize the engine.

        Args:
            options: Default options (include_symbolic=False when omitted)
            policy: Replaceable eligibility predicate over two profiles
            scorers: Per-category scorer overrides merged onto the defaults
        """
        self.options = options or EngineOptions()
        self.policy = policy
        self.scorers = resolve_scorers(scorers)
        self.aggregator = WeightedAggregator(DEFAULT_WEIGHTS)

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **kwargs) -> "CompatibilityEngine":
        """Create an engine using the config's engine section as default options."""
        return cls(options=EngineOptions.from_config(config), **kwargs)

    def is_eligible(self, subject: Profile, candidate: Profile) -> bool:
        return bool(self.policy(subject, candidate))

    def score(
        self,
        subject: Union[Profile, Mapping[str, Any]],
        candidate: Union[Profile, Mapping[str, Any]],
        options: Union[EngineOptions, Mapping[str, Any], None] = None
    ) -> MatchOutcome:
        """
        Compute compatibility of a candidate for a subject.

        Args:
            subject: Profile doing the searching (or a raw profile mapping)
            candidate: Profile being scored (or a raw profile mapping)
            options: Per-call options, falling back to the engine defaults

        Returns:
            CompatibilityResult, or IneligiblePair when the policy rejects the pair

        Raises:
            InvalidProfileError: If a raw mapping is not a valid profile
        """
        subject = _coerce_profile(subject)
        candidate = _coerce_profile(candidate)
        options = _coerce_options(options) or self.options

        if not self.is_eligible(subject, candidate):
            reason = describe_rejection(self.policy)
            logger.debug(f"Pair {subject.id} -> {candidate.id} is ineligible: {reason}")
            return IneligiblePair(subject_id=subject.id, candidate_id=candidate.id, reason=reason)

        scores = compute_category_scores(subject, candidate, self.scorers)
        overall = self.aggregator.aggregate(scores)
        insights = generate_insights(scores)

        indicator = None
        if options.include_symbolic:
            indicator = symbolic_indicator(subject.id, candidate.id)

        category_scores = CategoryScores(
            age=scores[Category.AGE],
            location=scores[Category.LOCATION],
            education_career=scores[Category.EDUCATION_CAREER],
            lifestyle=scores[Category.LIFESTYLE],
            family_values=scores[Category.FAMILY_VALUES]
        )

        return CompatibilityResult(
            overall_score=overall,
            category_scores=category_scores,
            radar=RadarData(labels=list(RADAR_LABELS), values=category_scores.as_list()),
            insights=insights,
            disclaimer=DISCLAIMER,
            symbolic_indicator=indicator
        )


_DEFAULT_ENGINE = CompatibilityEngine()


def generate_compatibility(
    subject: Union[Profile, Mapping[str, Any]],
    candidate: Union[Profile, Mapping[str, Any]],
    options: Union[EngineOptions, Mapping[str, Any], None] = None
) -> MatchOutcome:
    """
    Score one pair with the default policy, scorers and weights.

    Args:
        subject: Profile doing the searching
        candidate: Profile being scored
        options: EngineOptions or a mapping with include_symbolic

    Returns:
        CompatibilityResult or IneligiblePair
    """
    return _DEFAULT_ENGINE.score(subject, candidate, options)
