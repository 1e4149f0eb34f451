"""
Discovery ranking of candidates for one subject.

The engine is fanned out over the candidate set, one call per pair, on a
joblib thread pool. Completion order never affects the output: results are
sorted by overall score (descending), then by the pair's symbolic value
(descending), then by candidate id.

Ranking steps:
1. Drop the subject itself from the candidate set
2. Optionally drop candidates failing the subject's preference lists
3. Score every remaining pair
4. Set aside ineligible pairs
5. Sort, apply min_score and top_k, assign ranks
"""

import logging
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, List, Optional, Sequence, Mapping

import pandas as pd
from joblib import Parallel, delayed

from ..schema import Profile, CompatibilityResult, IneligiblePair
from ..scoring.symbolic import symbolic_value
from ..inference.engine import CompatibilityEngine, EngineOptions
from ..data_loading.loaders import ProfileStore
from .filters import failed_preferences

logger = logging.getLogger(__name__)


@dataclass
class RankingConfig:
    """
    Configuration for discovery ranking.

    Attributes:
        n_jobs: Worker threads for the fan-out (1 runs inline)
        min_score: Minimum overall score kept in the ranking
        top_k: Keep only the best k matches (None keeps all)
        apply_preference_filters: Drop candidates failing the subject's preference lists
    """
    n_jobs: int = 4
    min_score: int = 0
    top_k: Optional[int] = None
    apply_preference_filters: bool = False

    def validate(self) -> None:
        """Validate configuration values."""
        if not isinstance(self.n_jobs, int) or self.n_jobs < 1:
            raise ValueError(f"n_jobs must be a positive integer, got {self.n_jobs}")
        if not 0 <= self.min_score <= 100:
            raise ValueError(f"min_score must be in [0, 100], got {self.min_score}")
        if self.top_k is not None and (not isinstance(self.top_k, int) or self.top_k < 1):
            raise ValueError(f"top_k must be a positive integer or None, got {self.top_k}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "RankingConfig":
        """Create from dictionary."""
        return cls(**d)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "RankingConfig":
        """Create from main config dictionary."""
        ranking_config = config.get("ranking", {}) or {}
        return cls(
            n_jobs=ranking_config.get("n_jobs", 4),
            min_score=ranking_config.get("min_score", 0),
            top_k=ranking_config.get("top_k"),
            apply_preference_filters=ranking_config.get("apply_preference_filters", False)
        )


@dataclass
class RankedMatch:
    """One ranked candidate."""
    rank: int
    candidate_id: str
    candidate_name: str
    result: CompatibilityResult
    tie_break: int

    def to_row(self) -> Dict[str, Any]:
        """Flat row for tabular output."""
        row = {
            "rank": self.rank,
            "candidate_id": self.candidate_id,
            "candidate_name": self.candidate_name,
            "overall_score": self.result.overall_score,
        }
        row.update(self.result.category_scores.to_dict())
        row["tie_break"] = self.tie_break
        indicator = self.result.symbolic_indicator
        row["symbolic_level"] = indicator.level.value if indicator is not None else None
        row["insights"] = " ".join(self.result.insights)
        return row


@dataclass
class DiscoveryRanking:
    """
    Ranked discovery results for one subject.

    Attributes:
        subject_id: Profile the ranking was computed for
        matches: Ranked eligible candidates
        ineligible: Pairs rejected by the eligibility policy
        filtered_out: Candidate id -> failed preference filters
        below_threshold: Number of eligible matches dropped by min_score / top_k
    """
    subject_id: str
    matches: List[RankedMatch] = field(default_factory=list)
    ineligible: List[IneligiblePair] = field(default_factory=list)
    filtered_out: Dict[str, List[str]] = field(default_factory=dict)
    below_threshold: int = 0

    @property
    def results(self) -> List[CompatibilityResult]:
        return [m.result for m in self.matches]

    def candidate_ids(self) -> List[str]:
        return [m.candidate_id for m in self.matches]

    def to_dataframe(self) -> pd.DataFrame:
        """Ranking as a DataFrame, one row per match."""
        columns = [
            "rank", "candidate_id", "candidate_name", "overall_score", "age",
            "location", "education_career", "lifestyle", "family_values",
            "tie_break", "symbolic_level", "insights"
        ]
        return pd.DataFrame([m.to_row() for m in self.matches], columns=columns)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "subject_id": self.subject_id,
            "matches": [
                {
                    "rank": m.rank,
                    "candidate_id": m.candidate_id,
                    "candidate_name": m.candidate_name,
                    "tie_break": m.tie_break,
                    "result": m.result.to_dict()
                }
                for m in self.matches
            ],
            "ineligible": [p.to_dict() for p in self.ineligible],
            "filtered_out": dict(self.filtered_out),
            "below_threshold": self.below_threshold
        }


def rank_candidates(
    subject: Profile,
    candidates: Sequence[Profile],
    engine: Optional[CompatibilityEngine] = None,
    config: Optional[RankingConfig] = None,
    options: Optional[EngineOptions] = None
) -> DiscoveryRanking:
    """
    Rank candidates for a subject.

    Args:
        subject: Profile doing the searching
        candidates: Candidate profiles (the subject itself is skipped)
        engine: CompatibilityEngine to use (default engine when None)
        config: RankingConfig (defaults when None)
        options: Per-call EngineOptions passed to every engine call

    Returns:
        DiscoveryRanking with matches in rank order
    """
    engine = engine or CompatibilityEngine()
    config = config or RankingConfig()
    config.validate()

    ranking = DiscoveryRanking(subject_id=subject.id)

    pool = []
    for candidate in candidates:
        if candidate.id == subject.id:
            continue
        if config.apply_preference_filters:
            failed = failed_preferences(subject, candidate)
            if failed:
                ranking.filtered_out[candidate.id] = failed
                continue
        pool.append(candidate)

    logger.info(
        f"Scoring {len(pool)} candidates for {subject.id} "
        f"({len(ranking.filtered_out)} filtered by preferences, n_jobs={config.n_jobs})"
    )

    outcomes = Parallel(n_jobs=config.n_jobs, prefer="threads")(
        delayed(engine.score)(subject, candidate, options) for candidate in pool
    )

    scored = []
    for candidate, outcome in zip(pool, outcomes):
        if not outcome.is_eligible:
            ranking.ineligible.append(outcome)
            continue
        scored.append((candidate, outcome, symbolic_value(subject.id, candidate.id)))

    scored.sort(key=lambda item: (-item[1].overall_score, -item[2], item[0].id))

    kept = [item for item in scored if item[1].overall_score >= config.min_score]
    if config.top_k is not None:
        kept = kept[:config.top_k]
    ranking.below_threshold = len(scored) - len(kept)

    ranking.matches = [
        RankedMatch(
            rank=position,
            candidate_id=candidate.id,
            candidate_name=candidate.name,
            result=result,
            tie_break=tie_break
        )
        for position, (candidate, result, tie_break) in enumerate(kept, start=1)
    ]

    logger.info(
        f"Ranked {len(ranking.matches)} matches for {subject.id} "
        f"({len(ranking.ineligible)} ineligible, {ranking.below_threshold} below threshold)"
    )
    return ranking


def rank_from_store(
    store: ProfileStore,
    subject_id: str,
    engine: Optional[CompatibilityEngine] = None,
    config: Optional[RankingConfig] = None,
    options: Optional[EngineOptions] = None
) -> DiscoveryRanking:
    """Rank every stored profile as a candidate for the stored subject."""
    subject = store.get(subject_id)
    return rank_candidates(subject, store.list_profiles(), engine=engine, config=config, options=options)
