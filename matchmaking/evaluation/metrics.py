"""
Evaluation metrics for compatibility rankings.

The engine has no ground-truth labels, so evaluation focuses on:
1. Score distribution analysis (overall and per category)
2. Invariant checks over a batch of results (bounds, weighted-sum identity)
3. Reciprocal agreement: how far score(A, B) and score(B, A) diverge

This module DOES NOT claim real-world predictive accuracy.
"""

import logging
import json
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Sequence

import numpy as np
from scipy.stats import spearmanr

from ..schema import Profile, CompatibilityResult
from ..scoring.categories import Category
from ..fusion.weighted import WeightVector, WeightedAggregator, DEFAULT_WEIGHTS
from ..inference.engine import CompatibilityEngine

logger = logging.getLogger(__name__)

DEFAULT_QUANTILES = [0.1, 0.25, 0.5, 0.75, 0.9]


@dataclass
class ScoreDistributionStats:
    """Statistics about score distribution."""
    count: int
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 40.0, "p50": 70.0, "p90": 90.0}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": int(self.count),
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class InvariantCheck:
    """Results of invariant checks over a batch of results."""
    n_results: int
    out_of_bounds: int
    weighted_sum_mismatches: int
    radar_mismatches: int

    @property
    def passed(self) -> bool:
        return self.out_of_bounds == 0 and self.weighted_sum_mismatches == 0 and self.radar_mismatches == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_results": int(self.n_results),
            "out_of_bounds": int(self.out_of_bounds),
            "weighted_sum_mismatches": int(self.weighted_sum_mismatches),
            "radar_mismatches": int(self.radar_mismatches),
            "passed": bool(self.passed)
        }


@dataclass
class ReciprocalAgreement:
    """Agreement between forward and reverse scoring of the same pairs."""
    n_pairs: int
    n_asymmetric: int
    mean_abs_difference: float
    spearman: Optional[float]

    @property
    def asymmetry_rate(self) -> float:
        return self.n_asymmetric / self.n_pairs if self.n_pairs else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_pairs": int(self.n_pairs),
            "n_asymmetric": int(self.n_asymmetric),
            "asymmetry_rate": float(self.asymmetry_rate),
            "mean_abs_difference": float(self.mean_abs_difference),
            "spearman": None if self.spearman is None else float(self.spearman)
        }


@dataclass
class RankingReport:
    """
    Evaluation report for one discovery ranking.

    Documents score behavior WITHOUT claiming predictive validity.
    """
    subject_id: str
    overall_stats: Optional[ScoreDistributionStats]
    category_stats: Dict[str, ScoreDistributionStats] = field(default_factory=dict)
    invariant_check: Optional[InvariantCheck] = None
    reciprocal_agreement: Optional[ReciprocalAgreement] = None
    additional_metrics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "subject_id": self.subject_id,
            "overall_stats": self.overall_stats.to_dict() if self.overall_stats else None,
            "category_stats": {k: v.to_dict() for k, v in self.category_stats.items()},
            "additional_metrics": self.additional_metrics
        }
        if self.invariant_check:
            result["invariant_check"] = self.invariant_check.to_dict()
        if self.reciprocal_agreement:
            result["reciprocal_agreement"] = self.reciprocal_agreement.to_dict()
        return result

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved evaluation report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        lines = [
            f"Ranking Report: {self.subject_id}",
            "=" * 50,
        ]

        if self.overall_stats is None:
            lines.extend(["", "No eligible matches scored."])
        else:
            lines.extend([
                "",
                f"Overall Score Distribution ({self.overall_stats.count} matches):",
                f"  Mean: {self.overall_stats.mean:.2f}",
                f"  Std:  {self.overall_stats.std:.2f}",
                f"  Min:  {self.overall_stats.min:.0f}",
                f"  Max:  {self.overall_stats.max:.0f}",
            ])
            for q_name, q_value in self.overall_stats.quantiles.items():
                lines.append(f"  {q_name}: {q_value:.2f}")

        if self.category_stats:
            lines.extend(["", "Category Means:"])
            for name, stats in self.category_stats.items():
                lines.append(f"  {name}: {stats.mean:.2f}")

        if self.invariant_check:
            lines.extend([
                "",
                "Invariant Check:",
                f"  Out of bounds: {self.invariant_check.out_of_bounds}",
                f"  Weighted-sum mismatches: {self.invariant_check.weighted_sum_mismatches}",
                f"  Passed: {self.invariant_check.passed}",
            ])

        if self.reciprocal_agreement:
            spearman = self.reciprocal_agreement.spearman
            lines.extend([
                "",
                "Reciprocal Agreement:",
                f"  Asymmetric pairs: {self.reciprocal_agreement.n_asymmetric}"
                f"/{self.reciprocal_agreement.n_pairs}",
                f"  Mean |forward - reverse|: {self.reciprocal_agreement.mean_abs_difference:.2f}",
                f"  Spearman: {'n/a' if spearman is None else f'{spearman:.4f}'}",
            ])

        return "\n".join(lines)


def compute_score_distribution_stats(
    scores: Sequence[float],
    quantiles: Sequence[float] = DEFAULT_QUANTILES
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for scores.

    Args:
        scores: Compatibility scores
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance

    Raises:
        ValueError: If scores is empty
    """
    values = np.asarray(scores, dtype=float)
    if values.size == 0:
        raise ValueError("Cannot compute distribution statistics of an empty score set")

    quantile_dict = {
        f"p{int(round(q * 100))}": float(np.percentile(values, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        count=int(values.size),
        mean=float(np.mean(values)),
        std=float(np.std(values)),
        min=float(np.min(values)),
        max=float(np.max(values)),
        quantiles=quantile_dict
    )


def check_result_invariants(
    results: Sequence[CompatibilityResult],
    weights: WeightVector = DEFAULT_WEIGHTS
) -> InvariantCheck:
    """
    Check bounds, the weighted-sum identity and the radar projection.

    Args:
        results: Engine results
        weights: Weight vector the results were produced with

    Returns:
        InvariantCheck with violation counts
    """
    aggregator = WeightedAggregator(weights)
    out_of_bounds = 0
    mismatches = 0
    radar_mismatches = 0

    for result in results:
        values = result.category_scores.as_list()
        if any(not 0 <= v <= 100 for v in values) or not 0 <= result.overall_score <= 100:
            out_of_bounds += 1
        scores = dict(zip(Category, values))
        if aggregator.aggregate(scores) != result.overall_score:
            mismatches += 1
        if list(result.radar.values) != values:
            radar_mismatches += 1

    check = InvariantCheck(
        n_results=len(results),
        out_of_bounds=out_of_bounds,
        weighted_sum_mismatches=mismatches,
        radar_mismatches=radar_mismatches
    )
    if not check.passed:
        logger.warning(f"Invariant violations found: {check.to_dict()}")
    return check


def compute_reciprocal_agreement(
    engine: CompatibilityEngine,
    subject: Profile,
    candidates: Sequence[Profile]
) -> ReciprocalAgreement:
    """
    Compare score(subject, c) with score(c, subject) over eligible pairs.

    Age scoring reads only the first profile's preferences, so the two
    directions legitimately differ. This measures by how much.

    Args:
        engine: Engine used for both directions
        subject: Subject profile
        candidates: Candidate profiles

    Returns:
        ReciprocalAgreement (spearman is None with fewer than 2 pairs or constant scores)
    """
    forward = []
    reverse = []
    for candidate in candidates:
        if candidate.id == subject.id:
            continue
        there = engine.score(subject, candidate)
        back = engine.score(candidate, subject)
        if not (there.is_eligible and back.is_eligible):
            continue
        forward.append(there.overall_score)
        reverse.append(back.overall_score)

    if not forward:
        return ReciprocalAgreement(n_pairs=0, n_asymmetric=0, mean_abs_difference=0.0, spearman=None)

    fwd = np.asarray(forward, dtype=float)
    rev = np.asarray(reverse, dtype=float)
    diff = np.abs(fwd - rev)

    spearman = None
    if len(forward) >= 2 and fwd.max() > fwd.min() and rev.max() > rev.min():
        corr, _ = spearmanr(fwd, rev)
        spearman = float(corr)

    return ReciprocalAgreement(
        n_pairs=len(forward),
        n_asymmetric=int(np.count_nonzero(diff)),
        mean_abs_difference=float(np.mean(diff)),
        spearman=spearman
    )


def create_ranking_report(
    subject_id: str,
    results: Sequence[CompatibilityResult],
    quantiles: Sequence[float] = DEFAULT_QUANTILES,
    reciprocal_agreement: Optional[ReciprocalAgreement] = None,
    additional_metrics: Optional[Dict[str, Any]] = None
) -> RankingReport:
    """
    Create an evaluation report for a ranking.

    Args:
        subject_id: Subject the ranking was computed for
        results: Eligible results in the ranking
        quantiles: Quantiles for the distribution statistics
        reciprocal_agreement: Optional precomputed reciprocal agreement
        additional_metrics: Extra values to carry into the report

    Returns:
        RankingReport instance
    """
    overall_stats = None
    category_stats = {}
    if results:
        overall_stats = compute_score_distribution_stats(
            [r.overall_score for r in results], quantiles
        )
        for index, category in enumerate(Category):
            category_stats[category.value] = compute_score_distribution_stats(
                [r.category_scores.as_list()[index] for r in results], quantiles
            )

    return RankingReport(
        subject_id=subject_id,
        overall_stats=overall_stats,
        category_stats=category_stats,
        invariant_check=check_result_invariants(results),
        reciprocal_agreement=reciprocal_agreement,
        additional_metrics=dict(additional_metrics or {})
    )
