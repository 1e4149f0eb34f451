"""Evaluation module for compatibility ranking analysis."""

from .metrics import (
    compute_score_distribution_stats,
    check_result_invariants,
    compute_reciprocal_agreement,
    RankingReport,
    create_ranking_report
)

__all__ = [
    "compute_score_distribution_stats",
    "check_result_invariants",
    "compute_reciprocal_agreement",
    "RankingReport",
    "create_ranking_report"
]
