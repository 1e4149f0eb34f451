"""Discovery ranking module."""

from .discovery import (
    RankingConfig,
    RankedMatch,
    DiscoveryRanking,
    rank_candidates,
    rank_from_store
)
from .filters import failed_preferences, passes_preferences

__all__ = [
    "RankingConfig",
    "RankedMatch",
    "DiscoveryRanking",
    "rank_candidates",
    "rank_from_store",
    "failed_preferences",
    "passes_preferences"
]
