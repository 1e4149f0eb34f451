"""Weighted fusion of category scores."""

from .weighted import WeightVector, WeightedAggregator, round_half_up, DEFAULT_WEIGHTS

__all__ = ["WeightVector", "WeightedAggregator", "round_half_up", "DEFAULT_WEIGHTS"]
