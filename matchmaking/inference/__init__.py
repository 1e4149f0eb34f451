"""
Inference module for compatibility scoring.

This module provides the engine that turns two Profile records into a
CompatibilityResult or an explicit IneligiblePair outcome.
"""

from .engine import (
    CompatibilityEngine,
    EngineOptions,
    MatchOutcome,
    DISCLAIMER,
    generate_compatibility
)

__all__ = [
    "CompatibilityEngine",
    "EngineOptions",
    "MatchOutcome",
    "DISCLAIMER",
    "generate_compatibility",
]
