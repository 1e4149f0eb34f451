"""
Matchmaking Compatibility Engine

This package scores the compatibility of two matchmaking profiles and ranks
discovery candidates for a subject.

Key Design Decisions:
- Scoring is a pure, deterministic, single-pass pipeline per pair
- Eligibility is a replaceable policy checked before any scoring
- Each category heuristic is a swappable scorer; weights are fixed
- The symbolic indicator is identifier-derived flavor with no statistical meaning
"""

from .schema import Profile, CompatibilityResult, IneligiblePair, InvalidProfileError
from .inference import CompatibilityEngine, EngineOptions, generate_compatibility

__version__ = "1.0.0"

__all__ = [
    "Profile",
    "CompatibilityResult",
    "IneligiblePair",
    "InvalidProfileError",
    "CompatibilityEngine",
    "EngineOptions",
    "generate_compatibility",
]
