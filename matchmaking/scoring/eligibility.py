"""
Eligibility policies for candidate pairs.

A policy is any callable ``(subject, candidate) -> bool``. The engine asks
the policy before scoring and returns an IneligiblePair when it says no.

The default policy encodes the platform's current matching rule: the
candidate's declared gender must differ from the subject's. Profiles carry a
two-value gender model, so users outside it have no path through this gate.
That is a known product-policy gap; replace the policy rather than editing
the scoring pipeline when it changes.
"""

from typing import Callable

from ..schema import Profile

EligibilityPolicy = Callable[[Profile, Profile], bool]


def opposite_gender_policy(subject: Profile, candidate: Profile) -> bool:
    """Return False when both profiles declare the same gender."""
    return subject.gender != candidate.gender


def allow_all_policy(subject: Profile, candidate: Profile) -> bool:
    """Accept every pair except a profile matched with itself."""
    return subject.id != candidate.id


DEFAULT_POLICY: EligibilityPolicy = opposite_gender_policy


def describe_rejection(policy: EligibilityPolicy) -> str:
    """Human-readable reason attached to IneligiblePair outcomes."""
    if policy is opposite_gender_policy:
        return "same declared gender is not supported by the matching policy"
    name = getattr(policy, "__name__", type(policy).__name__)
    return f"rejected by eligibility policy '{name}'"
