"""
Preference filters for discovery.

A subject's preference lists act as optional hard filters applied before
scoring. An empty list places no constraint. Matching is case-insensitive
for free-text fields.
"""

from typing import List

from ..schema import Profile


def _normalize(value: str) -> str:
    return value.strip().lower()


def _normalized_set(values) -> set:
    return {_normalize(v) for v in values}


def failed_preferences(subject: Profile, candidate: Profile) -> List[str]:
    """
    List the subject's preference filters that the candidate fails.

    Args:
        subject: Profile whose preferences apply
        candidate: Profile being filtered

    Returns:
        Names of failed filters (empty if the candidate passes all of them)
    """
    prefs = subject.preferences
    if prefs is None:
        return []

    failed = []
    if prefs.preferred_locations:
        wanted = _normalized_set(prefs.preferred_locations)
        location = candidate.location
        if _normalize(location.city) not in wanted and _normalize(location.state) not in wanted:
            failed.append("preferred_locations")
    if prefs.preferred_education:
        if _normalize(candidate.education.degree) not in _normalized_set(prefs.preferred_education):
            failed.append("preferred_education")
    if prefs.preferred_diet and candidate.lifestyle.diet not in prefs.preferred_diet:
        failed.append("preferred_diet")
    if prefs.preferred_family_values and candidate.family.values not in prefs.preferred_family_values:
        failed.append("preferred_family_values")
    return failed


def passes_preferences(subject: Profile, candidate: Profile) -> bool:
    return not failed_preferences(subject, candidate)
