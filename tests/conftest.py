from __future__ import annotations

import copy
from typing import Any, Dict

import pytest

from matchmaking.schema import Profile

BASE_PROFILE: Dict[str, Any] = {
    "id": "subject",
    "name": "Subject",
    "gender": "Male",
    "age": 30,
    "location": {"city": "Pune", "state": "Maharashtra", "country": "India"},
    "education": {"degree": "B.Tech", "field": "Computer Science"},
    "career": {"job_title": "Engineer"},
    "lifestyle": {"diet": "Veg", "smoking": "No", "drinking": "No"},
    "family": {"type": "Nuclear", "values": "Traditional"},
}


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    result = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def profile_record(**overrides: Any) -> Dict[str, Any]:
    """Raw profile mapping with nested overrides merged onto BASE_PROFILE."""
    return _merge(BASE_PROFILE, overrides)


def make_profile(**overrides: Any) -> Profile:
    return Profile.from_dict(profile_record(**overrides))


@pytest.fixture
def subject() -> Profile:
    return make_profile()


@pytest.fixture
def candidate() -> Profile:
    return make_profile(id="candidate", name="Candidate", gender="Female", age=33)
