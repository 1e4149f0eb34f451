from __future__ import annotations

import pytest

from matchmaking.schema import (
    AgeRange,
    Diet,
    FamilyValues,
    Gender,
    Habit,
    InvalidProfileError,
    Profile,
)

from .conftest import make_profile, profile_record


def test_from_dict_converts_enums_and_sections():
    profile = make_profile()
    assert profile.gender is Gender.MALE
    assert profile.lifestyle.diet is Diet.VEG
    assert profile.lifestyle.drinking is Habit.NO
    assert profile.family.values is FamilyValues.TRADITIONAL
    assert profile.preferences is None
    assert profile.age_range is None


def test_camel_case_keys_are_accepted():
    record = profile_record(
        preferences={
            "ageRange": {"min": 25, "max": 30},
            "preferredDiet": ["Veg", "Vegan"],
            "preferredFamilyValues": ["Moderate"],
        }
    )
    record["career"] = {"jobTitle": "Doctor", "incomeRange": "High"}
    profile = Profile.from_dict(record)
    assert profile.age_range == AgeRange(25, 30)
    assert profile.preferences.preferred_diet == [Diet.VEG, Diet.VEGAN]
    assert profile.preferences.preferred_family_values == [FamilyValues.MODERATE]
    assert profile.career.job_title == "Doctor"
    assert profile.career.income_range == "High"


def test_to_dict_round_trips():
    record = profile_record(preferences={"age_range": {"min": 25, "max": 30}})
    profile = Profile.from_dict(record)
    assert Profile.from_dict(profile.to_dict()) == profile


@pytest.mark.parametrize(
    "record, field_path",
    [
        ({"location": None}, "location"),
        ({"lifestyle": None}, "lifestyle"),
        ({"gender": "Other"}, "gender"),
        ({"age": "thirty"}, "age"),
        ({"age": True}, "age"),
        ({"age": -1}, "age"),
        ({"id": "  "}, "id"),
        ({"lifestyle": {"diet": "Keto"}}, "lifestyle.diet"),
        ({"family": {"values": "Strict"}}, "family.values"),
        ({"location": {"city": 12}}, "location.city"),
        ({"preferences": {"age_range": {"min": 40, "max": 30}}}, "preferences.age_range"),
        ({"preferences": {"age_range": {"min": 20}}}, "preferences.age_range.max"),
    ],
)
def test_invalid_profiles_fail_fast(record, field_path):
    with pytest.raises(InvalidProfileError) as excinfo:
        Profile.from_dict(profile_record(**record))
    assert excinfo.value.field_path == field_path
    assert field_path in str(excinfo.value)


def test_missing_section_is_reported():
    record = profile_record()
    del record["education"]
    with pytest.raises(InvalidProfileError, match="education"):
        Profile.from_dict(record)


def test_invalid_profile_error_is_value_error():
    assert issubclass(InvalidProfileError, ValueError)


def test_age_range_distance_uses_nearest_bound():
    age_range = AgeRange(30, 35)
    assert age_range.contains(30) and age_range.contains(35)
    assert not age_range.contains(36)
    assert age_range.distance(40) == 5
    assert age_range.distance(27) == 3


def test_direct_construction_converts_nested_mappings():
    profile = Profile(
        id="direct",
        gender="Female",
        age=29,
        location={"city": "Pune", "state": "Maharashtra", "country": "India"},
        education={"degree": "MBA"},
        career={"jobTitle": "Analyst", "incomeRange": "500000"},
        lifestyle={"diet": "Veg", "smoking": "No", "drinking": "No"},
        family={"type": "Joint", "values": "Moderate"},
    )
    assert profile == make_profile(
        id="direct", name="", gender="Female", age=29,
        education={"degree": "MBA", "field": ""},
        career={"job_title": "Analyst", "income_range": "500000"},
        family={"type": "Joint", "values": "Moderate"},
    )


@pytest.mark.parametrize(
    "section, value, field_path",
    [
        ("location", {"city": "Pune"}, "location.state"),
        ("education", {"field": "Finance"}, "education.degree"),
        ("lifestyle", {"diet": "Veg", "smoking": "No"}, "lifestyle.drinking"),
        ("family", {"values": "Moderate"}, "family.type"),
    ],
)
def test_direct_construction_reports_missing_nested_keys(section, value, field_path):
    fields = profile_record()
    fields[section] = value
    with pytest.raises(InvalidProfileError) as excinfo:
        Profile(**fields)
    assert excinfo.value.field_path == field_path
