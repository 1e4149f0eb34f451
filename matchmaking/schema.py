"""
Profile and result schema for compatibility scoring.

Defines the read-only Profile record supplied by the profile store and the
records produced by one engine invocation.

Profile sections:
- identity: id, name, gender, age
- location: city / state / country
- education and career
- lifestyle: diet, smoking, drinking
- family: type and values
- preferences: optional age range and preference lists
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Mapping
from enum import Enum


class InvalidProfileError(ValueError):
    """Raised when a profile record is missing fields or holds invalid values."""

    def __init__(self, field_path: str, message: str):
        self.field_path = field_path
        self.reason = message
        super().__init__(f"Invalid profile field '{field_path}': {message}")


class Gender(Enum):
    """Declared gender. The platform matches on a two-value model."""
    MALE = "Male"
    FEMALE = "Female"


class Diet(Enum):
    """Diet options."""
    VEG = "Veg"
    NON_VEG = "Non-Veg"
    VEGAN = "Vegan"
    EGGETARIAN = "Eggetarian"


class Habit(Enum):
    """Smoking / drinking frequency."""
    NO = "No"
    OCCASIONAL = "Occasional"
    YES = "Yes"


class FamilyType(Enum):
    NUCLEAR = "Nuclear"
    JOINT = "Joint"
    OTHER = "Other"


class FamilyValues(Enum):
    TRADITIONAL = "Traditional"
    MODERATE = "Moderate"
    LIBERAL = "Liberal"


def _coerce_enum(enum_cls, value, field_path: str):
    """Convert a raw string to an enum member, raising InvalidProfileError."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [m.value for m in enum_cls]
        raise InvalidProfileError(field_path, f"expected one of {allowed}, got {value!r}") from None


def _require_str(value, field_path: str, allow_empty: bool = True) -> str:
    if not isinstance(value, str):
        raise InvalidProfileError(field_path, f"must be a string, got {type(value).__name__}")
    if not allow_empty and not value.strip():
        raise InvalidProfileError(field_path, "must not be empty")
    return value


def _require_int(value, field_path: str) -> int:
    # bool is an int subclass and never a valid age
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidProfileError(field_path, f"must be an integer, got {value!r}")
    return value


def _require_section(data: Mapping[str, Any], key: str, prefix: str = "") -> Mapping[str, Any]:
    path = f"{prefix}{key}"
    if key not in data or data[key] is None:
        raise InvalidProfileError(path, "section is missing")
    section = data[key]
    if not isinstance(section, Mapping):
        raise InvalidProfileError(path, f"must be a mapping, got {type(section).__name__}")
    return section


def _require_key(data: Mapping[str, Any], key: str, path: str):
    if key not in data or data[key] is None:
        raise InvalidProfileError(path, "is required")
    return data[key]


@dataclass
class Location:
    city: str
    state: str
    country: str

    def __post_init__(self):
        for attr in ["city", "state", "country"]:
            _require_str(getattr(self, attr), f"location.{attr}")

    def to_dict(self) -> Dict[str, str]:
        return {"city": self.city, "state": self.state, "country": self.country}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Location":
        return cls(
            city=_require_key(data, "city", "location.city"),
            state=_require_key(data, "state", "location.state"),
            country=_require_key(data, "country", "location.country")
        )


@dataclass
class Education:
    degree: str
    field: str = ""

    def __post_init__(self):
        _require_str(self.degree, "education.degree")
        _require_str(self.field, "education.field")

    def to_dict(self) -> Dict[str, str]:
        return {"degree": self.degree, "field": self.field}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Education":
        return cls(
            degree=_require_key(data, "degree", "education.degree"),
            field=data.get("field") or ""
        )


@dataclass
class Career:
    job_title: str
    income_range: Optional[str] = None

    def __post_init__(self):
        _require_str(self.job_title, "career.job_title")
        if self.income_range is not None:
            _require_str(self.income_range, "career.income_range")

    def to_dict(self) -> Dict[str, Any]:
        result = {"job_title": self.job_title}
        if self.income_range is not None:
            result["income_range"] = self.income_range
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Career":
        """Read snake_case or the app's camelCase keys."""
        return cls(
            job_title=data.get("job_title", data.get("jobTitle")) or "",
            income_range=data.get("income_range", data.get("incomeRange"))
        )


@dataclass
class Lifestyle:
    """
    Lifestyle habits.

    Attributes:
        diet: Diet choice
        smoking: Smoking frequency
        drinking: Drinking frequency
    """
    diet: Diet
    smoking: Habit
    drinking: Habit

    def __post_init__(self):
        """Convert string inputs to enums."""
        self.diet = _coerce_enum(Diet, self.diet, "lifestyle.diet")
        self.smoking = _coerce_enum(Habit, self.smoking, "lifestyle.smoking")
        self.drinking = _coerce_enum(Habit, self.drinking, "lifestyle.drinking")

    def to_dict(self) -> Dict[str, str]:
        return {
            "diet": self.diet.value,
            "smoking": self.smoking.value,
            "drinking": self.drinking.value
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Lifestyle":
        return cls(
            diet=_require_key(data, "diet", "lifestyle.diet"),
            smoking=_require_key(data, "smoking", "lifestyle.smoking"),
            drinking=_require_key(data, "drinking", "lifestyle.drinking")
        )


@dataclass
class Family:
    type: FamilyType
    values: FamilyValues

    def __post_init__(self):
        self.type = _coerce_enum(FamilyType, self.type, "family.type")
        self.values = _coerce_enum(FamilyValues, self.values, "family.values")

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type.value, "values": self.values.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Family":
        return cls(
            type=_require_key(data, "type", "family.type"),
            values=_require_key(data, "values", "family.values")
        )


@dataclass
class AgeRange:
    """Inclusive preferred age range."""
    min_age: int
    max_age: int

    def __post_init__(self):
        _require_int(self.min_age, "preferences.age_range.min")
        _require_int(self.max_age, "preferences.age_range.max")
        if self.min_age > self.max_age:
            raise InvalidProfileError(
                "preferences.age_range",
                f"min ({self.min_age}) is greater than max ({self.max_age})"
            )

    def contains(self, age: int) -> bool:
        return self.min_age <= age <= self.max_age

    def distance(self, age: int) -> int:
        """Years from age to the nearest bound of the range."""
        return min(abs(age - self.min_age), abs(age - self.max_age))

    def to_dict(self) -> Dict[str, int]:
        return {"min": self.min_age, "max": self.max_age}


@dataclass
class Preferences:
    """
    Optional partner preferences.

    The engine only reads age_range. The preference lists are used by the
    discovery ranking layer as optional hard filters.

    Attributes:
        age_range: Preferred candidate age range
        preferred_locations: Cities or states
        preferred_education: Degree names
        preferred_diet: Acceptable diets
        preferred_family_values: Acceptable family values
    """
    age_range: Optional[AgeRange] = None
    preferred_locations: List[str] = field(default_factory=list)
    preferred_education: List[str] = field(default_factory=list)
    preferred_diet: List[Diet] = field(default_factory=list)
    preferred_family_values: List[FamilyValues] = field(default_factory=list)

    def __post_init__(self):
        if isinstance(self.age_range, Mapping):
            self.age_range = AgeRange(
                min_age=_require_key(self.age_range, "min", "preferences.age_range.min"),
                max_age=_require_key(self.age_range, "max", "preferences.age_range.max")
            )
        for attr in ["preferred_locations", "preferred_education"]:
            values = getattr(self, attr)
            for i, value in enumerate(values):
                _require_str(value, f"preferences.{attr}[{i}]")
        self.preferred_diet = [
            _coerce_enum(Diet, v, f"preferences.preferred_diet[{i}]")
            for i, v in enumerate(self.preferred_diet)
        ]
        self.preferred_family_values = [
            _coerce_enum(FamilyValues, v, f"preferences.preferred_family_values[{i}]")
            for i, v in enumerate(self.preferred_family_values)
        ]

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.age_range is not None:
            result["age_range"] = self.age_range.to_dict()
        if self.preferred_locations:
            result["preferred_locations"] = list(self.preferred_locations)
        if self.preferred_education:
            result["preferred_education"] = list(self.preferred_education)
        if self.preferred_diet:
            result["preferred_diet"] = [d.value for d in self.preferred_diet]
        if self.preferred_family_values:
            result["preferred_family_values"] = [v.value for v in self.preferred_family_values]
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Preferences":
        """Create from dictionary. Accepts camelCase keys from the app's store."""
        def pick(*keys):
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return None

        return cls(
            age_range=pick("age_range", "ageRange"),
            preferred_locations=list(pick("preferred_locations", "preferredLocations") or []),
            preferred_education=list(pick("preferred_education", "preferredEducation") or []),
            preferred_diet=list(pick("preferred_diet", "preferredDiet") or []),
            preferred_family_values=list(
                pick("preferred_family_values", "preferredFamilyValues") or []
            )
        )


@dataclass
class Profile:
    """
    Candidate profile used as engine input.

    Profiles are owned by the profile store. The engine only reads them.

    Attributes:
        id: Unique profile identifier
        gender: Declared gender
        age: Age in years
        location: Location record
        education: Education record
        career: Career record
        lifestyle: Lifestyle habits
        family: Family type and values
        preferences: Optional partner preferences
        name: Display name
    """
    id: str
    gender: Gender
    age: int
    location: Location
    education: Education
    career: Career
    lifestyle: Lifestyle
    family: Family
    preferences: Optional[Preferences] = None
    name: str = ""

    def __post_init__(self):
        """Validate identity fields and convert nested dicts."""
        _require_str(self.id, "id", allow_empty=False)
        _require_str(self.name, "name")
        self.gender = _coerce_enum(Gender, self.gender, "gender")
        _require_int(self.age, "age")
        if self.age < 0:
            raise InvalidProfileError("age", f"must be non-negative, got {self.age}")

        if isinstance(self.location, Mapping):
            self.location = Location.from_dict(self.location)
        if isinstance(self.education, Mapping):
            self.education = Education.from_dict(self.education)
        if isinstance(self.career, Mapping):
            self.career = Career.from_dict(self.career)
        if isinstance(self.lifestyle, Mapping):
            self.lifestyle = Lifestyle.from_dict(self.lifestyle)
        if isinstance(self.family, Mapping):
            self.family = Family.from_dict(self.family)
        if isinstance(self.preferences, Mapping):
            self.preferences = Preferences.from_dict(self.preferences)

        for attr, cls in [("location", Location), ("education", Education),
                          ("career", Career), ("lifestyle", Lifestyle), ("family", Family)]:
            if not isinstance(getattr(self, attr), cls):
                raise InvalidProfileError(attr, f"must be a {cls.__name__} record")
        if self.preferences is not None and not isinstance(self.preferences, Preferences):
            raise InvalidProfileError("preferences", "must be a Preferences record")

    @property
    def age_range(self) -> Optional[AgeRange]:
        if self.preferences is None:
            return None
        return self.preferences.age_range

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result = {
            "id": self.id,
            "name": self.name,
            "gender": self.gender.value,
            "age": self.age,
            "location": self.location.to_dict(),
            "education": self.education.to_dict(),
            "career": self.career.to_dict(),
            "lifestyle": self.lifestyle.to_dict(),
            "family": self.family.to_dict()
        }
        if self.preferences is not None:
            result["preferences"] = self.preferences.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Profile":
        """
        Create from dictionary.

        Missing nested sections raise InvalidProfileError naming the
        field path. Both snake_case and the app's camelCase keys are read
        for career and preference fields.

        Args:
            data: Raw profile record

        Returns:
            Validated Profile
        """
        if not isinstance(data, Mapping):
            raise InvalidProfileError("<root>", f"must be a mapping, got {type(data).__name__}")

        location = _require_section(data, "location")
        education = _require_section(data, "education")
        career = _require_section(data, "career")
        lifestyle = _require_section(data, "lifestyle")
        family = _require_section(data, "family")

        preferences = data.get("preferences")
        if preferences is not None and not isinstance(preferences, Mapping):
            raise InvalidProfileError("preferences", "must be a mapping")

        return cls(
            id=_require_key(data, "id", "id"),
            name=data.get("name") or "",
            gender=_require_key(data, "gender", "gender"),
            age=_require_key(data, "age", "age"),
            location=Location.from_dict(location),
            education=Education.from_dict(education),
            career=Career.from_dict(career),
            lifestyle=Lifestyle.from_dict(lifestyle),
            family=Family.from_dict(family),
            preferences=Preferences.from_dict(preferences) if preferences is not None else None
        )


class SymbolicLevel(Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass(frozen=True)
class SymbolicIndicator:
    """Identifier-derived indicator. Carries no statistical meaning."""
    level: SymbolicLevel
    note: str
    value: int

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level.value, "note": self.note, "value": self.value}


@dataclass(frozen=True)
class CategoryScores:
    """Per-category scores, each in [0, 100]."""
    age: int
    location: int
    education_career: int
    lifestyle: int
    family_values: int

    def as_list(self) -> List[int]:
        """Scores in radar order: age, location, career, lifestyle, family."""
        return [self.age, self.location, self.education_career, self.lifestyle, self.family_values]

    def to_dict(self) -> Dict[str, int]:
        return {
            "age": self.age,
            "location": self.location,
            "education_career": self.education_career,
            "lifestyle": self.lifestyle,
            "family_values": self.family_values
        }


@dataclass(frozen=True)
class RadarData:
    """Parallel label/value sequences for a radar chart."""
    labels: List[str]
    values: List[int]

    def to_dict(self) -> Dict[str, List]:
        return {"labels": list(self.labels), "values": list(self.values)}


@dataclass(frozen=True)
class CompatibilityResult:
    """
    Result of one compatibility scoring call.

    Attributes:
        overall_score: Weighted overall score [0, 100]
        category_scores: Per-category scores
        radar: Radar chart projection of the category scores
        insights: Ordered qualitative insights
        disclaimer: Fixed informational disclaimer
        symbolic_indicator: Optional identifier-derived indicator
    """
    overall_score: int
    category_scores: CategoryScores
    radar: RadarData
    insights: List[str]
    disclaimer: str
    symbolic_indicator: Optional[SymbolicIndicator] = None

    @property
    def is_eligible(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result = {
            "overall_score": self.overall_score,
            "category_scores": self.category_scores.to_dict(),
            "radar": self.radar.to_dict(),
            "insights": list(self.insights),
            "disclaimer": self.disclaimer
        }
        if self.symbolic_indicator is not None:
            result["symbolic_indicator"] = self.symbolic_indicator.to_dict()
        return result


@dataclass(frozen=True)
class IneligiblePair:
    """
    Explicit "no result" outcome for a pair rejected by the eligibility policy.

    This is a normal return value, not an error. Callers skip the candidate.
    """
    subject_id: str
    candidate_id: str
    reason: str

    @property
    def is_eligible(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject_id": self.subject_id,
            "candidate_id": self.candidate_id,
            "reason": self.reason
        }
