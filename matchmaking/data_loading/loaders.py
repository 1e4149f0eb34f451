"""
Profile loading for the compatibility engine.

This module builds validated Profile records from JSON files, flattened CSV
tables and plain mappings, and provides the ProfileStore interface that the
ranking layer depends on. No scoring is done here.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Any, Iterable, Iterator, Mapping, Optional, Protocol

import pandas as pd

from ..schema import Profile, InvalidProfileError

logger = logging.getLogger(__name__)

# Flattened CSV columns holding list values, separated by LIST_SEPARATOR
LIST_COLUMNS = [
    "preferences.preferred_locations",
    "preferences.preferred_education",
    "preferences.preferred_diet",
    "preferences.preferred_family_values",
]
LIST_SEPARATOR = ";"
INTEGER_COLUMNS = ["age", "preferences.age_range.min", "preferences.age_range.max"]


class ProfileStore(Protocol):
    """Read-only source of profiles injected into the ranking layer."""

    def get(self, profile_id: str) -> Profile:
        ...

    def list_profiles(self) -> List[Profile]:
        ...


class InMemoryProfileStore:
    """
    ProfileStore backed by a dict keyed on profile id.

    Attributes:
        profiles: Profiles keyed by id, in insertion order
    """

    def __init__(self, profiles: Iterable[Profile] = ()):
        self.profiles: Dict[str, Profile] = {}
        for profile in profiles:
            self.add(profile)

    def add(self, profile: Profile) -> None:
        if profile.id in self.profiles:
            raise ValueError(f"Duplicate profile id: {profile.id}")
        self.profiles[profile.id] = profile

    def get(self, profile_id: str) -> Profile:
        try:
            return self.profiles[profile_id]
        except KeyError:
            raise KeyError(f"Unknown profile id: {profile_id}") from None

    def list_profiles(self) -> List[Profile]:
        return list(self.profiles.values())

    def __len__(self) -> int:
        return len(self.profiles)

    def __iter__(self) -> Iterator[Profile]:
        return iter(self.profiles.values())

    def __contains__(self, profile_id: object) -> bool:
        return profile_id in self.profiles


def profiles_from_records(records: Iterable[Mapping[str, Any]]) -> List[Profile]:
    """
    Validate raw profile records.

    Args:
        records: Raw profile mappings

    Returns:
        List of Profile instances

    Raises:
        InvalidProfileError: If any record is invalid (message includes its index)
    """
    profiles = []
    for index, record in enumerate(records):
        try:
            profiles.append(Profile.from_dict(record))
        except InvalidProfileError as e:
            raise InvalidProfileError(e.field_path, f"{e.reason} (record {index})") from e
    return profiles


def load_profiles_json(filepath: str) -> List[Profile]:
    """
    Load profiles from a JSON file.

    The file holds either a list of profile objects or an object with a
    "profiles" list.

    Args:
        filepath: Path to the JSON file

    Returns:
        List of validated profiles

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or not a profile list
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Profiles file not found: {filepath}")

    logger.info(f"Loading profiles from {filepath}")
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, Mapping):
        data = data.get("profiles")
    if not isinstance(data, list):
        raise ValueError(f"Profiles file must contain a list of profiles: {filepath}")
    if not data:
        raise ValueError(f"Profiles file is empty: {filepath}")

    profiles = profiles_from_records(data)
    logger.info(f"Loaded {len(profiles)} profiles")
    return profiles


def _unflatten_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Turn dotted column names into nested dicts, dropping missing values."""
    record: Dict[str, Any] = {}
    for column, value in row.items():
        if value is None or (not isinstance(value, (list, tuple)) and pd.isna(value)):
            continue
        if column in LIST_COLUMNS:
            value = [v.strip() for v in str(value).split(LIST_SEPARATOR) if v.strip()]
        elif column in INTEGER_COLUMNS:
            try:
                value = int(value)
            except ValueError:
                raise InvalidProfileError(column, f"must be an integer, got {value!r}") from None
        node = record
        keys = column.split(".")
        for key in keys[:-1]:
            node = node.setdefault(key, {})
        node[keys[-1]] = value
    return record


def load_profiles_csv(filepath: str, delimiter: str = ",") -> List[Profile]:
    """
    Load profiles from a flattened CSV table.

    Nested fields use dotted column names (``location.city``,
    ``preferences.age_range.min``); preference lists are separated by ``;``.

    Args:
        filepath: Path to the CSV file
        delimiter: Field delimiter (default: comma)

    Returns:
        List of validated profiles

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Profiles file not found: {filepath}")

    logger.info(f"Loading profiles from {filepath} (delimiter: {repr(delimiter)})")
    # cells stay text; only empty cells count as missing
    df = pd.read_csv(filepath, sep=delimiter, dtype=str, keep_default_na=False, na_values=[""])

    if df.empty:
        raise ValueError(f"Profiles file is empty: {filepath}")

    records = [_unflatten_row(row) for row in df.to_dict(orient="records")]
    profiles = profiles_from_records(records)
    logger.info(f"Loaded {len(profiles)} profiles with {len(df.columns)} columns")
    return profiles


def load_profiles(filepath: str, delimiter: Optional[str] = None) -> List[Profile]:
    """
    Load profiles, choosing the reader from the file extension.

    ``.tsv`` files are always read tab-separated; ``delimiter`` applies to
    ``.csv`` files only.
    """
    suffix = Path(filepath).suffix.lower()
    if suffix == ".json":
        return load_profiles_json(filepath)
    if suffix in (".csv", ".tsv"):
        sep = "\t" if suffix == ".tsv" else (delimiter or ",")
        return load_profiles_csv(filepath, delimiter=sep)
    raise ValueError(f"Unsupported profiles file type: {suffix or filepath}")


def load_profile_store(filepath: str, delimiter: Optional[str] = None) -> InMemoryProfileStore:
    """Load a profiles file into an InMemoryProfileStore."""
    return InMemoryProfileStore(load_profiles(filepath, delimiter=delimiter))
