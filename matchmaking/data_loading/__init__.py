"""Profile loading module for the compatibility engine."""

from .loaders import (
    ProfileStore,
    InMemoryProfileStore,
    profiles_from_records,
    load_profiles,
    load_profiles_json,
    load_profiles_csv,
    load_profile_store
)

__all__ = [
    "ProfileStore",
    "InMemoryProfileStore",
    "profiles_from_records",
    "load_profiles",
    "load_profiles_json",
    "load_profiles_csv",
    "load_profile_store"
]
