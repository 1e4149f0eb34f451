"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates that all required fields are present.
"""

import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ["global", "data", "engine", "ranking", "evaluation"]
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file is empty or not a mapping
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")
    if not isinstance(config, dict):
        raise ValueError(f"Configuration file must contain a mapping: {filepath}")

    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    for section in REQUIRED_SECTIONS:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    if "global" in config:
        level = str((config["global"] or {}).get("log_level", "INFO")).upper()
        if level not in VALID_LOG_LEVELS:
            issues.append(f"Unknown global.log_level: {level}")

    if "data" in config:
        if "profiles_path" not in (config["data"] or {}):
            issues.append("Missing data.profiles_path")

    if "engine" in config:
        include = (config["engine"] or {}).get("include_symbolic", False)
        if not isinstance(include, bool):
            issues.append(f"engine.include_symbolic must be a boolean, got {include!r}")

    if "ranking" in config:
        ranking = config["ranking"] or {}
        n_jobs = ranking.get("n_jobs", 4)
        if not isinstance(n_jobs, int) or n_jobs < 1:
            issues.append(f"ranking.n_jobs must be a positive integer, got {n_jobs!r}")
        min_score = ranking.get("min_score", 0)
        if not isinstance(min_score, (int, float)) or not 0 <= min_score <= 100:
            issues.append(f"ranking.min_score must be in [0, 100], got {min_score!r}")
        top_k = ranking.get("top_k")
        if top_k is not None and (not isinstance(top_k, int) or top_k < 1):
            issues.append(f"ranking.top_k must be a positive integer or null, got {top_k!r}")

    if "evaluation" in config:
        quantiles = (config["evaluation"] or {}).get("quantiles", [])
        if any(not isinstance(q, (int, float)) or not 0 <= q <= 1 for q in quantiles):
            issues.append(f"evaluation.quantiles must be in [0, 1], got {quantiles!r}")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "ranking.n_jobs")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
