"""
Configuration loader — reads specforge.yml into domain models.

This is the primary entry point for loading build configuration.
It reads YAML, validates against Pydantic schemas, and returns
typed domain objects. Dependency reports handed over by the host
build (YAML or JSON) are loaded here as well.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from specforge.core.models.build import BuildFile
from specforge.core.models.report import DependencyReport

logger = logging.getLogger(__name__)

# Default config filename
BUILD_CONFIG_FILE = "specforge.yml"


class ConfigError(Exception):
    """Raised when build configuration is invalid or missing."""


def find_build_file(start_dir: Path | None = None) -> Path | None:
    """Search for specforge.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to specforge.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / BUILD_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _read_mapping(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def load_build(path: Path | None = None) -> BuildFile:
    """Load and validate build configuration.

    Args:
        path: Explicit path to specforge.yml. If None, searches upward.

    Returns:
        Validated BuildFile model.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_build_file()

    if path is None:
        raise ConfigError(f"No {BUILD_CONFIG_FILE} found. Specify one with --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading build config from %s", path)
    data = _read_mapping(path)

    try:
        build = BuildFile.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid build configuration: {e}") from e

    logger.info(
        "Loaded build '%s' with %d configurations", build.name, len(build.configurations)
    )
    return build


def load_dependency_report(path: Path) -> DependencyReport:
    """Load a resolved-dependency report written by the host build.

    Accepts either ``{configurations: {...}}`` or the bare mapping of
    configuration name to modules.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Dependency report not found: {path}")

    data = _read_mapping(path)
    if "configurations" not in data:
        data = {"configurations": data}

    try:
        return DependencyReport.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid dependency report {path}: {e}") from e


def project_root(config_path: Path) -> Path:
    """Get the project root directory from a config file path."""
    return config_path.parent.resolve()
