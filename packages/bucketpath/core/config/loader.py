"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from bucketpath.core.config.models import GcsConfig
from bucketpath.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)

# Environment variables consulted, in order, when no default project is configured
_PROJECT_ENV_VARS = ("GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT")


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("gcs.json")
        'json'
        >>> detect_format("gcs.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            content = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        # safe_load returns None for empty files
        if content is None:
            content = {}

    if not isinstance(content, dict):
        raise ValueError(f"Config root must be a mapping in {path}")
    return content


def load_gcs_config(path: str | Path | None = None) -> GcsConfig:
    """Load and validate Cloud Storage configuration.

    When no path is given, defaults are used. The default project falls back
    to the GOOGLE_CLOUD_PROJECT / GCLOUD_PROJECT environment variables.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Validated GcsConfig instance

    Raises:
        ValidationError: If config is invalid
        FileNotFoundError: If an explicit config path does not exist

    Example:
        >>> config = load_gcs_config("gcs.yaml")
        >>> config.filesystem.block_size
        2097152
    """
    config = GcsConfig.model_validate(load_config(path)) if path is not None else GcsConfig()

    if config.default_project is None:
        for env_var in _PROJECT_ENV_VARS:
            project = os.getenv(env_var)
            if project:
                logger.debug("Loaded default project from %s", env_var)
                config = config.model_copy(update={"default_project": project})
                break

    return config


def configure_logging(config: GcsConfig | None = None) -> None:
    """Configure Python logging from config.

    Args:
        config: GcsConfig instance (defaults if None)
    """
    if config is None:
        config = GcsConfig()

    _configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )
