"""
Settings loader — reads an optional appfast.yml into InstallerSettings.

Lookup order: explicit path > ``APPFAST_CONFIG`` env var > appfast.yml
found walking up from the current directory > built-in defaults.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from appfast_bootstrap.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)

SETTINGS_FILE = "appfast.yml"
SETTINGS_ENV_VAR = "APPFAST_CONFIG"


class ConfigError(Exception):
    """Raised when the settings file is unreadable or invalid."""


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for appfast.yml starting from the given directory, walking up.

    Returns:
        Path to appfast.yml, or None if not found.
    """
    here = (start_dir or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / SETTINGS_FILE
        if candidate.is_file():
            return candidate
    return None


def load_settings(path: Path | None = None) -> InstallerSettings:
    """Load and validate installer settings.

    Args:
        path: Explicit settings file. If None, uses ``APPFAST_CONFIG``
            or searches upward; falls back to defaults when nothing
            is found.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        env_path = os.environ.get(SETTINGS_ENV_VAR)
        path = Path(env_path) if env_path else find_settings_file()

    if path is None:
        logger.debug("No %s found, using built-in defaults", SETTINGS_FILE)
        return InstallerSettings()

    if not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return InstallerSettings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = InstallerSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info(
        "Loaded settings from %s (backend %s %s)",
        path, settings.backend_project, settings.supported_version,
    )
    return settings
