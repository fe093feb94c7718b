"""Configuration management for impmon."""

import logging
import os
import tomllib

from pathlib import Path
from typing import Any

import tomli_w

from pydantic import ValidationError

from impmon.constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_HOME_DIR,
    DEFAULT_REFRESH_INTERVAL,
)
from impmon.models.alarm import AlarmConfig

logger = logging.getLogger(__name__)


def get_config_path() -> Path:
    """
    Get the path to the configuration file.

    Returns:
        Path to ~/.impmon/config.toml
    """
    return DEFAULT_HOME_DIR / DEFAULT_CONFIG_FILE


def load_config() -> dict[str, Any]:
    """
    Load configuration from TOML file.

    Returns:
        Configuration dictionary. Returns empty dict if file doesn't exist
        or is corrupted.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return {}

    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        logger.warning("Treating config as empty. Fix or delete the file to resolve.")
        return {}


def save_config(config: dict[str, Any]) -> None:
    """
    Save configuration to TOML file using atomic write.

    Creates the parent directory if it doesn't exist.

    Args:
        config: Configuration dictionary to save

    Raises:
        PermissionError: If directory cannot be created or file cannot be written
    """
    config_path = get_config_path()

    config_dir = config_path.parent
    try:
        os.makedirs(config_dir, exist_ok=True)
    except PermissionError as e:
        raise PermissionError(
            f"Cannot create config directory {config_dir}: {e}"
        ) from e

    temp_path = config_path.with_suffix(".toml.tmp")

    try:
        with open(temp_path, "wb") as f:
            tomli_w.dump(config, f)

        os.replace(temp_path, config_path)

    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


def get_alarm_config() -> AlarmConfig:
    """
    Build the alarm configuration from the ``[alarm]`` section.

    An unknown mode in the file is logged and the alarm falls back to the
    disabled default rather than stopping the monitor.

    Returns:
        AlarmConfig (disabled default when the section is missing)
    """
    section = load_config().get("alarm", {})
    if not isinstance(section, dict):
        return AlarmConfig()

    try:
        return AlarmConfig(**section)
    except ValidationError as e:
        logger.warning(f"Invalid [alarm] section in config, alarm disabled: {e}")
        return AlarmConfig()


def set_alarm_config(alarm: AlarmConfig) -> None:
    """
    Persist an alarm configuration to the ``[alarm]`` section.

    Args:
        alarm: Configuration to store. A missing threshold is omitted,
            since TOML has no null.
    """
    config = load_config()
    section: dict[str, Any] = {"enabled": alarm.enabled, "mode": alarm.mode.value}
    if alarm.threshold is not None:
        section["threshold"] = alarm.threshold
    config["alarm"] = section
    save_config(config)


def clear_alarm_config() -> None:
    """
    Remove the ``[alarm]`` section.

    If config becomes empty, deletes the config file.
    """
    config = load_config()

    if "alarm" not in config:
        return

    del config["alarm"]
    if not config:
        config_path = get_config_path()
        if config_path.exists():
            config_path.unlink()
    else:
        save_config(config)


def get_refresh_interval() -> float:
    """
    Display refresh interval from ``[display] refresh_interval``.

    Returns:
        Seconds between display ticks; the default for missing or
        non-positive values
    """
    value = load_config().get("display", {}).get("refresh_interval")
    try:
        interval = float(value) if value is not None else DEFAULT_REFRESH_INTERVAL
    except (TypeError, ValueError):
        logger.warning(f"Invalid display.refresh_interval {value!r}, using default")
        return DEFAULT_REFRESH_INTERVAL
    return interval if interval > 0 else DEFAULT_REFRESH_INTERVAL


def get_export_directory() -> Path:
    """
    Report output directory from ``[export] directory``.

    Returns:
        Configured directory (``~`` expanded), or the current directory
    """
    directory: str | None = load_config().get("export", {}).get("directory")
    return Path(directory).expanduser() if directory else Path.cwd()
