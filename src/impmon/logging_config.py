"""Centralized logging configuration for impmon."""

import logging
import logging.config
import os
import sys

from pathlib import Path
from typing import Any

from impmon.constants import (
    DEFAULT_LOG_BACKUP_COUNT,
    DEFAULT_LOG_DIR,
    DEFAULT_LOG_FILE,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_logging_configured = False


def get_log_path() -> Path:
    """
    Get path to the active log file, creating its directory if needed.

    Returns:
        Path to ~/.impmon/logs/impmon.log
    """
    os.makedirs(DEFAULT_LOG_DIR, mode=0o700, exist_ok=True)
    return DEFAULT_LOG_DIR / DEFAULT_LOG_FILE


def _logging_section() -> dict[str, Any]:
    """The ``[logging]`` config section, or {} if absent or unreadable."""
    try:
        from impmon.config import load_config

        section = load_config().get("logging", {})
    except Exception:
        return {}
    return section if isinstance(section, dict) else {}


def _file_handler(section: dict[str, Any], log_file: Path | None) -> dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": str(section.get("level", "DEBUG")).upper(),
        "formatter": "file",
        "filename": str(log_file or get_log_path()),
        "maxBytes": int(section.get("max_size_mb", 10)) * 1024 * 1024,
        "backupCount": int(section.get("backup_count", DEFAULT_LOG_BACKUP_COUNT)),
        "encoding": "utf-8",
    }


def build_logging_config(
    verbose: bool = False,
    console_format: str | None = None,
    log_file: Path | None = None,
) -> dict[str, Any]:
    """
    Build the dictConfig configuration dictionary.

    The console handler always writes to stderr so stdout stays free for
    report text and the MCP stdio channel.

    Args:
        verbose: If True, set console to DEBUG level
        console_format: Override console format string
        log_file: Override the rotating log file location

    Returns:
        Dictionary suitable for logging.config.dictConfig()
    """
    section = _logging_section()

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": console_format or LOG_FORMAT},
            "file": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "DEBUG" if verbose else "INFO",
                "formatter": "console",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {"level": "DEBUG", "handlers": ["console"]},
    }

    if section.get("enabled", True):
        config["handlers"]["file"] = _file_handler(section, log_file)
        config["root"]["handlers"].append("file")

    return config


def setup_logging(
    *,
    verbose: bool = False,
    console_format: str | None = None,
    log_file: Path | None = None,
) -> None:
    """
    Configure logging once per process.

    Falls back to basicConfig on stderr if the dictConfig setup fails
    (for example an unwritable log directory).

    Args:
        verbose: If True, set console to DEBUG level
        console_format: Override console format string. If None, uses full format.
        log_file: Override the rotating log file location
    """
    global _logging_configured

    if _logging_configured:
        return

    try:
        logging.config.dictConfig(
            build_logging_config(
                verbose=verbose, console_format=console_format, log_file=log_file
            )
        )
    except Exception as e:
        sys.stderr.write(f"WARNING: Failed to configure logging: {e}\n")
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format=console_format or "%(levelname)s: %(message)s",
        )

    _logging_configured = True
