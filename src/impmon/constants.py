"""
Constants for the impedance session monitor.

Report layout follows the operator report format.
"""

from pathlib import Path

# ============================================================================
# Alarm
# ============================================================================

ALARM_MESSAGE = "Voiding is recommended"

# ============================================================================
# Display
# ============================================================================

DEFAULT_REFRESH_INTERVAL = 0.1  # seconds between elapsed-time display updates

# ============================================================================
# Report Format
# ============================================================================

REPORT_DATA_HEADER = "Time(s)\tValue"
REPORT_EVENTS_HEADING = "Events:"
REPORT_FILENAME_PREFIX = "measurements_"
REPORT_FILENAME_SUFFIX = ".txt"

WEIGHT_UNIT = "kg"
HEIGHT_UNIT = "m"
CIRCUMFERENCE_UNIT = "cm"

# ============================================================================
# Paths and Logging
# ============================================================================

DEFAULT_HOME_DIR = Path.home() / ".impmon"
DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_LOG_DIR = DEFAULT_HOME_DIR / "logs"
DEFAULT_LOG_FILE = "impmon.log"
DEFAULT_LOG_BACKUP_COUNT = 5
