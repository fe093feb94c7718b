"""
Session core: clock, sample ingest, alarm evaluation, data log.

SessionController is the entry point; the components are exposed for
adapters and tests that need them directly.
"""

from impmon.session.alarm import ALARM_CONDITIONS, AlarmEvaluator
from impmon.session.clock import SessionClock, format_elapsed
from impmon.session.controller import SessionController
from impmon.session.events import BaseObserver, LoggingObserver, SessionObserver
from impmon.session.ingest import SampleIngest, parse_payload
from impmon.session.log import DataLog
from impmon.session.ticker import DisplayTicker

__all__ = [
    "ALARM_CONDITIONS",
    "AlarmEvaluator",
    "BaseObserver",
    "DataLog",
    "DisplayTicker",
    "LoggingObserver",
    "SampleIngest",
    "SessionClock",
    "SessionController",
    "SessionObserver",
    "format_elapsed",
    "parse_payload",
]
