"""I/O exports."""

from .config import ConfigError, ConfigLoader
from .loader import WorkloadError, WorkloadLoader
from .report import EventLogWriter, format_event, format_report
from .schema import CONFIG_SCHEMA

__all__ = [
    "CONFIG_SCHEMA",
    "ConfigError",
    "ConfigLoader",
    "EventLogWriter",
    "WorkloadError",
    "WorkloadLoader",
    "format_event",
    "format_report",
]
