"""
scriptlog: structured logging for single-run spreadsheet scripts.

One singleton Logger, several singleton appenders (console, spreadsheet
cell) sharing one Layout. Errors and warnings are counted and kept; under
Action.EXIT a qualifying event aborts the script with LogTerminationError.
"""

from scriptlog.errors import ScriptError, LogTerminationError
from scriptlog.records import LogEvent, LogEventType, default_log_event_factory
from scriptlog.layout import Layout, default_formatter, short_formatter
from scriptlog.appenders import Appender, ConsoleAppender, CellAppender
from scriptlog.core import Logger, Level, Action
from scriptlog.config import LoggerConfig, CellAppenderConfig, configure_logger
from scriptlog.runner import ScriptRunner, RunResult

__all__ = [
    "ScriptError",
    "LogTerminationError",
    "LogEvent",
    "LogEventType",
    "default_log_event_factory",
    "Layout",
    "default_formatter",
    "short_formatter",
    "Appender",
    "ConsoleAppender",
    "CellAppender",
    "Logger",
    "Level",
    "Action",
    "LoggerConfig",
    "CellAppenderConfig",
    "configure_logger",
    "ScriptRunner",
    "RunResult",
]
