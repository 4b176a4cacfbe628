"""
Logger: singleton coordinator of the logging framework.

One instance per process. It decides whether an event is emitted (verbosity
level), builds it, hands the same event to every registered appender,
counts errors and warnings, keeps the critical-event history and, under
Action.EXIT, aborts the script by raising LogTerminationError.

Usage:
    logger = Logger.get_instance(Logger.Level.INFO, Logger.Action.CONTINUE)
    logger.add_appender(ConsoleAppender.get_instance())
    logger.info("Script started", {"user": "ana"})
    logger.warn("Sheet 'Data' is empty")
    if logger.has_errors():
        ...

Logging before get_instance() works: the first call creates the logger with
the defaults (WARN, EXIT).
"""

from collections.abc import Mapping
from enum import IntEnum
from typing import Any, ClassVar, Optional

from scriptlog.appenders import (
    Appender,
    ConsoleAppender,
    LogEventFactory,
    create_event,
)
from scriptlog.errors import LogTerminationError, ScriptError
from scriptlog.records import LogEvent, LogEventType
from scriptlog.utility import is_empty_sequence, validate_factory


def _member_from_value(enum_cls: type[IntEnum], value: Any) -> IntEnum:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls[value.upper()]
        except KeyError:
            raise ScriptError(
                f"Unknown {enum_cls.__name__} '{value}'. "
                f"Valid names: {', '.join(m.name for m in enum_cls)}"
            )
    if isinstance(value, int) and not isinstance(value, bool):
        if value in enum_cls._value2member_map_:
            return enum_cls(value)
        raise ScriptError(
            f"No {enum_cls.__name__} with value {value}. "
            f"Valid values: {', '.join(f'{m.name}={m.value}' for m in enum_cls)}"
        )
    raise ScriptError(f"Expected int or str, got {type(value).__name__}")


class Level(IntEnum):
    """Verbosity levels. An event is emitted when its type <= the level."""
    OFF = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    TRACE = 4

    @classmethod
    def from_value(cls, value: int | str) -> "Level":
        """Resolve from a member, int or case-insensitive name."""
        return _member_from_value(cls, value)


class Action(IntEnum):
    """What happens after an error (or qualifying warning) is logged."""
    CONTINUE = 0
    EXIT = 1

    @classmethod
    def from_value(cls, value: int | str) -> "Action":
        """Resolve from a member, int or case-insensitive name."""
        return _member_from_value(cls, value)


class Logger:
    """
    Singleton logger.

    A Logger object is a handle on the live singleton: after clear_instance()
    and re-creation, an older handle reads the new instance.
    """

    Level = Level
    Action = Action

    DEFAULT_LEVEL: ClassVar[Level] = Level.WARN
    DEFAULT_ACTION: ClassVar[Action] = Action.EXIT

    _instance: ClassVar[Optional["Logger"]] = None

    def __init__(
        self,
        level: Level,
        action: Action,
        log_event_factory: Optional[LogEventFactory] = None,
    ) -> None:
        self._level = level
        self._action = action
        self._log_event_factory = log_event_factory
        self._appenders: list[Appender] = []
        self._critical_events: list[LogEvent] = []
        self._err_cnt = 0
        self._warn_cnt = 0

    # ── Lifecycle ─────────────────────────────────────────────────

    @classmethod
    def get_instance(
        cls,
        level: Optional[int | str] = None,
        action: Optional[int | str] = None,
        log_event_factory: Optional[LogEventFactory] = None,
    ) -> "Logger":
        """
        Create the singleton on first call; later calls ignore their
        arguments and return the existing instance.
        """
        if cls._instance is None:
            context = "Logger.get_instance"
            resolved_level = cls.DEFAULT_LEVEL if level is None else _resolve(
                Level, level, "level", context
            )
            resolved_action = cls.DEFAULT_ACTION if action is None else _resolve(
                Action, action, "action", context
            )
            if log_event_factory is not None:
                validate_factory(log_event_factory, "log_event_factory", context)
            cls._instance = cls(resolved_level, resolved_action, log_event_factory)
        return cls._instance

    @classmethod
    def clear_instance(cls) -> None:
        """Destroy the singleton. Appender singletons are left alone."""
        cls._instance = None

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._instance is not None

    @classmethod
    def _live(cls, context: str) -> "Logger":
        if cls._instance is None:
            raise ScriptError(
                f"[{context}]: A singleton instance can't be None. "
                f"Please invoke get_instance first."
            )
        return cls._instance

    @classmethod
    def _lazy_init(cls) -> "Logger":
        instance = cls.get_instance()
        instance._dispatch(
            f"Logger instantiated via lazy initialization with default parameters "
            f"(level=Logger.Level.{cls.level_label(instance._level)}, "
            f"action=Logger.Action.{cls.action_label(instance._action)})",
            LogEventType.TRACE,
            None,
        )
        return instance

    # ── Logging ───────────────────────────────────────────────────

    def error(self, message: str, extra_fields: Optional[Mapping[str, Any]] = None) -> None:
        self._log(message, LogEventType.ERROR, extra_fields)

    def warn(self, message: str, extra_fields: Optional[Mapping[str, Any]] = None) -> None:
        self._log(message, LogEventType.WARN, extra_fields)

    def info(self, message: str, extra_fields: Optional[Mapping[str, Any]] = None) -> None:
        self._log(message, LogEventType.INFO, extra_fields)

    def trace(self, message: str, extra_fields: Optional[Mapping[str, Any]] = None) -> None:
        self._log(message, LogEventType.TRACE, extra_fields)

    def _log(
        self,
        message: str,
        event_type: LogEventType,
        extra_fields: Optional[Mapping[str, Any]],
    ) -> None:
        live = Logger._instance
        if live is None:
            live = Logger._lazy_init()
        live._dispatch(message, event_type, extra_fields)

    def _dispatch(
        self,
        message: str,
        event_type: LogEventType,
        extra_fields: Optional[Mapping[str, Any]],
    ) -> None:
        # Filtered events touch nothing: no appender, no counter
        if self._level == Level.OFF or event_type > self._level:
            return

        if not self._appenders:
            self._appenders.append(ConsoleAppender.get_instance())

        factory = self._log_event_factory or Appender.get_log_event_factory()
        event = create_event(factory, message, event_type, extra_fields, "Logger.log")
        for appender in self._appenders:
            appender.log(event)

        if event.type == LogEventType.ERROR:
            self._err_cnt += 1
            self._critical_events.append(event)
        elif event.type == LogEventType.WARN:
            self._warn_cnt += 1
            self._critical_events.append(event)

        if self._action == Action.EXIT and (
            event.type == LogEventType.ERROR
            or (event.type == LogEventType.WARN and self._level >= Level.WARN)
        ):
            raise LogTerminationError(Appender.get_layout().format(event), event)

    # ── Appender Management ───────────────────────────────────────

    def add_appender(self, appender: Appender) -> None:
        """Register an appender. One appender per concrete class."""
        context = "Logger.add_appender"
        live = Logger._live(context)
        if appender is None:
            raise ScriptError(f"[{context}]: You can't add an appender that is None.")
        _check_appender_type(appender, context)
        _check_duplicate(live._appenders, appender, context)
        live._appenders.append(appender)

    def set_appenders(self, appenders: list[Appender]) -> None:
        """Replace the whole appender list. Nothing changes if validation fails."""
        context = "Logger.set_appenders"
        live = Logger._live(context)
        if is_empty_sequence(appenders):
            raise ScriptError(
                f"[{context}]: Invalid input: the input argument 'appenders' "
                f"must be a non-empty list."
            )
        validated: list[Appender] = []
        for appender in appenders:
            if appender is None:
                raise ScriptError(
                    f"[{context}]: Input argument appenders list contains a None entry."
                )
            _check_appender_type(appender, context)
            _check_duplicate(validated, appender, context)
            validated.append(appender)
        live._appenders = validated

    def remove_appender(self, appender: Appender) -> None:
        live = Logger._live("Logger.remove_appender")
        if appender in live._appenders:
            live._appenders.remove(appender)

    def get_appenders(self) -> list[Appender]:
        return list(Logger._live("Logger.get_appenders")._appenders)

    # ── State ─────────────────────────────────────────────────────

    def get_level(self) -> Level:
        return Logger._live("Logger.get_level")._level

    def get_action(self) -> Action:
        return Logger._live("Logger.get_action")._action

    def get_err_cnt(self) -> int:
        return Logger._live("Logger.get_err_cnt")._err_cnt

    def get_warn_cnt(self) -> int:
        return Logger._live("Logger.get_warn_cnt")._warn_cnt

    def get_critical_events(self) -> list[LogEvent]:
        """Errors and warnings logged so far, oldest first."""
        return list(Logger._live("Logger.get_critical_events")._critical_events)

    def has_errors(self) -> bool:
        return Logger._live("Logger.has_errors")._err_cnt > 0

    def has_warnings(self) -> bool:
        return Logger._live("Logger.has_warnings")._warn_cnt > 0

    def has_messages(self) -> bool:
        live = Logger._live("Logger.has_messages")
        return live._err_cnt > 0 or live._warn_cnt > 0

    def reset(self) -> None:
        """Zero the counters and drop the history. Appenders stay registered."""
        live = Logger._live("Logger.reset")
        live._err_cnt = 0
        live._warn_cnt = 0
        live._critical_events = []

    def export_state(self) -> dict:
        """Snapshot of the logger state, for reporting at the end of a run."""
        live = Logger._live("Logger.export_state")
        return {
            "level": Logger.level_label(live._level),
            "action": Logger.action_label(live._action),
            "error_count": live._err_cnt,
            "warning_count": live._warn_cnt,
            "critical_events": list(live._critical_events),
        }

    # ── Display ───────────────────────────────────────────────────

    @staticmethod
    def level_label(level: Any) -> str:
        """Name of a level; the default level's name for unknown values."""
        try:
            return Level(level).name
        except ValueError:
            return Logger.DEFAULT_LEVEL.name

    @staticmethod
    def action_label(action: Any) -> str:
        """Name of an action; the default action's name for unknown values."""
        try:
            return Action(action).name
        except ValueError:
            return Logger.DEFAULT_ACTION.name

    def __str__(self) -> str:
        live = Logger._live("Logger.__str__")
        appenders = ", ".join(str(a) for a in live._appenders)
        return live._describe(appenders)

    def to_short_string(self) -> str:
        """Like str() but appenders are listed by class name only."""
        live = Logger._live("Logger.to_short_string")
        appenders = ", ".join(type(a).__name__ for a in live._appenders)
        return live._describe(appenders)

    def _describe(self, appenders: str) -> str:
        return (
            f'Logger: {{level: "{Logger.level_label(self._level)}", '
            f'action: "{Logger.action_label(self._action)}", '
            f"err_cnt: {self._err_cnt}, warn_cnt: {self._warn_cnt}, "
            f"appenders: [{appenders}]}}"
        )


# ═══════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════

def _resolve(enum_cls: type[IntEnum], value: Any, name: str, context: str) -> Any:
    try:
        return enum_cls.from_value(value)
    except ScriptError:
        raise ScriptError(
            f"[{context}]: The input value {name}='{value}', was not defined "
            f"in Logger.{enum_cls.__name__}."
        )


def _check_appender_type(appender: Any, context: str) -> None:
    if not isinstance(appender, Appender):
        raise ScriptError(
            f"[{context}]: Expected an Appender, got {type(appender).__name__}."
        )


def _check_duplicate(appenders: list[Appender], appender: Appender, context: str) -> None:
    if any(type(existing) is type(appender) for existing in appenders):
        raise ScriptError(
            f"[{context}]: Only one appender of type {type(appender).__name__} is allowed."
        )
