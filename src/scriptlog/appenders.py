"""
Appenders (output sinks).

One logger, several appenders. Every appender formats events through the
same class-level Layout so all channels show identical content; a concrete
appender may add presentation on top (the cell appender adds font colors).

Each concrete appender is a process-wide singleton created on first
get_instance() call. Later calls ignore their arguments and return the
existing instance until clear_instance().
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Optional

from scriptlog.errors import ScriptError
from scriptlog.host import CellRange, VerticalAlignment
from scriptlog.layout import Layout
from scriptlog.records import (
    LogEvent,
    LogEventType,
    default_log_event_factory,
    is_valid_event_type,
    validate_log_event,
)
from scriptlog.utility import accepts_positional, callable_name, validate_factory

LogEventFactory = Callable[..., LogEvent]


def create_event(
    factory: LogEventFactory,
    message: str,
    event_type: LogEventType,
    extra_fields: Optional[Mapping[str, Any]],
    context: str,
) -> LogEvent:
    """Build an event through `factory`, checking what comes back."""
    if extra_fields is None:
        event = factory(message, event_type)
    elif accepts_positional(factory, 3):
        event = factory(message, event_type, extra_fields)
    else:
        raise ScriptError(
            f"[{context}]: The log event factory '{callable_name(factory)}' "
            f"does not accept extra_fields."
        )
    validate_log_event(event, context)
    return event


def _not_initialized(context: str) -> ScriptError:
    return ScriptError(
        f"[{context}]: A singleton instance can't be None. "
        f"Please invoke get_instance first."
    )


class Appender(ABC):
    """
    Base appender. Holds the shared layout and event factory, remembers the
    last event it dispatched.
    """

    _layout: ClassVar[Optional[Layout]] = None
    _log_event_factory: ClassVar[Optional[LogEventFactory]] = None
    _instance: ClassVar[Optional["Appender"]] = None

    def __init__(self) -> None:
        self._last_log_event: Optional[LogEvent] = None

    # ── Shared layout ────────────────────────────────────────────

    @staticmethod
    def get_layout() -> Layout:
        """Shared layout, created with the default formatter on first use."""
        if Appender._layout is None:
            Appender._layout = Layout()
        return Appender._layout

    @staticmethod
    def set_layout(layout: Layout) -> None:
        """Install `layout` unless one is already set."""
        Layout.validate_layout(layout, "Appender.set_layout")
        if Appender._layout is None:
            Appender._layout = layout

    @staticmethod
    def clear_layout() -> None:
        Appender._layout = None

    # ── Shared event factory ─────────────────────────────────────

    @staticmethod
    def get_log_event_factory() -> LogEventFactory:
        """Installed factory, or the default one."""
        return Appender._log_event_factory or default_log_event_factory

    @staticmethod
    def set_log_event_factory(factory: LogEventFactory) -> None:
        """Install `factory` unless one is already set."""
        validate_factory(factory, "log_event_factory", "Appender.set_log_event_factory")
        if Appender._log_event_factory is None:
            Appender._log_event_factory = factory

    @staticmethod
    def clear_log_event_factory() -> None:
        Appender._log_event_factory = None

    # ── Singleton lifecycle ──────────────────────────────────────

    @classmethod
    def clear_instance(cls) -> None:
        """Drop the singleton. Its last event is lost with it."""
        cls._instance = None

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._instance is not None

    @classmethod
    def _check_instance(cls, context: str) -> None:
        if cls._instance is None:
            raise _not_initialized(context)

    # ── Dispatch ─────────────────────────────────────────────────

    def log(
        self,
        event: LogEvent | str,
        event_type: Optional[LogEventType] = None,
        extra_fields: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """
        Send an event: either a LogEvent, or a message plus its event type
        (and optional extra fields), built through the active factory.
        """
        context = "Appender.log"
        type(self)._check_instance(context)
        if isinstance(event, str):
            if not is_valid_event_type(event_type):
                raise ScriptError(
                    f"[{context}]: event type='{event_type}' must be provided "
                    f"and must be a valid LogEventType value."
                )
            event = create_event(
                Appender.get_log_event_factory(), event, event_type, extra_fields, context
            )
        else:
            validate_log_event(event, context)
        self._send_event(event)
        self._last_log_event = event

    def get_last_log_event(self) -> Optional[LogEvent]:
        return self._last_log_event

    @abstractmethod
    def _send_event(self, event: LogEvent) -> None:
        """Write an already validated event to the sink."""
        ...

    def _describe(self) -> str:
        """Subclass-specific part of str()."""
        return ""

    def __str__(self) -> str:
        name = type(self).__name__
        type(self)._check_instance(f"{name}.__str__")
        layout = Appender._layout
        factory = callable_name(Appender.get_log_event_factory())
        last = self._last_log_event
        base = (
            f"Appender: {{layout={layout if layout is not None else 'None'}, "
            f'log_event_factory="{factory}", '
            f"last_log_event={last if last is not None else 'None'}}}"
        )
        return f"{base} {name}: {{{self._describe()}}}"


class ConsoleAppender(Appender):
    """
    Writes each formatted event to the console (stdout). Used as the default
    appender when the logger has none.

    Usage:
        logger.add_appender(ConsoleAppender.get_instance())
    """

    _instance: ClassVar[Optional["ConsoleAppender"]] = None

    @classmethod
    def get_instance(cls) -> "ConsoleAppender":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def _send_event(self, event: LogEvent) -> None:
        print(Appender.get_layout().format(event), flush=True)


class CellAppender(Appender):
    """
    Writes the latest event into a single spreadsheet cell, colored by
    severity. Only the last event stays visible.

    Default colors: ERROR red, WARN orange, INFO green, TRACE gray.

    Usage:
        cell = workbook.get_worksheet("Log").get_range("A1")
        logger.add_appender(CellAppender.get_instance(cell, {LogEventType.INFO: "#0000ff"}))
    """

    DEFAULT_COLORS: ClassVar[Mapping[LogEventType, str]] = MappingProxyType({
        LogEventType.ERROR: "9c0006",
        LogEventType.WARN: "ed7d31",
        LogEventType.INFO: "548235",
        LogEventType.TRACE: "7f7f7f",
    })
    FONT_LABELS: ClassVar[Mapping[LogEventType, str]] = MappingProxyType({
        LogEventType.ERROR: "err_font",
        LogEventType.WARN: "warn_font",
        LogEventType.INFO: "info_font",
        LogEventType.TRACE: "trace_font",
    })
    EVENT_LABELS: ClassVar[Mapping[LogEventType, str]] = MappingProxyType({
        LogEventType.ERROR: "error",
        LogEventType.WARN: "warning",
        LogEventType.INFO: "info",
        LogEventType.TRACE: "trace",
    })
    HEX_REGEX = re.compile(r"#?[0-9A-Fa-f]{6}")

    _instance: ClassVar[Optional["CellAppender"]] = None

    def __init__(self, cell: CellRange, colors: Mapping[LogEventType, str]) -> None:
        super().__init__()
        self._cell = cell
        self._colors = MappingProxyType(dict(colors))
        self._cell.set_vertical_alignment(VerticalAlignment.CENTER)
        self._clear_cell_if_not_empty()

    @classmethod
    def get_instance(
        cls,
        cell: Optional[CellRange] = None,
        colors: Optional[Mapping[Any, str]] = None,
    ) -> "CellAppender":
        """
        First call: `cell` must be a single-cell range; `colors` optionally
        overrides the default color of some severities (keys are
        LogEventType members or their names).
        Later calls return the existing instance unchanged.
        """
        if cls._instance is None:
            context = "CellAppender.get_instance"
            if cell is None or not callable(getattr(cell, "set_value", None)):
                raise ScriptError(
                    f"[{context}]: A valid CellRange for input argument cell is required."
                )
            if cell.get_cell_count() != 1:
                raise ScriptError(
                    f"[{context}]: Input argument cell must represent a single cell."
                )
            cls._instance = cls(cell, cls._resolve_colors(colors, context))
        return cls._instance

    def get_event_fonts(self) -> dict[LogEventType, str]:
        return dict(self._colors)

    def get_cell(self) -> CellRange:
        return self._cell

    def _send_event(self, event: LogEvent) -> None:
        self._clear_cell_if_not_empty()
        color = self._colors.get(event.type)
        if color:
            self._cell.set_font_color(color)
        self._cell.set_vertical_alignment(VerticalAlignment.CENTER)
        self._cell.set_value(Appender.get_layout().format(event))
        self._cell.get_value()  # read back so the write is committed

    def _describe(self) -> str:
        fonts = ",".join(
            f'{self.FONT_LABELS[t]}="{color}"' for t, color in self._colors.items()
        )
        return f'cell(address)="{self._cell.get_address()}", event fonts(map)={{{fonts}}}'

    def _clear_cell_if_not_empty(self) -> None:
        value = self._cell.get_value()
        if value is not None and value != "":
            self._cell.clear_contents()

    @classmethod
    def _resolve_colors(
        cls, colors: Optional[Mapping[Any, str]], context: str
    ) -> dict[LogEventType, str]:
        supplied: dict[LogEventType, Any] = {}
        for key, value in (colors or {}).items():
            supplied[_event_type_from_key(key, context)] = value

        resolved = {}
        for event_type in LogEventType:
            if event_type in supplied:
                cls._assert_color(supplied[event_type], cls.EVENT_LABELS[event_type], context)
                resolved[event_type] = supplied[event_type]
            else:
                resolved[event_type] = cls.DEFAULT_COLORS[event_type]
        return resolved

    @classmethod
    def _assert_color(cls, color: Any, label: str, context: str) -> None:
        if not isinstance(color, str) or color == "":
            raise ScriptError(
                f"[{context}]: The input value '{color}' for '{label}' event is "
                f"missing or not a string. Please provide a 6-digit hexadecimal "
                f"color as 'RRGGBB' or '#RRGGBB'."
            )
        if not cls.HEX_REGEX.fullmatch(color):
            raise ScriptError(
                f"[{context}]: The input value '{color}' for '{label}' event is "
                f"not a valid 6-digit hexadecimal color. Please use 'RRGGBB' or "
                f"'#RRGGBB' format."
            )


def _event_type_from_key(key: Any, context: str) -> LogEventType:
    if is_valid_event_type(key):
        return LogEventType(key)
    if isinstance(key, str) and key.upper() in LogEventType.__members__:
        return LogEventType[key.upper()]
    raise ScriptError(f"[{context}]: Unknown event type '{key}' in colors.")
