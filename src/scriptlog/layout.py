"""
Layout: the formatting strategy shared by all appenders.

A Layout wraps one unary formatter (LogEvent -> str). It defines the core
content of each line, not its presentation: appenders may add colors or
styles on top without changing the text.
  - short:   "[{type}] {message}[ {extra_fields}]"
  - default: "[{timestamp:YYYY-MM-DD HH:MM:SS,mmm}] " + short
"""

from typing import Any, Callable, Optional

from scriptlog.errors import ScriptError
from scriptlog.records import (
    LogEvent,
    LogEventType,
    event_type_label,
    render_extra_fields,
    validate_log_event,
)
from scriptlog.utility import callable_name, date_to_str, positional_arity

Formatter = Callable[[LogEvent], str]


def short_formatter(event: LogEvent) -> str:
    """Example: [INFO] Script started {"user":"ana"}"""
    text = f"[{event_type_label(event.type)}] {event.message}"
    if event.extra_fields:
        rendered = render_extra_fields(event.extra_fields)
        if rendered != "{}":
            text += f" {rendered}"
    return text


def default_formatter(event: LogEvent) -> str:
    """Example: [2026-02-12 14:32:05,123] [INFO] Script started"""
    return f"[{date_to_str(event.timestamp)}] {short_formatter(event)}"


class Layout:
    """
    Formats log events through a formatter callable.

    The formatter is checked when the Layout is built: it must be callable
    with one required positional argument and, when probed with a synthetic
    event, return a non-empty string.

    Usage:
        Layout()                                   # default formatter
        Layout(short_formatter)
        Layout(lambda e: f"{e.type.name}: {e.message}")
    """

    def __init__(self, formatter: Optional[Formatter] = None) -> None:
        self._formatter = default_formatter if formatter is None else formatter
        Layout.validate_layout(self, "Layout.__init__")

    def get_formatter(self) -> Formatter:
        return self._formatter

    def format(self, event: LogEvent) -> str:
        validate_log_event(event, "Layout.format")
        return self._formatter(event)

    def __str__(self) -> str:
        return f'Layout: {{formatter: [Function: "{callable_name(self._formatter)}"]}}'

    @staticmethod
    def validate_layout(layout: Any, context: str | None = None) -> None:
        """
        Raise ScriptError unless `layout` has a callable unary `format`
        and, for Layout instances, a formatter that passes the probe.
        """
        prefix = f"[{context}]: " if context else ""
        if layout is None:
            raise ScriptError(f"{prefix}Invalid Layout: layout object is None")
        fmt = getattr(layout, "format", None)
        if not callable(fmt):
            raise ScriptError(
                f"{prefix}Invalid Layout: the 'format' method is missing or not callable"
            )
        if positional_arity(fmt) != 1:
            raise ScriptError(
                f"{prefix}Invalid Layout: 'format' should take exactly one "
                f"argument (event: LogEvent)"
            )
        if isinstance(layout, Layout):
            _probe_formatter(layout._formatter, prefix)


def _probe_formatter(formatter: Any, prefix: str) -> None:
    arity = positional_arity(formatter) if callable(formatter) else None
    valid = callable(formatter) and arity == 1
    if valid:
        probe = LogEvent("Layout probe event", LogEventType.INFO)
        try:
            result = formatter(probe)
        except Exception as e:
            raise ScriptError(
                f"{prefix}Invalid Layout: the formatter failed on a probe event", e
            ) from e
        valid = isinstance(result, str) and result != ""
    if not valid:
        shown_arity = "N/A" if arity is None else arity
        raise ScriptError(
            f"{prefix}Invalid Layout: the formatter must be a callable accepting "
            f"a single LogEvent argument and returning a non-empty string. "
            f'Got: type="{type(formatter).__name__}", arity={shown_arity}'
        )
