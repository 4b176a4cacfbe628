"""
Log event records and severity definitions.

LogEventType numbering starts at 1: value 0 is reserved for Level.OFF so the
Logger's verbosity levels line up with the event severities.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Callable, Optional, Union

from scriptlog.errors import ScriptError
from scriptlog.utility import accepts_positional, date_to_str


class LogEventType(IntEnum):
    """Event severities, ordered by increasing verbosity."""
    ERROR = 1
    WARN = 2
    INFO = 3
    TRACE = 4


ExtraFieldValue = Union[str, int, float, datetime, Callable[..., Any]]

# Names of the record's own properties; extra fields using them are dropped
RESERVED_KEYS = frozenset({"type", "message", "timestamp", "extra_fields", "__str__"})

_MISSING = object()


def event_type_label(event_type: int) -> str:
    """'ERROR', 'WARN', ... for a LogEventType value."""
    return LogEventType(event_type).name


def is_valid_event_type(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return value in LogEventType._value2member_map_


def _prefix(context: str | None) -> str:
    return f"[{context}]: " if context else ""


def _validate_attrs(event_type: Any, message: Any, timestamp: Any, context: str | None) -> None:
    prefix = _prefix(context)
    if isinstance(event_type, bool) or not isinstance(event_type, int):
        raise ScriptError(
            f"{prefix}LogEvent.type='{event_type}' property must be a number "
            f"(LogEventType enum value)."
        )
    if not is_valid_event_type(event_type):
        raise ScriptError(
            f"{prefix}LogEvent.type='{event_type}' property is not defined "
            f"in the LogEventType enum."
        )
    if not isinstance(message, str):
        raise ScriptError(f"{prefix}LogEvent.message='{message}' property must be a string.")
    if not message.strip():
        raise ScriptError(f"{prefix}LogEvent.message cannot be empty.")
    if not isinstance(timestamp, datetime):
        raise ScriptError(
            f"{prefix}LogEvent.timestamp='{timestamp}' property must be a datetime."
        )


def _is_valid_extra_value(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (str, int, float, datetime)):
        return True
    # Functions must be callable without arguments (zero or variable arity)
    return callable(value) and not isinstance(value, type) and accepts_positional(value, 0)


def _validate_extra_fields(extra_fields: Any, context: str | None, not_mapping_msg: str) -> None:
    prefix = _prefix(context)
    if not isinstance(extra_fields, Mapping):
        raise ScriptError(f"{prefix}{not_mapping_msg}")
    for key, value in extra_fields.items():
        if not isinstance(key, str):
            raise ScriptError(f"{prefix}extra_fields keys must be strings, got {key!r}.")
        if not _is_valid_extra_value(value):
            raise ScriptError(
                f"{prefix}extra_fields['{key}'] has an unsupported value of type "
                f"'{type(value).__name__}'. Allowed: str, int, float, datetime "
                f"or a function callable without arguments."
            )


def render_extra_fields(extra_fields: Mapping[str, Any]) -> str:
    """Compact JSON block. Callables are left out, datetimes use ISO-8601."""
    rendered: dict[str, Any] = {}
    for key, value in extra_fields.items():
        if isinstance(value, datetime):
            rendered[key] = value.isoformat()
        elif callable(value):
            continue
        else:
            rendered[key] = value
    return json.dumps(rendered, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class LogEvent:
    """
    Immutable record of one logged occurrence.

    Created once per logging call (by the default factory or a custom one),
    read by the Layout and kept in the Logger's critical-event history.
    Construction fails with ScriptError rather than produce an inconsistent
    record.

    Usage:
        event = LogEvent("disk low", LogEventType.WARN, {"free_mb": 120})
    """
    message: str
    type: LogEventType
    extra_fields: Optional[Mapping[str, ExtraFieldValue]] = None
    timestamp: Optional[datetime] = None

    def __post_init__(self) -> None:
        context = "LogEvent.__init__"
        timestamp = datetime.now().astimezone() if self.timestamp is None else self.timestamp
        _validate_attrs(self.type, self.message, timestamp, context)
        extra = {} if self.extra_fields is None else self.extra_fields
        _validate_extra_fields(extra, context, "extra_fields must be a plain mapping.")
        filtered = {k: v for k, v in extra.items() if k not in RESERVED_KEYS}

        object.__setattr__(self, "type", LogEventType(self.type))
        object.__setattr__(self, "timestamp", timestamp)
        object.__setattr__(self, "extra_fields", MappingProxyType(filtered))

    def __str__(self) -> str:
        text = (
            f'LogEvent: {{timestamp="{date_to_str(self.timestamp)}", '
            f'type="{self.type.name}", message="{self.message}"'
        )
        if self.extra_fields:
            text += f", extra_fields={render_extra_fields(self.extra_fields)}"
        return text + "}"


def validate_log_event(candidate: Any, context: str | None = None) -> None:
    """
    Check that a loosely typed candidate (LogEvent, attribute object or plain
    mapping) satisfies the LogEvent invariants. Raises ScriptError otherwise.
    """
    if candidate is None:
        raise ScriptError(f"{_prefix(context)}LogEvent must be a non-null object.")

    if isinstance(candidate, Mapping):
        lookup = candidate.get
    else:
        lookup = lambda name, default=None: getattr(candidate, name, default)  # noqa: E731

    _validate_attrs(lookup("type"), lookup("message"), lookup("timestamp"), context)

    extra = lookup("extra_fields", _MISSING)
    if extra is not _MISSING:
        _validate_extra_fields(extra, context, "extra_fields must be a non-null plain mapping.")


def default_log_event_factory(
    message: str,
    event_type: LogEventType,
    extra_fields: Optional[Mapping[str, ExtraFieldValue]] = None,
) -> LogEvent:
    """Factory used when no custom factory is installed."""
    return LogEvent(message, event_type, extra_fields)
