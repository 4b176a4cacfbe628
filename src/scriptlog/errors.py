"""
Structured error type shared by the whole framework.

ScriptError covers configuration errors (bad level, layout, color, factory),
usage errors (singleton not created, duplicate appender) and, through
LogTerminationError, the intentional log-then-abort raised by the Logger.
An optional cause links errors into a chain that can be unwound back to the
original fault.
"""

from __future__ import annotations

import traceback
from typing import TYPE_CHECKING, NoReturn

if TYPE_CHECKING:
    from scriptlog.records import LogEvent


class ScriptError(Exception):
    """
    Error carrying an optional upstream cause.

    Usage:
        raise ScriptError("Validation failed", cause=KeyError("field"))
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        if cause is not None and str(cause):
            message = (
                f"{message} (caused by '{type(cause).__name__}' "
                f"with message '{cause}')"
            )
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.__cause__ = cause

    @property
    def name(self) -> str:
        return type(self).__name__

    def root_cause(self) -> BaseException | None:
        """First ancestor in the cause chain that is not a ScriptError."""
        node = self.cause
        while isinstance(node, ScriptError):
            node = node.cause
        return node

    def rethrow_cause_if_needed(self) -> NoReturn:
        """
        Raise the root non-ScriptError cause, or the innermost ScriptError
        when the chain never leaves ScriptError.
        """
        if isinstance(self.cause, ScriptError):
            self.cause.rethrow_cause_if_needed()
        if self.cause is not None:
            raise self.cause
        raise self

    def format_with_trace(self) -> str:
        """
        Name and message, then a 'Stack trace:' block for the cause if there
        is one, otherwise for this error.
        """
        source = self.cause if self.cause is not None else self
        lines = [f"{type(source).__name__}: {source}"]
        if source.__traceback__ is not None:
            lines.extend(
                line.rstrip("\n")
                for line in traceback.format_tb(source.__traceback__)
            )
        trace = "\n".join(lines)
        return f"{self.name}: {self.message}\nStack trace:\n{trace}"


class LogTerminationError(ScriptError):
    """
    Raised by the Logger after a qualifying ERROR/WARN event was dispatched
    under Action.EXIT. The message is the layout-formatted event.
    """

    def __init__(self, message: str, event: "LogEvent", cause: BaseException | None = None) -> None:
        super().__init__(message, cause)
        self.event = event
