"""
Shared validation helpers: date formatting, empty checks and
factory-callable validation.
"""

from __future__ import annotations

import inspect
from datetime import datetime
from typing import Any, Callable, Optional

from scriptlog.errors import ScriptError


def date_to_str(date: datetime) -> str:
    """Format as 'YYYY-MM-DD HH:MM:SS,mmm' (local fields of the datetime)."""
    return (
        f"{date.strftime('%Y-%m-%d %H:%M:%S')},{date.microsecond // 1000:03d}"
    )


def is_empty_sequence(value: Any) -> bool:
    """True for None, non-list/tuple values and empty lists/tuples."""
    return not isinstance(value, (list, tuple)) or len(value) == 0


def positional_arity(fn: Callable[..., Any]) -> Optional[int]:
    """
    Number of required positional parameters of a callable.
    None when the signature cannot be inspected.
    """
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return None
    return sum(
        1
        for p in sig.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        and p.default is p.empty
    )


def accepts_positional(fn: Callable[..., Any], count: int) -> bool:
    """True if the callable can be called with `count` positional arguments."""
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return False
    try:
        sig.bind(*([None] * count))
    except TypeError:
        return False
    return True


def validate_factory(
    factory: Any,
    fun_name: str = "log_event_factory",
    context: str | None = None,
) -> None:
    """
    Validate a log event factory: a callable taking exactly two required
    positional arguments (message, event_type). A third optional argument
    receives extra_fields.
    """
    prefix = f"[{context}]: " if context else ""
    if not callable(factory):
        raise ScriptError(f"{prefix}Invalid {fun_name}: Not a function")
    if positional_arity(factory) != 2:
        raise ScriptError(
            f"{prefix}Invalid {fun_name}: Must take exactly two arguments "
            f"(message: str, event_type: LogEventType)"
        )


def callable_name(fn: Any) -> str:
    """Display name of a callable, 'anonymous' for lambdas."""
    name = getattr(fn, "__name__", None)
    if not name or name == "<lambda>":
        return "anonymous"
    return name
