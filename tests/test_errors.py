"""
Tests for ScriptError and LogTerminationError.

Covers:
- Message composition with a cause
- Cause chain walking and rethrow
- Trace rendering
"""

import pytest

from scriptlog.errors import LogTerminationError, ScriptError
from scriptlog.records import LogEvent, LogEventType


class TestScriptError:
    def test_plain_message(self):
        error = ScriptError("something failed")
        assert str(error) == "something failed"
        assert error.message == "something failed"
        assert error.cause is None
        assert error.name == "ScriptError"

    def test_cause_appended(self):
        error = ScriptError("outer", ValueError("bad input"))
        assert error.message == "outer (caused by 'ValueError' with message 'bad input')"
        assert str(error) == error.message

    def test_cause_without_message(self):
        error = ScriptError("outer", ValueError())
        assert error.message == "outer"
        assert isinstance(error.cause, ValueError)

    def test_python_cause_linked(self):
        cause = KeyError("k")
        error = ScriptError("outer", cause)
        assert error.__cause__ is cause

    def test_is_exception(self):
        with pytest.raises(ScriptError):
            raise ScriptError("boom")


class TestCauseChain:
    def test_root_cause_skips_script_errors(self):
        root = ValueError("root")
        chain = ScriptError("top", ScriptError("middle", root))
        assert chain.root_cause() is root

    def test_root_cause_none(self):
        assert ScriptError("top", ScriptError("middle")).root_cause() is None

    def test_rethrow_root(self):
        chain = ScriptError("top", ScriptError("middle", ValueError("root")))
        with pytest.raises(ValueError, match="root"):
            chain.rethrow_cause_if_needed()

    def test_rethrow_innermost_without_foreign_cause(self):
        inner = ScriptError("inner")
        error = ScriptError("top", ScriptError("middle", inner))
        with pytest.raises(ScriptError) as exc_info:
            error.rethrow_cause_if_needed()
        assert exc_info.value is inner

    def test_rethrow_self_without_cause(self):
        error = ScriptError("alone")
        with pytest.raises(ScriptError) as exc_info:
            error.rethrow_cause_if_needed()
        assert exc_info.value is error


class TestFormatWithTrace:
    def test_includes_cause_trace(self):
        try:
            try:
                int("x")
            except ValueError as e:
                raise ScriptError("parse failed", e)
        except ScriptError as error:
            text = error.format_with_trace()

        header, rest = text.split("\nStack trace:\n", 1)
        assert header.startswith("ScriptError: parse failed (caused by 'ValueError'")
        assert rest.startswith("ValueError: invalid literal for int()")
        assert "int(\"x\")" in rest

    def test_without_cause(self):
        error = ScriptError("lonely")
        assert error.format_with_trace() == (
            "ScriptError: lonely\nStack trace:\nScriptError: lonely"
        )


class TestLogTerminationError:
    def test_carries_event(self):
        event = LogEvent("fatal", LogEventType.ERROR)
        error = LogTerminationError("[ERROR] fatal", event)
        assert isinstance(error, ScriptError)
        assert error.event is event
        assert error.name == "LogTerminationError"
        assert error.message == "[ERROR] fatal"
