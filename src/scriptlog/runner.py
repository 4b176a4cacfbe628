"""
Script runner.

Runs a script entry point against a workbook and turns the outcome into a
RunResult: normal completion, intentional termination by the Logger
(LogTerminationError) or a framework error.

Usage:
    runner = ScriptRunner(workbook)
    result = runner.run(main)
    result = runner.run_yaml("logging.yaml", main)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from scriptlog.config import LoggerConfig, configure_logger
from scriptlog.core import Logger
from scriptlog.errors import LogTerminationError, ScriptError

ScriptEntry = Callable[[Any], Any]


@dataclass
class RunResult:
    """
    Outcome of one script run.

    state is the Logger's export_state() at the end of the run (empty when
    the script never touched the logger).
    """
    success: bool = True
    terminated: bool = False
    error: Optional[str] = None
    state: dict[str, Any] = field(default_factory=dict)
    value: Any = None


class ScriptRunner:
    def __init__(self, workbook: Any = None) -> None:
        self._workbook = workbook
        self.last_result: Optional[RunResult] = None

    def run_yaml(
        self,
        yaml_path: str | Path,
        entry: ScriptEntry,
        reraise: bool = False,
    ) -> RunResult:
        """Configure the logger from a YAML file, then run `entry`."""
        configure_logger(LoggerConfig.from_yaml(yaml_path), self._workbook)
        return self.run(entry, reraise=reraise)

    def run(self, entry: ScriptEntry, reraise: bool = False) -> RunResult:
        """
        Call entry(workbook).

        Args:
            entry: Script main function, receives the workbook.
            reraise: Re-raise ScriptErrors after the result is recorded. The
                root non-ScriptError cause is raised when there is one.

        Returns:
            RunResult. Exceptions other than ScriptError propagate.
        """
        if Logger.is_initialized():
            Logger.get_instance().trace(f"Running script '{_entry_name(entry)}'")

        try:
            value = entry(self._workbook)
        except LogTerminationError as e:
            self.last_result = RunResult(success=False, terminated=True, error=e.message)
            self.last_result.state = _logger_state()
            if reraise:
                e.rethrow_cause_if_needed()
            return self.last_result
        except ScriptError as e:
            self.last_result = RunResult(success=False, error=e.message)
            self.last_result.state = _logger_state()
            if reraise:
                e.rethrow_cause_if_needed()
            return self.last_result

        state = _logger_state()
        self.last_result = RunResult(
            success=state.get("error_count", 0) == 0,
            state=state,
            value=value,
        )
        return self.last_result


def _logger_state() -> dict[str, Any]:
    if not Logger.is_initialized():
        return {}
    return Logger.get_instance().export_state()


def _entry_name(entry: ScriptEntry) -> str:
    return getattr(entry, "__name__", type(entry).__name__)
