"""
scriptlog walkthrough.

Shows:
1. Logging to the console
2. A YAML-configured logger writing to a spreadsheet cell
   and a log-then-abort under Action.EXIT, reported by ScriptRunner
3. End-of-run state export

Run:
    python examples/demo.py
"""

from scriptlog import (
    Appender,
    CellAppender,
    ConsoleAppender,
    LoggerConfig,
    Logger,
    ScriptRunner,
    configure_logger,
)
from scriptlog.host import InMemoryWorkbook


CONFIG_YAML = """
level: info
action: exit
layout: short
cell:
  worksheet: Log
  address: C2
"""


def reset():
    Logger.clear_instance()
    ConsoleAppender.clear_instance()
    CellAppender.clear_instance()
    Appender.clear_layout()


def process_sheet(workbook):
    logger = Logger.get_instance()
    logger.info("Reading input", {"sheet": "Data"})
    logger.trace("Not shown at INFO")
    logger.warn("Sheet 'Data' is empty")  # aborts under EXIT
    logger.info("Not reached")


def main():
    print("=" * 60)
    print("  scriptlog demo")
    print("=" * 60)

    # ── 1. Console logging ─────────────────────────────────────
    print("\n[1/3] Console logging (INFO, CONTINUE)...")
    logger = Logger.get_instance("info", "continue")
    logger.info("Script started", {"user": "ana"})
    logger.error("Row 12 has no date")
    print(f"  ✓ {logger.to_short_string()}")
    reset()

    # ── 2. YAML config, cell appender, termination ──────────
    print("\n[2/3] YAML config with a cell appender...")
    workbook = InMemoryWorkbook(["Data", "Log"])
    configure_logger(LoggerConfig.from_yaml_string(CONFIG_YAML), workbook)
    result = ScriptRunner(workbook).run(process_sheet)
    cell = workbook.get_worksheet("Log").get_range("C2")
    print(f"  ✓ Terminated: {result.terminated}")
    print(f"  ✓ Cell C2:    {cell.get_value()} (font {cell.font_color})")

    # ── 3. State export ───────────────────────────────────────
    print("\n[3/3] Final state...")
    state = result.state
    print(f"  ✓ Level/action: {state['level']}/{state['action']}")
    print(f"  ✓ Errors: {state['error_count']}, warnings: {state['warning_count']}")
    for event in state["critical_events"]:
        print(f"    - {event}")
    reset()


if __name__ == "__main__":
    main()
