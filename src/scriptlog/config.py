"""
Pydantic configuration schema for the logger.

Usage:
    config = LoggerConfig.from_yaml("logging.yaml")
    logger = configure_logger(config, workbook)

Example YAML:
    level: INFO
    action: CONTINUE
    layout: short
    console: true
    cell:
      worksheet: Log
      address: C2
      colors:
        info: "#0000ff"
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, field_validator

from scriptlog.appenders import Appender, CellAppender, ConsoleAppender
from scriptlog.core import Action, Level, Logger
from scriptlog.errors import ScriptError
from scriptlog.layout import Layout, default_formatter, short_formatter
from scriptlog.records import LogEventType

LAYOUTS = {
    "default": default_formatter,
    "short": short_formatter,
}


# ═══════════════════════════════════════════════════════════════════
#  Schema
# ═══════════════════════════════════════════════════════════════════

class CellAppenderConfig(BaseModel):
    address: str
    worksheet: Optional[str] = None            # active worksheet when omitted
    colors: Optional[dict[str, str]] = None    # severity name → hex color

    @field_validator("colors")
    @classmethod
    def check_color_keys(cls, value: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
        if value is None:
            return value
        normalized = {}
        for key, color in value.items():
            name = key.upper()
            if name not in LogEventType.__members__:
                raise ValueError(
                    f"Unknown event type '{key}'. "
                    f"Valid names: {', '.join(m.name for m in LogEventType)}"
                )
            normalized[name] = color
        return normalized


class LoggerConfig(BaseModel):
    level: int | str = "WARN"
    action: int | str = "EXIT"
    layout: Optional[str] = None
    console: bool = True
    cell: Optional[CellAppenderConfig] = None

    @field_validator("level")
    @classmethod
    def check_level(cls, value: int | str) -> str:
        try:
            return Level.from_value(value).name
        except ScriptError as e:
            raise ValueError(e.message)

    @field_validator("action")
    @classmethod
    def check_action(cls, value: int | str) -> str:
        try:
            return Action.from_value(value).name
        except ScriptError as e:
            raise ValueError(e.message)

    @field_validator("layout")
    @classmethod
    def check_layout(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in LAYOUTS:
            raise ValueError(
                f"Unknown layout '{value}'. Valid layouts: {', '.join(LAYOUTS)}"
            )
        return value

    # ── Loading ───────────────────────────────────────────────────

    @classmethod
    def from_yaml(cls, path: str | Path) -> "LoggerConfig":
        """Load and validate from a YAML file."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.from_yaml_string(raw)

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "LoggerConfig":
        """Load and validate from a YAML string. An empty document gives the defaults."""
        data = yaml.safe_load(yaml_string)
        return cls.model_validate(data or {})

    @classmethod
    def from_dict(cls, data: dict) -> "LoggerConfig":
        """Load and validate from a dict."""
        return cls.model_validate(data)

    def to_dict(self, exclude_none: bool = True) -> dict:
        return self.model_dump(exclude_none=exclude_none)


# ═══════════════════════════════════════════════════════════════════
#  Applying a config
# ═══════════════════════════════════════════════════════════════════

def configure_logger(
    config: LoggerConfig | Mapping[str, Any],
    workbook: Any = None,
) -> Logger:
    """
    Build the Logger and its appenders from a config.

    Singletons already created keep their settings: the layout, the logger
    and each appender are only created if they do not exist yet.
    """
    context = "configure_logger"
    if not isinstance(config, LoggerConfig):
        config = LoggerConfig.from_dict(dict(config))

    # Checked before any singleton is created
    if config.cell is not None and workbook is None:
        raise ScriptError(
            f"[{context}]: A workbook is required to build the cell appender."
        )

    if config.layout is not None:
        Appender.set_layout(Layout(LAYOUTS[config.layout]))

    logger = Logger.get_instance(config.level, config.action)

    appenders: list[Appender] = []
    if config.console:
        appenders.append(ConsoleAppender.get_instance())
    if config.cell is not None:
        sheet = (
            workbook.get_worksheet(config.cell.worksheet)
            if config.cell.worksheet
            else workbook.get_active_worksheet()
        )
        cell = sheet.get_range(config.cell.address)
        appenders.append(CellAppender.get_instance(cell, config.cell.colors))

    if appenders:
        logger.set_appenders(appenders)
    return logger
