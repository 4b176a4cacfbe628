"""
Host environment surface used by the cell appender.

CellRange is the minimal protocol a spreadsheet cell handle must offer.
The InMemory* classes are synchronous stand-ins for a live workbook: every
write is visible as soon as the call returns.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Protocol, runtime_checkable


class VerticalAlignment(str, Enum):
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


@runtime_checkable
class CellRange(Protocol):
    def set_value(self, value: Any) -> None: ...
    def get_value(self) -> Any: ...
    def clear_contents(self) -> None: ...
    def get_address(self) -> str: ...
    def get_cell_count(self) -> int: ...
    def set_font_color(self, color: str) -> None: ...
    def set_vertical_alignment(self, alignment: VerticalAlignment) -> None: ...


class InMemoryRange:
    """A range over `cell_count` cells; only the value of the first is kept."""

    def __init__(self, address: str = "A1", cell_count: int = 1) -> None:
        self._address = address
        self._cell_count = cell_count
        self._value: Any = ""
        self.font_color: Optional[str] = None
        self.vertical_alignment: Optional[VerticalAlignment] = None
        self.writes = 0

    def set_value(self, value: Any) -> None:
        self._value = value
        self.writes += 1

    def get_value(self) -> Any:
        return self._value

    def clear_contents(self) -> None:
        self._value = ""

    def get_address(self) -> str:
        return self._address

    def get_cell_count(self) -> int:
        return self._cell_count

    def set_font_color(self, color: str) -> None:
        self.font_color = color

    def set_vertical_alignment(self, alignment: VerticalAlignment) -> None:
        self.vertical_alignment = alignment


class InMemoryWorksheet:
    def __init__(self, name: str = "Sheet1") -> None:
        self._name = name
        self._ranges: dict[str, InMemoryRange] = {}

    def get_name(self) -> str:
        return self._name

    def get_range(self, address: str) -> InMemoryRange:
        """Same handle for the same address. 'A1:B2' style addresses span several cells."""
        if address not in self._ranges:
            self._ranges[address] = InMemoryRange(address, _cell_count(address))
        return self._ranges[address]


class InMemoryWorkbook:
    def __init__(self, sheet_names: list[str] | None = None) -> None:
        self._sheets: dict[str, InMemoryWorksheet] = {}
        for name in sheet_names or ["Sheet1"]:
            self._sheets[name] = InMemoryWorksheet(name)

    def get_worksheet(self, name: str) -> InMemoryWorksheet:
        if name not in self._sheets:
            self._sheets[name] = InMemoryWorksheet(name)
        return self._sheets[name]

    def get_active_worksheet(self) -> InMemoryWorksheet:
        return next(iter(self._sheets.values()))


def _cell_count(address: str) -> int:
    if ":" not in address:
        return 1
    start, end = address.split(":", 1)
    col_a, row_a = _split_cell(start)
    col_b, row_b = _split_cell(end)
    return (abs(col_b - col_a) + 1) * (abs(row_b - row_a) + 1)


def _split_cell(ref: str) -> tuple[int, int]:
    letters = "".join(ch for ch in ref if ch.isalpha()).upper()
    digits = "".join(ch for ch in ref if ch.isdigit())
    col = 0
    for ch in letters:
        col = col * 26 + (ord(ch) - ord("A") + 1)
    return col, int(digits or 1)
