"""Fixed-width table rows for receipt printers.

A row is split into cells sharing the printable width. Text that does not
fit its cell is cut at the cell boundary and continues on an extra line
below, repeated until every cell has been printed in full.

Lines are returned as ``str`` with style escapes inlined (they are plain
ASCII), so the caller encodes each one with the session codec.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from commands import TEXT_FORMAT, custom_size
from errors import ConfigurationError
from formatter import TextStyle, style_sequence
from text_metrics import text_length, text_substring

_RESET = style_sequence("NORMAL").decode("ascii")


@dataclass(frozen=True)
class Cell:
    """One table cell.

    ``width`` is a fraction of the row width; ``cols`` an explicit column
    count (divided by the horizontal size factor). Only one may be given.
    """

    text: str
    align: str = "LEFT"
    style: Union[str, TextStyle, None] = None
    width: Optional[float] = None
    cols: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width is not None and self.cols is not None:
            raise ConfigurationError("Table cell accepts either 'width' or 'cols', not both")

    @classmethod
    def from_value(cls, value: Any) -> "Cell":
        """Accept a Cell, a mapping with Cell fields, or any printable value."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(
                text=str(value.get("text", "")),
                align=value.get("align") or "LEFT",
                style=value.get("style"),
                width=value.get("width"),
                cols=value.get("cols"),
            )
        return cls(text=str(value))


def _spaces(count: float) -> str:
    """``count`` rounded up, never negative."""
    return " " * max(0, math.ceil(count))


def _styled(cell: Cell, text: str) -> str:
    if not text:
        return ""
    if cell.style:
        return style_sequence(cell.style).decode("ascii") + text + _RESET
    return text


def layout_table(
    cells: Sequence[Any],
    device_width: int,
    size: Tuple[int, int] = (1, 1),
) -> List[str]:
    """Render a row (and its continuation rows) to display lines.

    Args:
        cells: Cell objects, mappings with Cell fields, or plain values.
        device_width: printable columns at normal size.
        size: (width, height) character magnification of the row.

    Returns:
        One string per printed line, without line terminator.

    Raises:
        ConfigurationError: size factor outside 1..8, conflicting width
            options, or a cell too narrow to hold its next character.
    """
    row = [Cell.from_value(c) for c in cells]
    if not row:
        return []
    w, h = size
    for factor in (w, h):
        if isinstance(factor, bool) or not isinstance(factor, int) or not 1 <= factor <= 8:
            raise ConfigurationError(f"Table size factors must be integers 1..8, got {size!r}")
    base_width = device_width // w
    default_width = base_width // len(row)

    lines: List[str] = []
    while True:
        leftover = base_width - default_width * len(row)
        parts: List[str] = []
        continuation: List[Cell] = []
        overflow = False

        for cell in row:
            cell_width: float = default_width
            if cell.width is not None:
                cell_width = base_width * cell.width
            elif cell.cols:
                cell_width = cell.cols / w
                leftover = 0

            text, rest = cell.text, ""
            if text_length(text) > cell_width:
                text = text_substring(cell.text, 0, cell_width)
                if cell_width <= 0 or not text:
                    raise ConfigurationError(
                        f"Table cell of width {cell_width} cannot hold {cell.text[:1]!r}"
                    )
                rest = text_substring(cell.text, cell_width)
                overflow = True
            gap = cell_width - text_length(text)
            align = cell.align.upper()

            if align == "CENTER":
                parts.append(_spaces(gap / 2) + _styled(cell, text) + _spaces(gap / 2 - 1))
            elif align == "RIGHT":
                pad = gap
                if leftover > 0:
                    pad += leftover
                    leftover = 0
                parts.append(_spaces(pad) + _styled(cell, text))
            else:
                pad = math.floor(gap)
                if leftover > 0:
                    pad += leftover
                    leftover = 0
                parts.append(_styled(cell, text) + _spaces(pad))

            continuation.append(replace(cell, text=rest))

        line = "".join(parts)
        if w > 1 or h > 1:
            line = (
                custom_size(w, h).decode("ascii")
                + line
                + TEXT_FORMAT["TXT_NORMAL"].decode("ascii")
            )
        lines.append(line)

        if not overflow:
            return lines
        row = continuation


def layout_simple(values: Sequence[Any], device_width: int) -> str:
    """Evenly split row: each value left aligned in ``width / n`` columns."""
    if not values:
        return ""
    cell_width = device_width / len(values)
    line = ""
    for value in values:
        text = str(value)
        line += text + _spaces(cell_width - text_length(text))
    return line
