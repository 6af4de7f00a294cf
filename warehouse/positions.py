"""Helpers for warehouse position codes such as ``L3-2``.

A position code names a single pallet slot on a floor: the side of the aisle
(``L`` or ``R``), the column counted from the aisle and the row inside that
column.  Range checks against the floor layout are left to the callers; this
module only converts between the text form and its parts.
"""

from __future__ import annotations

import re
from typing import Iterator, NamedTuple, Optional

from .layout_config import ROWS_PER_COLUMN, SIDE_NAMES

POSITION_PATTERN = re.compile(r"([LR])(\d+)-(\d+)", re.ASCII)


class Position(NamedTuple):
    side: str
    column: int
    row: int

    def __str__(self) -> str:
        return format_position(self.side, self.column, self.row)


def format_position(side: str, column: int, row: int) -> str:
    """Return the position code for ``side``, ``column`` and ``row``."""

    return f"{side}{column}-{row}"


def parse_position(text: str) -> Optional[Position]:
    """Split a position code into its parts.

    Returns ``None`` when ``text`` is not a well formed code.  Column and row
    are not checked against any floor layout.
    """

    match = POSITION_PATTERN.fullmatch(text or "")
    if not match:
        return None
    side, column, row = match.groups()
    return Position(side, int(column), int(row))


def normalize_position(text: str) -> str:
    return (text or "").strip().upper()


def floor_positions(side: str, columns: int, rows: int = ROWS_PER_COLUMN) -> Iterator[str]:
    """Yield every position code on one side of a floor, column by column."""

    for column in range(1, columns + 1):
        for row in range(1, rows + 1):
            yield format_position(side, column, row)


def describe_position(text: str) -> str:
    position = parse_position(text)
    if position is None:
        return ""
    side, column, row = position
    return f"{SIDE_NAMES[side]} | Column {column} | Row {row}"
