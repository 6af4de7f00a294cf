"""Floor plans built from the stored floors and products.

A floor plan mirrors the physical layout: the left area, an aisle and the
right area, each area split into columns of :data:`ROWS_PER_COLUMN` slots.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .layout_config import LEFT_SIDE, RIGHT_SIDE, ROWS_PER_COLUMN, SIDES
from .models import Floor, Product
from .positions import format_position

AISLE = " || "


@dataclass
class Slot:
    position: str
    products: List[Product] = field(default_factory=list)

    @property
    def occupied(self) -> bool:
        return bool(self.products)


@dataclass
class FloorPlan:
    floor_number: int
    areas: Dict[str, List[List[Slot]]]
    unplaced: List[Product] = field(default_factory=list)

    def slot(self, position: str) -> Slot | None:
        for columns in self.areas.values():
            for column in columns:
                for slot in column:
                    if slot.position == position:
                        return slot
        return None


def _build_area(side: str, columns: int) -> List[List[Slot]]:
    return [
        [Slot(format_position(side, column, row)) for row in range(1, ROWS_PER_COLUMN + 1)]
        for column in range(1, columns + 1)
    ]


def build_floor_plan(floor: Floor, products: Iterable[Product]) -> FloorPlan:
    """Place ``products`` of ``floor`` into their slots.

    Products stored on another floor are skipped.  Products whose position is
    not part of the floor grid end up in :attr:`FloorPlan.unplaced`.
    """

    areas = {
        LEFT_SIDE: _build_area(LEFT_SIDE, floor.left_columns),
        RIGHT_SIDE: _build_area(RIGHT_SIDE, floor.right_columns),
    }
    plan = FloorPlan(floor.floor_number, areas)
    index = {slot.position: slot for columns in areas.values() for column in columns for slot in column}
    for product in products:
        if product.floor_number != floor.floor_number:
            continue
        slot = index.get(product.position)
        if slot is None:
            plan.unplaced.append(product)
        else:
            slot.products.append(product)
    return plan


def column_occupancy(plan: FloorPlan) -> dict[str, dict[int, int]]:
    """Return count of occupied slots per column on each side.

    The first key is the side (``"L"`` or ``"R"``) and the second the column
    number.  Empty columns are reported with zero counts.
    """

    occ: dict[str, dict[int, int]] = {side: {} for side in SIDES}
    for side, columns in plan.areas.items():
        for number, column in enumerate(columns, start=1):
            occ[side][number] = sum(1 for slot in column if slot.occupied)
    return occ


def _slot_lines(slot: Slot) -> List[str]:
    return [slot.position] + [f"{p.model}({p.quantity})" for p in slot.products]


def _render_line(columns: List[List[List[str]]], row: int, line_no: int, width: int) -> str:
    parts = []
    for column in columns:
        lines = column[row]
        text = lines[line_no] if line_no < len(lines) else ""
        # the first line of a slot is its boxed position label
        parts.append(f"[{text:<{width}}]" if line_no == 0 else f" {text:<{width}} ")
    return " ".join(parts)


def render_floor_plan(plan: FloorPlan) -> str:
    """Return a plain-text map of ``plan``.

    Rows run top to bottom; the left area, the aisle and the right area run
    left to right.  Every slot shows its position followed by one
    ``MODEL(quantity)`` line per stored product.
    """

    cells = {
        side: [[_slot_lines(slot) for slot in column] for column in plan.areas.get(side, [])]
        for side in SIDES
    }
    width = max(
        (len(line) for columns in cells.values() for column in columns for lines in column for line in lines),
        default=0,
    )
    out = [f"Floor {plan.floor_number}"]
    for row in range(ROWS_PER_COLUMN):
        height = max(
            (len(column[row]) for columns in cells.values() for column in columns),
            default=1,
        )
        for line_no in range(height):
            left = _render_line(cells[LEFT_SIDE], row, line_no, width)
            right = _render_line(cells[RIGHT_SIDE], row, line_no, width)
            out.append(f"{left}{AISLE}{right}".rstrip())
    if plan.unplaced:
        out.append("Unplaced: " + ", ".join(
            f"{p.position} {p.model}({p.quantity})" for p in plan.unplaced
        ))
    return "\n".join(out)


def format_search_results(products: Iterable[Product]) -> str:
    return "\n".join(
        f"Floor {p.floor_number} {p.position}: {p.model} ({p.quantity} pcs)"
        for p in products
    )
