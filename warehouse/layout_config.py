"""Shared configuration for the warehouse layout.

This module centralizes layout-related constants used by validation, the
setup flow and the floor map.  Adjust the values here to match the physical
warehouse and all modules will pick up the changes automatically.
"""

from __future__ import annotations

# Floor sides ----------------------------------------------------------------

# Every floor has a left and a right storage area separated by an aisle.
LEFT_SIDE = "L"
RIGHT_SIDE = "R"
SIDES = (LEFT_SIDE, RIGHT_SIDE)

SIDE_NAMES: dict[str, str] = {
    LEFT_SIDE: "Left side",
    RIGHT_SIDE: "Right side",
}

# Columns and rows -----------------------------------------------------------

# Allowed number of columns on each side of a floor (inclusive range).
MIN_COLUMNS = 1
MAX_COLUMNS = 20

# Column count suggested for a new floor during setup.
DEFAULT_COLUMNS = 5

# Each column holds this many pallet rows, numbered from 1.
ROWS_PER_COLUMN = 3

# Floors ---------------------------------------------------------------------

# Number of floors accepted by the warehouse setup (inclusive range).
MIN_FLOORS = 1
MAX_FLOORS = 10

# Reset ----------------------------------------------------------------------

# Word the user has to type before the whole warehouse is wiped.
RESET_CONFIRMATION = "CONFIRM"

# Integers ---------------------------------------------------------------------

# Largest quantity or floor number accepted from user input (32-bit signed).
MAX_INTEGER = 2**31 - 1
