"""Input rules for product models, quantities and floor layouts."""

from __future__ import annotations

import re
from typing import Any, Optional

from .layout_config import MAX_COLUMNS, MAX_FLOORS, MAX_INTEGER, MIN_COLUMNS, MIN_FLOORS

# One leading letter followed by 4-6 letters, digits or hyphens.
MODEL_PATTERN = re.compile(r"[A-Z][A-Z0-9-]{4,6}")
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def format_model(text: str) -> str:
    """Return the canonical form of a model code as typed by the user.

    Models are stored in this form, so the result of this function is what
    both :func:`validate_model` and the storage layer see.
    """

    return (text or "").strip().upper()


def validate_model(text: str) -> bool:
    return MODEL_PATTERN.fullmatch(format_model(text)) is not None


def parse_int(text: Any) -> Optional[int]:
    """Return ``text`` as an integer or ``None`` when it is not one.

    Integers pass through unchanged; strings may carry surrounding whitespace
    and a sign.  Booleans and floats are not treated as integers.
    """

    if isinstance(text, bool):
        return None
    if isinstance(text, int):
        return text
    if not isinstance(text, str):
        return None
    value = text.strip()
    if not _INTEGER_PATTERN.fullmatch(value):
        return None
    return int(value)


def validate_quantity(text: Any) -> bool:
    """Return ``True`` when ``text`` is a whole number between 1 and :data:`MAX_INTEGER`.

    The raw field text is expected here so that values which do not parse at
    all are rejected by the same rule as zero or negative amounts.
    """

    if not isinstance(text, str):
        text = str(text)
    quantity = parse_int(text)
    return quantity is not None and 0 < quantity <= MAX_INTEGER


def validate_columns(columns: Any) -> bool:
    if isinstance(columns, bool) or not isinstance(columns, int):
        return False
    return MIN_COLUMNS <= columns <= MAX_COLUMNS


def validate_floor_count(count: Any) -> bool:
    if isinstance(count, bool) or not isinstance(count, int):
        return False
    return MIN_FLOORS <= count <= MAX_FLOORS


def validate_floor_number(number: Any) -> bool:
    if isinstance(number, bool) or not isinstance(number, int):
        return False
    return 1 <= number <= MAX_INTEGER
