"""
Cell value model.

A cell holds exactly one of:
    - text: ``str`` (the empty string is text, not null)
    - number: ``int`` or ``float`` (``bool`` is never treated as a number)
    - absent/null: ``None``, or the key is missing from the row

Every component that turns a value into text (search, sort, display, join
keys, export) goes through ``stringify`` so they all agree.
"""

from __future__ import annotations

import math
import re
from typing import Any, Mapping, Union

CellValue = Union[str, int, float, None]
Row = Mapping[str, CellValue]

# Plain decimal notation with optional exponent; no hex, inf, nan or "_"
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_RE = re.compile(r"[+-]?\d+")

# Integral floats below this magnitude print without a fraction or exponent
_PLAIN_INTEGER_LIMIT = 1e21


def is_number(value: Any) -> bool:
    """Return True for int/float values, excluding bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_absent(value: Any) -> bool:
    """Return True for null/absent cells."""
    return value is None


def format_number(value: int | float) -> str:
    """Return the canonical text of a number.

    Integral values print without a trailing ``.0`` so that ``12.0`` and
    ``12`` share one representation.

    Examples:
        >>> format_number(12.0)
        '12'
        >>> format_number(3.5)
        '3.5'
        >>> format_number(-0.25)
        '-0.25'
    """
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < _PLAIN_INTEGER_LIMIT:
        return str(int(value))
    return repr(value)


def stringify(value: Any) -> str:
    """Return the canonical text form of a cell value.

    Examples:
        >>> stringify(None)
        ''
        >>> stringify(7)
        '7'
        >>> stringify("Seven")
        'Seven'
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value)
    return str(value)


def parse_number(text: str) -> int | float | None:
    """Strictly parse decimal text into a number.

    Leading and trailing whitespace is ignored. Integral results come back as
    ``int``. Anything that is not plain decimal notation, or that overflows to
    infinity, returns None.

    Examples:
        >>> parse_number("12.0")
        12
        >>> parse_number("1.5e2")
        150
        >>> parse_number("abc") is None
        True
    """
    candidate = text.strip()
    if not candidate or not _DECIMAL_RE.fullmatch(candidate):
        return None
    if _INTEGER_RE.fullmatch(candidate):
        return int(candidate)
    number = float(candidate)
    if not math.isfinite(number):
        return None
    if number.is_integer() and abs(number) < _PLAIN_INTEGER_LIMIT:
        return int(number)
    return number


def infer_cell(text: str) -> CellValue:
    """Infer a cell from raw ingested text.

    Text becomes a number only when the number prints back to exactly the
    same text, so values such as ``"007"``, ``"1.50"`` or ``"12.0"`` keep
    their original spelling as text.

    Examples:
        >>> infer_cell("12")
        12
        >>> infer_cell("12.0")
        '12.0'
        >>> infer_cell("")
        ''
    """
    number = parse_number(text)
    if number is not None and format_number(number) == text:
        return number
    return text


def parse_edit_text(text: str) -> CellValue:
    """Turn staged edit text into the value that gets committed.

    Whitespace-only text commits as empty text. Text that parses as a finite
    decimal number and does not end with a dot commits as a number;
    everything else commits as text.

    Examples:
        >>> parse_edit_text("12.0")
        12
        >>> parse_edit_text("12.")
        '12.'
        >>> parse_edit_text("   ")
        ''
    """
    if not text.strip():
        return ""
    if text.endswith("."):
        return text
    number = parse_number(text)
    if number is None:
        return text
    return number


def coerce_number(value: Any) -> int | float | None:
    """Coerce a cell to a number for aggregation, or None if not numeric.

    Infinities, NaN and integers too large to represent as a float are not
    aggregated.
    """
    if is_number(value):
        number = value
    elif isinstance(value, str):
        number = parse_number(value)
    else:
        return None
    if number is None:
        return None
    try:
        finite = math.isfinite(number)
    except OverflowError:
        return None
    return number if finite else None
