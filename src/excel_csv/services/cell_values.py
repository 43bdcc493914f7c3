"""Conversions between cell values and record text."""

from __future__ import annotations

import math
from typing import Any

from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

# Largest integer a spreadsheet double holds exactly.
MAX_EXACT_INTEGER = 2**53

# Number rendering openpyxl writes to the sheet XML.
FLOAT_FORMAT = "%.16g"


def to_text(value: Any) -> str:
    """Render a cell value as record text; blank cells become ``""``."""
    if value is None:
        return ""
    return str(value)


def sanitize(text: str) -> str:
    """Strip control characters that cannot be stored in cell text.

    Removes U+0000-U+0008, U+000B, U+000C and U+000E-U+001F. Tab, line feed
    and carriage return are kept.
    """
    if not text:
        return text
    return ILLEGAL_CHARACTERS_RE.sub("", text)


def infer_value(text: str) -> str | int | float:
    """Return a number when ``text`` is that number's canonical rendering.

    ``"40"`` becomes ``40`` and ``"40.5"`` becomes ``40.5``, while ``"007"``,
    ``"1e5"`` or ``" 4"`` stay text, so reading the cell back yields the
    original string. Floats must survive the ``%.16g`` rendering openpyxl
    uses when saving, so ``"1.0"`` and ``"0.30000000000000004"`` stay text.
    """
    if not text or text.strip() != text:
        return text

    try:
        integer = int(text)
    except ValueError:
        pass
    else:
        if str(integer) == text and abs(integer) < MAX_EXACT_INTEGER:
            return integer
        return text

    try:
        number = float(text)
    except ValueError:
        return text
    if math.isfinite(number) and FLOAT_FORMAT % number == repr(number) == text:
        return number
    return text
