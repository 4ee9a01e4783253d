"""Conversion from sound divider values to note numbers."""

from __future__ import annotations

import math

LN2 = 0.69314718055994530941
MAGIC = 5.78135971352465960412
BASE_CLOCK = 262144


def frequency(div: int) -> int:
    """Return the frequency for a divider, truncated towards zero."""
    if div == 0:
        raise ZeroDivisionError("divider must not be zero")
    quotient = BASE_CLOCK // abs(div)
    return quotient if div > 0 else -quotient


def note_from_divider(div: int) -> int:
    """Return the note number (0 is A at 55 Hz) for a divider value."""
    freq = frequency(div)
    if freq <= 0:
        raise ValueError(f"divider {div} gives no audible frequency")
    return int((math.log(freq) / LN2 - MAGIC) * 12 + 0.2)