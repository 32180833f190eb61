"""Lenient coercion of loosely-typed request wizard values.

Request payloads arrive as JSON blobs typed by hand in a browser: numbers
come as strings, currency carries symbols and separators, lists may be
missing. These helpers never raise; anything unusable becomes ``None`` and
the calculators substitute their own defaults.
"""

from __future__ import annotations

import math
import re
from typing import Any

# Currency symbols, thousands separators, percent signs and whitespace.
_NUMBER_NOISE = re.compile(r"[£$€¥,%\s]")


def to_float(value: Any) -> float | None:
    """Coerce *value* to a finite float, or ``None`` if it is not numeric.

    Strings are stripped of currency symbols, thousands separators and
    percent signs first, so ``"£12,345.67"`` parses to ``12345.67``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        cleaned = _NUMBER_NOISE.sub("", value)
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_currency(value: Any) -> float:
    """Parse a currency amount, defaulting to 0.0 when absent or malformed."""
    number = to_float(value)
    return 0.0 if number is None else number


def to_int(value: Any) -> int | None:
    """Coerce to an int by truncation (``"12.9"`` -> 12), or ``None``."""
    number = to_float(value)
    if number is None:
        return None
    return int(number)


def to_bool(value: Any) -> bool:
    """Interpret a wizard checkbox value; unknown shapes are ``False``."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "on"}
    return False


def count_items(value: Any) -> int:
    """Length of a list-like value; ``0`` for anything else."""
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value)
    return 0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
