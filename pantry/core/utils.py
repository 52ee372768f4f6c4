"""Small utilities."""

from __future__ import annotations

import math
import re
from typing import Any, Optional

_INT_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")


def parse_int(text: Optional[str]) -> Optional[int]:
    """Parse the leading base-10 integer of ``text``.

    Leading whitespace and a sign are accepted, trailing garbage is ignored
    ("12abc" -> 12, "3.9" -> 3). Returns None when no digits lead the string.
    """
    if text is None:
        return None
    m = _INT_PREFIX.match(text)
    if m is None:
        return None
    try:
        return int(m.group(1))
    except ValueError:
        # past the interpreter's int string conversion limit
        return None


def coerce_quantity(value: Any) -> int:
    """Map a raw stored quantity to an int, defaulting to zero."""
    if value is None:
        return 0
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return 0
        return int(value)
    if isinstance(value, str):
        return parse_int(value) or 0
    return 0


def capitalize_first(text: str) -> str:
    # unlike str.capitalize, the tail is left untouched
    return text[:1].upper() + text[1:]
