"""Height / weight / class-year parsing shared by the extractors."""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Optional

# "6-2", "6'2\"", "6 ft 2 in", "6"
HEIGHT_RE = re.compile(
    r"(\d+)\s*(?:ft\.?|feet|')?\s*-?\s*(?:(\d{1,2})\s*(?:in\.?|inches|\"|'')?)?",
    re.IGNORECASE,
)

# "6-2 / 215", "6-2, 215", "6'2\" 215 lbs"
HEIGHT_WEIGHT_RE = re.compile(r"\b(\d)\s*[-']\s*(\d{1,2})\"?\s*[/,]?\s*(\d{3})\b")

CLASS_YEAR_RE = re.compile(r"(?:class of\s+(\d{4})|'(\d{2})\b)", re.IGNORECASE)


def parse_height(value: Any) -> Dict[str, Optional[int]]:
    """Parse a height into ``height_feet`` / ``height_inches``.

    Strings go through a single regex with a mandatory feet group and an
    optional inches group. A bare number, or a string of digits only, is
    treated as total inches from 12 up and as feet below that. Anything
    unparseable yields an empty dict.
    """
    if value is None or isinstance(value, bool):
        return {}
    if isinstance(value, float) and not math.isfinite(value):
        return {}
    if isinstance(value, (int, float)):
        total = int(value)
        if total <= 0:
            return {}
        if total < 12:
            return {"height_feet": total, "height_inches": None}
        feet, inches = divmod(total, 12)
        return {"height_feet": feet, "height_inches": inches}
    if not isinstance(value, str):
        return {}
    if value.strip().isdecimal():
        return parse_height(int(value.strip()))

    match = HEIGHT_RE.search(value)
    if not match:
        return {}
    inches = match.group(2)
    return {
        "height_feet": int(match.group(1)),
        "height_inches": int(inches) if inches is not None else None,
    }


def parse_height_weight(text: str) -> Dict[str, int]:
    """Pull a ``6-2 / 215`` style measurement pair out of free text."""
    match = HEIGHT_WEIGHT_RE.search(text)
    if not match:
        return {}
    return {
        "height_feet": int(match.group(1)),
        "height_inches": int(match.group(2)),
        "weight": int(match.group(3)),
    }


def extract_class_year(text: str, reference_year: int) -> Optional[int]:
    """Find ``Class of 2026`` or ``'26`` near the reference year."""
    match = CLASS_YEAR_RE.search(text)
    if not match:
        return None
    if match.group(1):
        year = int(match.group(1))
    else:
        year = 2000 + int(match.group(2))
    if reference_year - 1 <= year <= reference_year + 6:
        return year
    return None
