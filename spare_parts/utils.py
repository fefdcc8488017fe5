from datetime import datetime, timezone
import math
import re

LEADING_INT = re.compile(r"^\s*[+-]?\d+")


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what SQLite's CURRENT_TIMESTAMP stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def parse_int(value, default: int) -> int:
    """
    Parse a spreadsheet cell as an integer.

    Reads the leading integer of the cell, so "12", " 7 ", "3.0" and
    "12 pcs" all parse. Anything without one (blank, NaN, infinity,
    text) yields the default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return default
        return int(value)
    match = LEADING_INT.match(str(value))
    if match is None:
        return default
    return int(match.group())


def cell_text(value):
    """Trimmed string form of a spreadsheet cell, or None when blank."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None
