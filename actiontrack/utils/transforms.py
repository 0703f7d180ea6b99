"""Cell coercion helpers shared by ingestion and analytics."""

import math
import numbers
import re
from datetime import date, datetime

import pandas as pd

from actiontrack.utils.types import CellValue, DateLike

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1


def _is_missing(value: CellValue) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return value is pd.NaT


def cell_text(value: CellValue) -> str:
    """Render a spreadsheet cell as trimmed text.

    Date cells become ISO dates (or full ISO timestamps when they carry a
    time of day) and integral floats lose their trailing ``.0``.
    """
    if _is_missing(value):
        return ""
    match value:
        case pd.Timestamp() | datetime():
            ts = pd.Timestamp(value)
            if ts == ts.normalize():
                return ts.date().isoformat()
            return ts.isoformat()
        case date():
            return value.isoformat()
        case bool():
            return str(value)
        case float() if value.is_integer():
            return str(int(value))
        case _:
            return str(value).strip()


def parse_day(value: CellValue, default: int = 1) -> int:
    """Leading integer of a cell, ``default`` when absent, invalid, zero or out of int64 range."""
    if _is_missing(value):
        return default
    match value:
        case bool():
            return default
        case float() if not math.isfinite(value):
            return default
        case int() | float():
            day = int(value)
        case _:
            found = _LEADING_INT.match(str(value))
            if not found:
                return default
            day = int(found.group(1))
    if not _INT64_MIN <= day <= _INT64_MAX:
        return default
    return day or default


def parse_timestamp(value: DateLike | CellValue) -> pd.Timestamp | None:
    """Parse a date-ish cell into a naive timestamp, ``None`` when unreadable.

    Timezone-aware values are converted to UTC before the zone is dropped.
    """
    if _is_missing(value):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    # bare numbers would be read as epoch nanoseconds
    if isinstance(value, numbers.Number):
        return None
    try:
        ts = pd.Timestamp(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is pd.NaT:
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def to_day(value: DateLike) -> pd.Timestamp:
    """Midnight of the given date; raises ``ValueError`` when unreadable."""
    ts = parse_timestamp(value)
    if ts is None:
        raise ValueError(f"Unreadable date: {value!r}")
    return ts.normalize()
