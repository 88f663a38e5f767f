from __future__ import annotations

import pandas as pd

from .errors import OrderingError, UnsupportedConventionError

SUPPORTED_DAY_COUNTS = ("30/360", "ACT/360", "ACT/365")


def to_date(value) -> pd.Timestamp:
    """Calendar date at midnight; time of day is ignored."""
    return pd.Timestamp(value).normalize()


def normalize_convention(convention: str) -> str:
    return str(convention).upper().replace(" ", "")


def add_months(date, n: int) -> pd.Timestamp:
    """Month offset; the day is clamped to the last day of the target month."""
    return to_date(date) + pd.DateOffset(months=int(n))


def add_days(date, n: int) -> pd.Timestamp:
    return to_date(date) + pd.Timedelta(days=int(n))


def days_between(start, end) -> int:
    """Whole calendar days from start to end (negative if end is earlier)."""
    return int((to_date(end) - to_date(start)).days)


def year_fraction(start, end, convention: str) -> float:
    """
    Year fraction between two dates under a day count convention.

    Supported:
    - ACT/365 (fixed denominator)
    - ACT/360
    - 30/360, with both day-of-month values capped at 30 and no other
      end-of-month adjustment
    """
    start = to_date(start)
    end = to_date(end)
    if start == end:
        return 0.0
    if end < start:
        raise OrderingError(
            f"Dates must be strictly increasing: start={start.date()} end={end.date()}"
        )

    dc = normalize_convention(convention)

    if dc == "ACT/365":
        return days_between(start, end) / 365.0

    if dc == "ACT/360":
        return days_between(start, end) / 360.0

    if dc == "30/360":
        d1 = min(start.day, 30)
        d2 = min(end.day, 30)
        return ((end.year - start.year) * 360 + (end.month - start.month) * 30 + (d2 - d1)) / 360.0

    raise UnsupportedConventionError(f"Unsupported day count convention: {convention}")


def check_convention(convention: str) -> str:
    """Canonical convention name, or UnsupportedConventionError."""
    dc = normalize_convention(convention)
    if dc not in SUPPORTED_DAY_COUNTS:
        raise UnsupportedConventionError(f"Unsupported day count convention: {convention}")
    return dc
