"""Date utilities for cofre.

Pure functions for calendar arithmetic, month bucketing and turning the many
date shapes found in subscription records into one canonical type.

Canonical instants are naive ``datetime`` objects in local time. Aware inputs
are converted to local time before their tzinfo is dropped, so comparisons
between records never mix naive and aware values.
"""

from collections.abc import Mapping
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

import pandas as pd

from cofre.domain.models import Month


def as_local_naive(dt: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def _from_epoch_millis(millis: float) -> datetime:
    return datetime.fromtimestamp(millis / 1000)


def parse_date_string(raw: str) -> datetime | None:
    """Parse a date string, ISO first and then day-first fuzzy parsing.

    Returns:
        Naive local datetime, or None if the text is not a date.
    """
    text = raw.strip()
    if not text:
        return None

    try:
        return as_local_naive(datetime.fromisoformat(text))
    except ValueError:
        pass

    # Exports are inconsistent (DD/MM/YYYY, "15 Jan 2024", ...), so fall back to pandas
    try:
        parsed = pd.to_datetime(text, dayfirst=True)
    except (ValueError, OverflowError, pd.errors.ParserError):
        return None

    if pd.isna(parsed):
        return None
    return as_local_naive(parsed.to_pydatetime())


def to_datetime(value: Any, now: datetime | None = None) -> datetime:
    """Normalize a heterogeneous date representation into a canonical datetime.

    Accepted shapes:
    - ``datetime`` (aware values are converted to local time)
    - ``date`` (midnight of that day)
    - epoch milliseconds as ``int``, ``float`` or ``Decimal``
    - a store timestamp mapping ``{"seconds": ..., "nanoseconds": ...}``
    - any object exposing ``to_datetime()``
    - a date string (ISO first, then day-first fuzzy parsing)

    Args:
        value: Raw date value from a record.
        now: Fallback instant. If None, uses the current time.

    Returns:
        Naive local datetime. Missing or unparseable input yields ``now``.
    """
    fallback = as_local_naive(now) if now is not None else datetime.now()

    if value is None or isinstance(value, bool):
        return fallback

    if isinstance(value, datetime):
        return as_local_naive(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if isinstance(value, (int, float, Decimal)):
        try:
            return _from_epoch_millis(float(value))
        except (ValueError, OverflowError, OSError):
            return fallback

    if isinstance(value, Mapping):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds", 0)) or 0
        try:
            return datetime.fromtimestamp(float(seconds) + float(nanos) / 1e9)
        except (TypeError, ValueError, OverflowError, OSError):
            return fallback

    converter = getattr(value, "to_datetime", None)
    if callable(converter):
        try:
            converted = converter()
        except (AttributeError, TypeError, ValueError, OverflowError, OSError):
            return fallback
        if isinstance(converted, datetime):
            return as_local_naive(converted)
        return fallback

    if isinstance(value, str):
        parsed = parse_date_string(value)
        return parsed if parsed is not None else fallback

    return fallback


def add_months(dt: datetime, months: int = 1) -> datetime:
    """Add calendar months, clamping to the last day of a shorter month."""
    return (pd.Timestamp(dt) + pd.DateOffset(months=months)).to_pydatetime()


def add_years(dt: datetime, years: int = 1) -> datetime:
    """Add calendar years, clamping Feb 29 to Feb 28 in non-leap years."""
    return (pd.Timestamp(dt) + pd.DateOffset(years=years)).to_pydatetime()


def is_same_day(a: datetime, b: datetime) -> bool:
    """Check whether two instants fall on the same calendar day."""
    return a.date() == b.date()


def month_start(dt: datetime) -> datetime:
    """Midnight of the first day of the instant's month."""
    return dt.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def month_key(dt: datetime) -> Month:
    """Month bucket key (YYYY-MM) for an instant."""
    return Month(dt.strftime("%Y-%m"))


def month_range(month: Month) -> tuple[str, str, str]:
    """Calculate date range and label for a month.

    Args:
        month: Month in YYYY-MM format.

    Returns:
        Tuple of (since_date, until_date, label) where:
        - since_date: First day of month (YYYY-MM-DD)
        - until_date: First day of next month (YYYY-MM-DD)
        - label: Human-readable month (e.g., "January 2025")
    """
    dt = datetime.strptime(month, "%Y-%m")
    since = dt.strftime("%Y-%m-01")
    next_month = (dt.replace(day=28) + timedelta(days=4)).replace(day=1)
    until = next_month.strftime("%Y-%m-%d")
    label = dt.strftime("%B %Y")
    return since, until, label


def short_month_label(month: Month) -> str:
    """Compact chart label for a month (e.g., "Jan/25")."""
    return datetime.strptime(month, "%Y-%m").strftime("%b/%y")
