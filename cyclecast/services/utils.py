"""
Shared utility functions for cycle-related services.

These utilities are used across multiple service modules to handle common
operations like day arithmetic, rounding averages and date ranges.
"""
import calendar
import math
from typing import Iterator, Sequence, Tuple
from datetime import date, timedelta

def days_between(start: date, end: date) -> int:
    """Signed number of whole days from start to end."""
    return (end - start).days

def round_half_up(value: float) -> int:
    """
    Round an average to whole days, halves rounding up.

    Example:
        >>> round_half_up(28.5)
        29
    """
    return int(math.floor(value + 0.5))

def mean_days(values: Sequence[int]) -> int:
    """Rounded mean of a non-empty sequence of day counts."""
    return round_half_up(sum(values) / len(values))

def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end, both included."""
    for offset in range(days_between(start, end) + 1):
        yield start + timedelta(days=offset)

def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """
    First and last day of a calendar month.

    Example:
        >>> month_bounds(2024, 2)
        (datetime.date(2024, 2, 1), datetime.date(2024, 2, 29))
    """
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
