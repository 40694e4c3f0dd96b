"""
Fertile window calculation.

The fertile window covers the days before ovulation during which sperm
remain viable, the ovulation day itself and the day after. Ovulation is
estimated a fixed luteal length before the end of the cycle.
"""
from datetime import date, timedelta
from typing import Optional, Tuple

from cyclecast.models.cycle import CycleLengths
from cyclecast.services.constants import (
    FERTILE_DAYS_AFTER_OVULATION,
    FERTILE_DAYS_BEFORE_OVULATION,
    LUTEAL_PHASE_LENGTH
)
from cyclecast.services.utils import days_between

def fertile_offsets(
    cycle_length: int,
    period_length: int,
    luteal_length: int = LUTEAL_PHASE_LENGTH,
    days_before: int = FERTILE_DAYS_BEFORE_OVULATION,
    days_after: int = FERTILE_DAYS_AFTER_OVULATION
) -> Optional[Tuple[int, int]]:
    """
    Fertile window as day offsets from the cycle start, both ends included.

    Args:
        cycle_length: Effective cycle length in days
        period_length: Effective period length in days
        luteal_length: Days from ovulation to the end of the cycle
        days_before: Fertile days before the ovulation day
        days_after: Fertile days after the ovulation day

    Returns:
        Tuple of (first offset, last offset), or None if the window would be
        empty once the period and the cycle end are excluded

    Example:
        >>> fertile_offsets(28, 5)
        (9, 15)
    """
    ovulation_day = cycle_length - luteal_length
    # The window never starts inside the period
    first = max(ovulation_day - days_before, period_length)
    last = min(ovulation_day + days_after, cycle_length - 1)
    if first > last:
        return None
    return first, last

def is_fertile(
    day: date,
    anchor_start: Optional[date],
    cycle_length: int,
    period_length: int,
    luteal_length: int = LUTEAL_PHASE_LENGTH,
    days_before: int = FERTILE_DAYS_BEFORE_OVULATION,
    days_after: int = FERTILE_DAYS_AFTER_OVULATION
) -> bool:
    """
    Check whether a date falls inside the fertile window of its cycle.

    Args:
        day: Date to check
        anchor_start: Start of the period the cycle is measured from
        cycle_length: Effective cycle length in days
        period_length: Effective period length in days
        luteal_length: Days from ovulation to the end of the cycle
        days_before: Fertile days before the ovulation day
        days_after: Fertile days after the ovulation day

    Returns:
        True if the date is fertile; False when there is no anchor or the
        date lies outside the anchored cycle (the window never rolls over)
    """
    if anchor_start is None:
        return False

    offsets = fertile_offsets(
        cycle_length, period_length, luteal_length, days_before, days_after
    )
    if offsets is None:
        return False

    offset = days_between(anchor_start, day)
    first, last = offsets
    return first <= offset <= last

def fertile_window(
    anchor_start: Optional[date],
    lengths: CycleLengths,
    luteal_length: int = LUTEAL_PHASE_LENGTH,
    days_before: int = FERTILE_DAYS_BEFORE_OVULATION,
    days_after: int = FERTILE_DAYS_AFTER_OVULATION
) -> Optional[Tuple[date, date]]:
    """
    Calendar dates of the fertile window for the cycle starting at anchor_start.

    Example:
        >>> fertile_window(date(2024, 1, 1), CycleLengths(cycle_length=28, period_length=5))
        (datetime.date(2024, 1, 10), datetime.date(2024, 1, 16))
    """
    if anchor_start is None:
        return None
    offsets = fertile_offsets(
        lengths.cycle_length, lengths.period_length, luteal_length, days_before, days_after
    )
    if offsets is None:
        return None
    first, last = offsets
    return anchor_start + timedelta(days=first), anchor_start + timedelta(days=last)
