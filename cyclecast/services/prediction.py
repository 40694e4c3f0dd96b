"""
Service module for menstrual period predictions.

This module projects future period windows from the most recent logged
episode and the effective cycle lengths, and summarises the next period and
fertile window for upcoming-events displays.

Typical usage:
    predicted = predict_periods(episodes, lengths)
    upcoming = upcoming_events(episodes, lengths, today=date.today())
"""
from typing import List, Optional, Sequence
from datetime import date, timedelta

from aws_lambda_powertools import Logger

from cyclecast.models.cycle import CycleLengths, PeriodEpisode, UpcomingEvents
from cyclecast.services.constants import (
    FERTILE_DAYS_AFTER_OVULATION,
    FERTILE_DAYS_BEFORE_OVULATION,
    LUTEAL_PHASE_LENGTH,
    PREDICTION_HORIZON_CYCLES
)
from cyclecast.services.fertility import fertile_window
from cyclecast.services.utils import days_between

logger = Logger()

def latest_logged_episode(episodes: Sequence[PeriodEpisode]) -> Optional[PeriodEpisode]:
    """Return the most recent non-predicted episode, if any."""
    logged = [e for e in episodes if not e.predicted]
    return logged[-1] if logged else None

def next_period_start(anchor: PeriodEpisode, lengths: CycleLengths) -> date:
    """
    Calculate the first predicted start after an anchor episode.

    Args:
        anchor: Most recent logged episode
        lengths: Effective cycle and period lengths

    Returns:
        Predicted start date, always after the anchor's end

    Note:
        When the naive start (anchor start + cycle length) would fall on or
        inside the anchor episode, the prediction moves forward by whole
        cycles so start-to-start spacing stays a multiple of the cycle
        length. An ongoing episode is assumed to last at least the
        effective period length.
    """
    cycle = lengths.cycle_length
    anchor_end = anchor.end
    if anchor.ongoing:
        anchor_end = max(anchor_end, anchor.start + timedelta(days=lengths.period_length - 1))

    predicted_start = anchor.start + timedelta(days=cycle)
    if predicted_start <= anchor_end:
        cycles_covered = days_between(anchor.start, anchor_end) // cycle + 1
        predicted_start = anchor.start + timedelta(days=cycles_covered * cycle)
        logger.info(
            "Shifted prediction past overlapping period",
            extra={
                "anchor_start": str(anchor.start),
                "anchor_end": str(anchor_end),
                "predicted_start": str(predicted_start)
            }
        )
    return predicted_start

def predict_periods(
    episodes: Sequence[PeriodEpisode],
    lengths: CycleLengths,
    horizon_cycles: int = PREDICTION_HORIZON_CYCLES,
    fallback_start: Optional[date] = None,
    not_before: Optional[date] = None
) -> List[PeriodEpisode]:
    """
    Project future period episodes.

    Args:
        episodes: Logged episodes in chronological order
        lengths: Effective cycle and period lengths
        horizon_cycles: Number of predicted episodes to generate
        fallback_start: Assumed start of the current cycle when nothing has
            been logged; without it an empty log yields no predictions
        not_before: Skip whole cycles whose predicted period ends before this date

    Returns:
        List of PeriodEpisode objects with predicted=True, oldest first

    Example:
        >>> predicted = predict_periods(episodes, lengths, horizon_cycles=3)
        >>> [p.start for p in predicted]
    """
    anchor = latest_logged_episode(episodes)
    if anchor is not None:
        start = next_period_start(anchor, lengths)
    elif fallback_start is not None:
        start = fallback_start + timedelta(days=lengths.cycle_length)
    else:
        return []

    cycle = timedelta(days=lengths.cycle_length)
    period_span = timedelta(days=lengths.period_length - 1)

    if not_before is not None and start + period_span < not_before:
        # Stale anchor: jump straight to the first cycle still ahead
        overdue = days_between(start + period_span, not_before)
        start += cycle * ((overdue - 1) // lengths.cycle_length + 1)

    predicted = [
        PeriodEpisode(
            start=start + cycle * i,
            end=start + cycle * i + period_span,
            predicted=True
        )
        for i in range(horizon_cycles)
    ]

    logger.debug(
        "Predicted future periods",
        extra={
            "anchor_start": str(anchor.start) if anchor else None,
            "fallback_start": str(fallback_start) if fallback_start else None,
            "predicted_starts": [str(p.start) for p in predicted]
        }
    )
    return predicted

def upcoming_events(
    episodes: Sequence[PeriodEpisode],
    lengths: CycleLengths,
    today: Optional[date] = None,
    luteal_length: int = LUTEAL_PHASE_LENGTH,
    fertile_days_before: int = FERTILE_DAYS_BEFORE_OVULATION,
    fertile_days_after: int = FERTILE_DAYS_AFTER_OVULATION
) -> UpcomingEvents:
    """
    Summarise the next expected period and fertile window.

    Args:
        episodes: Logged episodes in chronological order
        lengths: Effective cycle and period lengths
        today: Reference date, defaults to the current date
        luteal_length: Days from ovulation to the end of the cycle
        fertile_days_before: Fertile days before the ovulation day
        fertile_days_after: Fertile days after the ovulation day

    Returns:
        UpcomingEvents; is_estimate is True when nothing has been logged and
        the projection starts from today using settings or defaults

    Example:
        >>> events = upcoming_events(episodes, lengths, today=date(2024, 2, 10))
        >>> print(f"Period in {events.days_until_next_period} days")
    """
    if today is None:
        today = date.today()

    is_estimate = latest_logged_episode(episodes) is None
    predicted = predict_periods(
        episodes,
        lengths,
        horizon_cycles=1,
        fallback_start=today if is_estimate else None,
        not_before=today
    )
    next_period = predicted[0]

    # Fertile window of the cycle leading into the next period, or of the
    # following cycle once that one has passed
    window = None
    for cycle_start in (next_period.start - timedelta(days=lengths.cycle_length), next_period.start):
        candidate = fertile_window(
            cycle_start, lengths, luteal_length, fertile_days_before, fertile_days_after
        )
        if candidate is not None and candidate[1] >= today:
            window = candidate
            break

    return UpcomingEvents(
        next_period_start=next_period.start,
        next_period_end=next_period.end,
        days_until_next_period=max(days_between(today, next_period.start), 0),
        fertile_window_start=window[0] if window else None,
        fertile_window_end=window[1] if window else None,
        days_until_fertile_window=max(days_between(today, window[0]), 0) if window else None,
        is_estimate=is_estimate
    )
