"""
Service module for classifying calendar dates into cycle phases.

This module provides functionality for finding the period a date belongs to
and mapping its offset from that period onto the four cycle phases. Logged
flow always takes precedence over predictions, and predictions take
precedence over arithmetic on the anchor period.

Typical usage:
    >>> result = classify_phase(target_date, log, episodes, predicted, lengths)
    >>> print(result.phase.value, result.is_fertile)
"""
from datetime import date
from typing import Iterable, Optional, Sequence, Union

from cyclecast.models.cycle import CycleLengths, PeriodEpisode
from cyclecast.models.flow import FlowEntry, FlowLog
from cyclecast.models.phase import CyclePhase, PhaseResult
from cyclecast.services.constants import (
    FERTILE_DAYS_AFTER_OVULATION,
    FERTILE_DAYS_BEFORE_OVULATION,
    LUTEAL_PHASE_LENGTH,
    OVULATION_SPREAD_DAYS
)
from cyclecast.services.fertility import is_fertile
from cyclecast.services.utils import days_between

def find_anchor(day: date, episodes: Sequence[PeriodEpisode]) -> Optional[PeriodEpisode]:
    """
    Find the most recent logged episode starting on or before a date.

    Args:
        day: Date to find the anchor for
        episodes: Episodes in chronological order; predicted ones are ignored

    Returns:
        The anchor episode, or None if no logged episode starts by that date
    """
    anchor = None
    for episode in episodes:
        if episode.predicted:
            continue
        if episode.start > day:
            break
        anchor = episode
    return anchor

def phase_for_offset(
    offset: int,
    lengths: CycleLengths,
    luteal_length: int = LUTEAL_PHASE_LENGTH
) -> CyclePhase:
    """
    Map a day offset from the anchor start onto a cycle phase.

    Args:
        offset: Days since the anchor period started (0 on the first day)
        lengths: Effective cycle and period lengths
        luteal_length: Days from ovulation to the end of the cycle

    Returns:
        CyclePhase for that offset

    Example:
        >>> phase_for_offset(14, CycleLengths(cycle_length=28, period_length=5))
        <CyclePhase.OVULATION: 'ovulation'>
    """
    ovulation_day = lengths.ovulation_day(luteal_length)

    # A full cycle elapsed without a newer period: stay in luteal rather
    # than rolling into an unconfirmed cycle
    if offset >= lengths.cycle_length:
        return CyclePhase.LUTEAL
    if offset < lengths.period_length:
        return CyclePhase.PERIOD
    if offset < ovulation_day - OVULATION_SPREAD_DAYS:
        return CyclePhase.FOLLICULAR
    if offset <= ovulation_day + OVULATION_SPREAD_DAYS:
        return CyclePhase.OVULATION
    return CyclePhase.LUTEAL

def classify_phase(
    day: date,
    log: Union[FlowLog, Iterable[FlowEntry]],
    episodes: Sequence[PeriodEpisode],
    predicted: Sequence[PeriodEpisode],
    lengths: CycleLengths,
    luteal_length: int = LUTEAL_PHASE_LENGTH,
    fertile_days_before: int = FERTILE_DAYS_BEFORE_OVULATION,
    fertile_days_after: int = FERTILE_DAYS_AFTER_OVULATION
) -> PhaseResult:
    """
    Determine the cycle phase for an arbitrary date.

    Args:
        day: Date to classify (past, present or future)
        log: Logged flow entries
        episodes: Logged episodes in chronological order
        predicted: Predicted episodes
        lengths: Effective cycle and period lengths
        luteal_length: Days from ovulation to the end of the cycle
        fertile_days_before: Fertile days before the ovulation day
        fertile_days_after: Fertile days after the ovulation day

    Returns:
        PhaseResult for the date

    Note:
        Decision order, first match wins:
        1. Logged non-spotting flow -> period
        2. Inside a predicted episode -> predicted period
        3. No anchor episode -> follicular
        4. Offset arithmetic from the anchor start
        A period day is never reported as fertile.
    """
    if not isinstance(log, FlowLog):
        log = FlowLog(log)

    if log.is_logged_period(day):
        return PhaseResult(phase=CyclePhase.PERIOD, is_period=True)

    if any(episode.contains(day) for episode in predicted):
        return PhaseResult(phase=CyclePhase.PERIOD, is_predicted_period=True)

    anchor = find_anchor(day, episodes)
    if anchor is None:
        return PhaseResult(phase=CyclePhase.FOLLICULAR)

    phase = phase_for_offset(days_between(anchor.start, day), lengths, luteal_length)
    fertile = phase != CyclePhase.PERIOD and is_fertile(
        day,
        anchor.start,
        lengths.cycle_length,
        lengths.period_length,
        luteal_length,
        fertile_days_before,
        fertile_days_after
    )
    return PhaseResult(phase=phase, is_fertile=fertile)
