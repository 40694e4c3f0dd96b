"""
Statistics calculation service for cycle tracking data.

This module provides the figures behind the analytics screen: the cycle
length trend chart and the summary card.
"""
from typing import List, Sequence

from aws_lambda_powertools import Logger

from cyclecast.models.cycle import CycleLengthPoint, CycleLengths, CycleSummary, PeriodEpisode
from cyclecast.services.constants import TREND_CYCLES
from cyclecast.services.utils import days_between

logger = Logger()

def cycle_length_trend(
    episodes: Sequence[PeriodEpisode],
    limit: int = TREND_CYCLES
) -> List[CycleLengthPoint]:
    """
    Build the cycle length trend from the newest inter-episode gaps.

    Args:
        episodes: Episodes in chronological order; predicted ones are ignored
        limit: Maximum number of gaps to include

    Returns:
        Oldest-to-newest list of CycleLengthPoint, one per positive gap,
        labelled with the start of the cycle it measures

    Example:
        >>> trend = cycle_length_trend(episodes)
        >>> [(p.month_label, p.days) for p in trend]
        [('Jan', 28), ('Jan', 28)]
    """
    logged = [e for e in episodes if not e.predicted]
    points = [
        CycleLengthPoint(cycle_start=previous.start, days=days_between(previous.start, current.start))
        for previous, current in zip(logged, logged[1:])
    ]
    points = [p for p in points if p.days > 0]
    return points[-limit:] if limit > 0 else []

def calculate_cycle_summary(
    episodes: Sequence[PeriodEpisode],
    lengths: CycleLengths
) -> CycleSummary:
    """
    Calculate the statistics card figures.

    Args:
        episodes: Episodes in chronological order; predicted ones are ignored
        lengths: Effective lengths as resolved by the length estimator

    Returns:
        CycleSummary with averages, tracked cycle count and last period start
    """
    logged = [e for e in episodes if not e.predicted]
    summary = CycleSummary(
        average_cycle_length=lengths.cycle_length,
        average_period_length=lengths.period_length,
        tracked_cycles=len(logged),
        last_period_start=logged[-1].start if logged else None,
        cycle_source=lengths.cycle_source,
        period_source=lengths.period_source
    )
    logger.info(
        "Calculated cycle summary",
        extra={
            "tracked_cycles": summary.tracked_cycles,
            "cycle_source": summary.cycle_source.value,
            "period_source": summary.period_source.value
        }
    )
    return summary
