"""
Period clustering service.

Groups scattered daily flow entries into discrete period episodes. Users
rarely log every single day of a period, so entries separated by short gaps
are merged into the same episode.

Typical usage:
    log = FlowLog.from_records(records)
    episodes = cluster_episodes(log, ongoing=latest_cycle.end_date is None)
"""
from typing import Iterable, List

from aws_lambda_powertools import Logger

from cyclecast.models.cycle import PeriodEpisode
from cyclecast.models.flow import FlowEntry
from cyclecast.services.constants import CLUSTER_GAP_DAYS
from cyclecast.services.utils import days_between

logger = Logger()

def cluster_episodes(
    entries: Iterable[FlowEntry],
    ongoing: bool = False,
    max_gap_days: int = CLUSTER_GAP_DAYS
) -> List[PeriodEpisode]:
    """
    Group flow entries into chronologically ordered period episodes.

    Args:
        entries: Flow entries in any order (a FlowLog works too)
        ongoing: Whether the caller's latest cycle record is still open
        max_gap_days: Largest gap in days still considered the same episode

    Returns:
        List of non-overlapping PeriodEpisode objects, oldest first

    Note:
        Spotting never forms or extends an episode. The ongoing flag is only
        ever applied to the most recent episode and is never inferred from
        gaps, because a period may simply be mid-way through logging.

    Example:
        >>> episodes = cluster_episodes(log, ongoing=True)
        >>> episodes[-1].ongoing
        True
    """
    period_dates = sorted({e.date for e in entries if not e.is_spotting})
    if not period_dates:
        return []

    episodes: List[PeriodEpisode] = []
    episode_start = period_dates[0]
    last_date = period_dates[0]

    for current in period_dates[1:]:
        if days_between(last_date, current) <= max_gap_days:
            last_date = current
        else:
            # Gap too large, close the current episode and start a new one
            episodes.append(PeriodEpisode(start=episode_start, end=last_date))
            episode_start = current
            last_date = current

    episodes.append(PeriodEpisode(start=episode_start, end=last_date, ongoing=ongoing))

    logger.debug(
        "Clustered flow entries into episodes",
        extra={
            "period_days": len(period_dates),
            "episodes": len(episodes),
            "ongoing": ongoing
        }
    )
    return episodes
