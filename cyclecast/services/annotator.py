"""
Calendar annotation service.

Composes clustering, length estimation, prediction and phase classification
into one per-day status record. The calendar grid, the today view and the
analytics screen all read from the same annotator so they can never
disagree about a day.

Typical usage:
    annotator = CalendarAnnotator(flow_records, settings, ongoing=True)
    today = annotator.status_for(date.today())
    month = annotator.annotate_month(2024, 2)
"""
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional, Union

from cyclecast.config import EngineConfig, get_config
from cyclecast.models.cycle import (
    CycleLengthPoint,
    CycleLengths,
    CycleSummary,
    PeriodEpisode,
    UpcomingEvents,
    UserSettings
)
from cyclecast.models.flow import FlowLog, RawFlowRecord
from cyclecast.models.phase import DayStatus
from cyclecast.services.clustering import cluster_episodes
from cyclecast.services.exceptions import ValidationError
from cyclecast.services.lengths import estimate_lengths, parse_settings
from cyclecast.services.phase import classify_phase, find_anchor
from cyclecast.services.prediction import predict_periods, upcoming_events
from cyclecast.services.statistics import calculate_cycle_summary, cycle_length_trend
from cyclecast.services.utils import days_between, iter_days, month_bounds
from cyclecast.utils.logging import logger


class CalendarAnnotator:
    """
    Per-day cycle status for one immutable snapshot of a user's data.

    With nothing logged the calendar carries no predicted periods, while
    upcoming() still projects an estimate from the given day.
    """

    def __init__(
        self,
        log: Union[FlowLog, Iterable[RawFlowRecord], None],
        settings: Union[UserSettings, Mapping[str, Any], None] = None,
        ongoing: bool = False,
        config: Optional[EngineConfig] = None
    ):
        """
        Derive episodes, lengths and predictions for a snapshot.

        Args:
            log: FlowLog or raw flow records from storage
            settings: User settings snapshot
            ongoing: Whether the latest cycle record has no end date yet
            config: Engine configuration, defaults to the shared one

        Raises:
            ValidationError: If settings has the wrong shape
        """
        self.config = config or get_config()
        self.log = log if isinstance(log, FlowLog) else FlowLog.from_records(log)
        self.settings = parse_settings(settings)

        self.episodes: List[PeriodEpisode] = cluster_episodes(
            self.log,
            ongoing=ongoing,
            max_gap_days=self.config.cluster_gap_days
        )
        self.lengths: CycleLengths = estimate_lengths(
            self.episodes,
            self.settings,
            max_gaps=self.config.max_cycle_gaps,
            default_cycle_length=self.config.default_cycle_length,
            default_period_length=self.config.default_period_length
        )
        self.predicted_episodes: List[PeriodEpisode] = predict_periods(
            self.episodes,
            self.lengths,
            horizon_cycles=self.config.horizon_cycles
        )

        logger.info(
            "Built calendar snapshot",
            extra={
                "entries": len(self.log),
                "episodes": len(self.episodes),
                "cycle_length": self.lengths.cycle_length,
                "period_length": self.lengths.period_length,
                "cycle_source": self.lengths.cycle_source.value,
                "period_source": self.lengths.period_source.value,
                "predicted": len(self.predicted_episodes)
            }
        )

    def status_for(self, day: date) -> DayStatus:
        """
        Get the status of a single day.

        Args:
            day: Calendar date, past, present or future

        Returns:
            DayStatus combining phase classification and display flags
        """
        result = classify_phase(
            day,
            self.log,
            self.episodes,
            self.predicted_episodes,
            self.lengths,
            luteal_length=self.config.luteal_length,
            fertile_days_before=self.config.fertile_days_before_ovulation,
            fertile_days_after=self.config.fertile_days_after_ovulation
        )
        entry = self.log.entry_on(day)
        anchor = find_anchor(day, self.episodes)

        return DayStatus(
            date=day,
            phase=result.phase,
            is_period=result.is_period,
            is_predicted_period=result.is_predicted_period,
            is_fertile=result.is_fertile,
            intensity=entry.intensity if entry else None,
            is_spotting=self.log.is_spotting(day),
            cycle_day=days_between(anchor.start, day) + 1 if anchor else None
        )

    def annotate_range(self, start: date, end: date) -> List[DayStatus]:
        """
        Get the status of every day in an inclusive date range.

        Raises:
            ValidationError: If start is after end
        """
        if start > end:
            raise ValidationError(f"Range start {start} is after end {end}")
        return [self.status_for(day) for day in iter_days(start, end)]

    def annotate_month(self, year: int, month: int) -> List[DayStatus]:
        """
        Get the status of every day in a calendar month.

        Example:
            >>> days = annotator.annotate_month(2024, 2)
            >>> len(days)
            29
        """
        try:
            first, last = month_bounds(year, month)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid month {year}-{month}") from e
        return self.annotate_range(first, last)

    def upcoming(self, today: Optional[date] = None) -> UpcomingEvents:
        """Next expected period and fertile window relative to today."""
        return upcoming_events(
            self.episodes,
            self.lengths,
            today=today,
            luteal_length=self.config.luteal_length,
            fertile_days_before=self.config.fertile_days_before_ovulation,
            fertile_days_after=self.config.fertile_days_after_ovulation
        )

    def summary(self) -> CycleSummary:
        return calculate_cycle_summary(self.episodes, self.lengths)

    def trend(self) -> List[CycleLengthPoint]:
        return cycle_length_trend(self.episodes)
