from datetime import date, timedelta

from cyclecast.models.phase import CyclePhase
from cyclecast.services.annotator import CalendarAnnotator


def test_cycle_day_with_future_logged_period_day(flow_days):
    """
    Regression test:
    When the user logs every period day up to the expected end (including a
    day after 'today'), the cycle day must be counted from the FIRST day of
    the contiguous block, not from the last logged day.

      Period logged 2025-08-21 .. 2025-08-25
      Today = 2025-08-24
      Cycle day = (24 - 21) + 1 = 4, still a logged period day
    """
    start = date(2025, 8, 21)
    annotator = CalendarAnnotator(flow_days(start, 5))

    status = annotator.status_for(date(2025, 8, 24))

    assert status.cycle_day == 4
    assert status.phase == CyclePhase.PERIOD
    assert status.is_period
    assert annotator.episodes[0].length == 5


def test_cycle_day_across_small_gap(flow_days):
    """A one-day gap inside a period does not restart the cycle day count."""
    records = flow_days(date(2025, 8, 21), 2) + flow_days(date(2025, 8, 24), 2)
    annotator = CalendarAnnotator(records)

    assert len(annotator.episodes) == 1
    assert annotator.status_for(date(2025, 8, 25)).cycle_day == 5
    assert annotator.status_for(date(2025, 8, 21) + timedelta(days=27)).cycle_day == 28
