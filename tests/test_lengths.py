"""Tests for tiered cycle and period length estimation."""
from datetime import date

import pytest

from cyclecast.models.cycle import LengthSource, PeriodEpisode, UserSettings
from cyclecast.models.flow import FlowLog
from cyclecast.services.clustering import cluster_episodes
from cyclecast.services.exceptions import ValidationError
from cyclecast.services.lengths import cycle_gaps, estimate_lengths, parse_settings

def episode(start, end, **kwargs) -> PeriodEpisode:
    return PeriodEpisode(start=start, end=end, **kwargs)

def test_two_logged_periods(two_period_log):
    """Test lengths come from logs when two periods are logged."""
    lengths = estimate_lengths(cluster_episodes(two_period_log))

    assert lengths.cycle_length == 28
    assert lengths.period_length == 5
    assert lengths.cycle_source == LengthSource.LOGGED
    assert lengths.period_source == LengthSource.LOGGED

def test_single_entry_uses_defaults():
    """Test a lone flow day falls back to the global defaults."""
    log = FlowLog.from_records([{"date": "2024-03-10", "intensity": "light"}])

    lengths = estimate_lengths(cluster_episodes(log))

    assert lengths.cycle_length == 28
    assert lengths.period_length == 5
    assert lengths.cycle_source == LengthSource.DEFAULT
    assert lengths.period_source == LengthSource.DEFAULT

def test_settings_only():
    """Test settings provide both lengths when nothing is logged."""
    lengths = estimate_lengths([], {"defaultCycleLength": 30, "defaultPeriodLength": 6})

    assert lengths.cycle_length == 30
    assert lengths.period_length == 6
    assert lengths.cycle_source == LengthSource.SETTINGS
    assert lengths.period_source == LengthSource.SETTINGS

def test_empty_log_defaults():
    """Test an empty log always yields the default lengths."""
    lengths = estimate_lengths([])

    assert (lengths.cycle_length, lengths.period_length) == (28, 5)

def test_single_period_mixes_tiers():
    """Test one logged period gives the period length while cycle length falls back."""
    episodes = [episode(date(2024, 1, 1), date(2024, 1, 4))]

    lengths = estimate_lengths(episodes, UserSettings(default_cycle_length=32))

    assert lengths.cycle_length == 32
    assert lengths.cycle_source == LengthSource.SETTINGS
    assert lengths.period_length == 4
    assert lengths.period_source == LengthSource.LOGGED

def test_fallback_never_skips_settings():
    """Test removing logs falls back to settings, never straight to defaults."""
    settings = {"defaultCycleLength": 35, "defaultPeriodLength": 7}
    full = [
        episode(date(2024, 1, 1), date(2024, 1, 5)),
        episode(date(2024, 1, 30), date(2024, 2, 3)),
    ]

    with_logs = estimate_lengths(full, settings)
    one_period = estimate_lengths(full[:1], settings)
    no_logs = estimate_lengths([], settings)
    nothing = estimate_lengths([], None)

    assert with_logs.cycle_source == LengthSource.LOGGED
    assert one_period.cycle_source == LengthSource.SETTINGS
    assert one_period.cycle_length == 35
    assert no_logs.period_source == LengthSource.SETTINGS
    assert no_logs.period_length == 7
    assert nothing.cycle_source == LengthSource.DEFAULT

def test_zero_settings_mean_unset():
    """Test a zero in settings is treated as not configured."""
    lengths = estimate_lengths([], {"defaultCycleLength": 0, "defaultPeriodLength": None})

    assert lengths.cycle_source == LengthSource.DEFAULT
    assert lengths.period_source == LengthSource.DEFAULT

def test_cycle_average_uses_newest_six_gaps():
    """Test only the newest six start-to-start gaps are averaged."""
    starts = [
        date(2023, 1, 1),   # 60-day gap to the next start, must be ignored
        date(2023, 3, 2),
        date(2023, 3, 30),  # then six 28-day gaps
        date(2023, 4, 27),
        date(2023, 5, 25),
        date(2023, 6, 22),
        date(2023, 7, 20),
        date(2023, 8, 17),
    ]
    episodes = [episode(s, s) for s in starts]

    assert cycle_gaps(episodes)[0] == 60
    lengths = estimate_lengths(episodes)

    assert lengths.cycle_length == 28

def test_cycle_average_rounds_half_up():
    """Test averages are rounded to whole days, halves up."""
    episodes = [
        episode(date(2024, 1, 1), date(2024, 1, 4)),
        episode(date(2024, 1, 29), date(2024, 2, 1)),   # 28 days
        episode(date(2024, 2, 27), date(2024, 3, 1)),   # 29 days
    ]

    assert estimate_lengths(episodes).cycle_length == 29

def test_ongoing_period_counts_toward_period_average():
    """Test every logged episode, including an open one, feeds the period average."""
    episodes = [
        episode(date(2024, 1, 1), date(2024, 1, 5)),
        episode(date(2024, 1, 29), date(2024, 2, 2)),
        episode(date(2024, 2, 26), date(2024, 2, 26), ongoing=True),
    ]

    lengths = estimate_lengths(episodes)

    # (5 + 5 + 1) / 3 rounds to 4
    assert lengths.period_length == 4
    assert lengths.cycle_length == 28

def test_predicted_episodes_are_ignored():
    """Test forecast episodes never feed the averages."""
    episodes = [
        episode(date(2024, 1, 1), date(2024, 1, 3)),
        episode(date(2024, 1, 20), date(2024, 1, 30), predicted=True),
    ]

    lengths = estimate_lengths(episodes)

    assert lengths.period_length == 3
    assert lengths.cycle_source == LengthSource.DEFAULT

def test_degenerate_cycle_is_clamped():
    """Test out-of-order episodes cannot produce a non-positive cycle."""
    episodes = [
        episode(date(2024, 1, 10), date(2024, 1, 15)),
        episode(date(2024, 1, 1), date(2024, 1, 2)),
    ]

    lengths = estimate_lengths(episodes)

    assert lengths.period_length == 4
    assert lengths.cycle_length == 5

def test_settings_shorter_than_period_are_clamped():
    """Test a cycle shorter than the period is raised to period + 1."""
    lengths = estimate_lengths([], {"defaultCycleLength": 3, "defaultPeriodLength": 6})

    assert lengths.period_length == 6
    assert lengths.cycle_length == 7

@pytest.mark.parametrize("settings", [
    "28",
    ["defaultCycleLength", 28],
    {"defaultCycleLength": "twenty"},
    {"defaultCycleLength": -3},
    {"defaultPeriodLength": 4.5},
])
def test_malformed_settings_raise_validation_error(settings):
    """Test settings of the wrong shape are a programmer error."""
    with pytest.raises(ValidationError):
        estimate_lengths([], settings)

def test_parse_settings_accepts_snake_case():
    """Test both storage camelCase and snake_case keys are understood."""
    settings = parse_settings({"default_cycle_length": 31})

    assert settings.default_cycle_length == 31
    assert parse_settings(None) == UserSettings()
