"""
Cycle and period length estimation.

Resolves the effective lengths used for every prediction through a tiered
fallback: logged episodes first, then the user's settings, then global
defaults. Each length is resolved independently, so a single logged period
can provide the period length while the cycle length still comes from the
settings.

Typical usage:
    lengths = estimate_lengths(episodes, settings)
    print(lengths.cycle_length, lengths.cycle_source)
"""
from typing import Any, List, Mapping, Sequence, Tuple, Union

from aws_lambda_powertools import Logger
from pydantic import ValidationError as PydanticValidationError

from cyclecast.models.cycle import CycleLengths, LengthSource, PeriodEpisode, UserSettings
from cyclecast.services.constants import (
    DEFAULT_CYCLE_LENGTH,
    DEFAULT_PERIOD_LENGTH,
    MAX_CYCLE_GAPS,
    MIN_LOGGED_PERIOD_DAYS
)
from cyclecast.services.exceptions import ValidationError
from cyclecast.services.utils import days_between, mean_days

logger = Logger()

SettingsInput = Union[UserSettings, Mapping[str, Any], None]

def parse_settings(settings: SettingsInput) -> UserSettings:
    """
    Coerce a settings snapshot into UserSettings.

    Args:
        settings: UserSettings, a storage mapping, or None

    Returns:
        UserSettings instance (empty when settings is None)

    Raises:
        ValidationError: If settings has the wrong shape
    """
    if settings is None:
        return UserSettings()
    if isinstance(settings, UserSettings):
        return settings
    if not isinstance(settings, Mapping):
        raise ValidationError(
            f"Settings must be a mapping or UserSettings, got {type(settings).__name__}"
        )
    try:
        return UserSettings.model_validate(settings)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid user settings: {e}") from e

def cycle_gaps(episodes: Sequence[PeriodEpisode]) -> List[int]:
    """
    Day differences between consecutive episode start dates, oldest first.

    Args:
        episodes: Logged episodes in chronological order

    Returns:
        List of start-to-start gaps in days
    """
    actual = [e for e in episodes if not e.predicted]
    return [
        days_between(previous.start, current.start)
        for previous, current in zip(actual, actual[1:])
    ]

def _resolve_cycle_length(
    episodes: Sequence[PeriodEpisode],
    settings: UserSettings,
    max_gaps: int,
    default: int
) -> Tuple[int, LengthSource]:
    gaps = cycle_gaps(episodes)
    if gaps:
        return mean_days(gaps[-max_gaps:]), LengthSource.LOGGED
    if settings.default_cycle_length:
        return settings.default_cycle_length, LengthSource.SETTINGS
    return default, LengthSource.DEFAULT

def _resolve_period_length(
    episodes: Sequence[PeriodEpisode],
    settings: UserSettings,
    default: int
) -> Tuple[int, LengthSource]:
    durations = [e.length for e in episodes if not e.predicted]
    if durations and sum(durations) >= MIN_LOGGED_PERIOD_DAYS:
        return mean_days(durations), LengthSource.LOGGED
    if settings.default_period_length:
        return settings.default_period_length, LengthSource.SETTINGS
    return default, LengthSource.DEFAULT

def estimate_lengths(
    episodes: Sequence[PeriodEpisode],
    settings: SettingsInput = None,
    max_gaps: int = MAX_CYCLE_GAPS,
    default_cycle_length: int = DEFAULT_CYCLE_LENGTH,
    default_period_length: int = DEFAULT_PERIOD_LENGTH
) -> CycleLengths:
    """
    Compute the effective cycle and period lengths.

    Args:
        episodes: Episodes in chronological order; predicted ones are ignored
        settings: User settings snapshot providing the second fallback tier
        max_gaps: Number of newest start-to-start gaps averaged
        default_cycle_length: Last-resort cycle length
        default_period_length: Last-resort period length

    Returns:
        CycleLengths clamped to period >= 1 and cycle >= period + 1

    Raises:
        ValidationError: If settings has the wrong shape

    Example:
        >>> lengths = estimate_lengths([], {"defaultCycleLength": 30})
        >>> lengths.cycle_length, lengths.cycle_source
        (30, <LengthSource.SETTINGS: 'settings'>)
    """
    user_settings = parse_settings(settings)

    cycle_length, cycle_source = _resolve_cycle_length(
        episodes, user_settings, max_gaps, default_cycle_length
    )
    period_length, period_source = _resolve_period_length(
        episodes, user_settings, default_period_length
    )

    # Guard against pathological logs, e.g. duplicate or out-of-order dates
    clamped_period = max(period_length, 1)
    clamped_cycle = max(cycle_length, clamped_period + 1)
    if (clamped_period, clamped_cycle) != (period_length, cycle_length):
        logger.warning(
            "Clamped degenerate cycle lengths",
            extra={
                "cycle_length": cycle_length,
                "period_length": period_length,
                "clamped_cycle_length": clamped_cycle,
                "clamped_period_length": clamped_period
            }
        )

    return CycleLengths(
        cycle_length=clamped_cycle,
        period_length=clamped_period,
        cycle_source=cycle_source,
        period_source=period_source
    )
