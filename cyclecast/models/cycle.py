"""
Cycle model definitions: period episodes, effective lengths and settings.
"""
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PeriodEpisode(BaseModel):
    """
    A contiguous run of logged (or forecast) period days.
    """
    model_config = ConfigDict(frozen=True)

    start: date
    end: date
    predicted: bool = False
    ongoing: bool = False  # Latest logged episode whose cycle is still open

    @model_validator(mode="after")
    def _check_bounds(self) -> "PeriodEpisode":
        if self.start > self.end:
            raise ValueError(f"Episode start {self.start} is after end {self.end}")
        return self

    @property
    def length(self) -> int:
        """Number of days in the episode, both ends included."""
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class LengthSource(str, Enum):
    """
    Data tier an effective length was resolved from.
    """
    LOGGED = "logged"
    SETTINGS = "settings"
    DEFAULT = "default"


class CycleLengths(BaseModel):
    """
    Effective cycle and period lengths used for every prediction.
    """
    model_config = ConfigDict(frozen=True)

    cycle_length: int = Field(..., ge=2)
    period_length: int = Field(..., ge=1)
    cycle_source: LengthSource = LengthSource.DEFAULT
    period_source: LengthSource = LengthSource.DEFAULT

    @model_validator(mode="after")
    def _check_lengths(self) -> "CycleLengths":
        if self.cycle_length < self.period_length + 1:
            raise ValueError("cycle_length must be at least period_length + 1")
        return self

    def ovulation_day(self, luteal_length: int) -> int:
        """Offset of the estimated ovulation day from the cycle start."""
        return self.cycle_length - luteal_length


class UserSettings(BaseModel):
    """
    Read-only snapshot of the user's cycle preferences.

    Accepts both snake_case and the camelCase keys used by storage. A value
    of 0 means the user never set it.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    default_cycle_length: Optional[int] = Field(None, alias="defaultCycleLength", ge=0)
    default_period_length: Optional[int] = Field(None, alias="defaultPeriodLength", ge=0)

    @field_validator("default_cycle_length", "default_period_length")
    @classmethod
    def _zero_means_unset(cls, value: Optional[int]) -> Optional[int]:
        return value or None


class UpcomingEvents(BaseModel):
    """
    Next period and fertile window for upcoming-events displays.
    """
    next_period_start: Optional[date] = None
    next_period_end: Optional[date] = None
    days_until_next_period: Optional[int] = None
    fertile_window_start: Optional[date] = None
    fertile_window_end: Optional[date] = None
    days_until_fertile_window: Optional[int] = None
    is_estimate: bool = False


class CycleLengthPoint(BaseModel):
    """
    One bar of the cycle length trend chart.
    """
    cycle_start: date
    days: int

    @property
    def month_label(self) -> str:
        return self.cycle_start.strftime("%b")


class CycleSummary(BaseModel):
    """
    Figures shown on the cycle statistics card.
    """
    average_cycle_length: int
    average_period_length: int
    tracked_cycles: int
    last_period_start: Optional[date] = None
    cycle_source: LengthSource
    period_source: LengthSource
