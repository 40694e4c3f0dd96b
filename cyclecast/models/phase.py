"""
Phase model definition for menstrual cycle phases.
"""
from enum import Enum
from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict

from cyclecast.models.flow import FlowIntensity

class CyclePhase(str, Enum):
    """
    Menstrual cycle phases.
    """
    PERIOD = "period"
    FOLLICULAR = "follicular"
    OVULATION = "ovulation"
    LUTEAL = "luteal"

class PhaseResult(BaseModel):
    """
    Classification of a single calendar date.
    """
    model_config = ConfigDict(frozen=True)

    phase: CyclePhase
    is_period: bool = False
    is_predicted_period: bool = False
    is_fertile: bool = False

class DayStatus(PhaseResult):
    """
    Per-day record consumed by calendar, today and analytics views.
    """
    date: date
    intensity: Optional[FlowIntensity] = None
    is_spotting: bool = False
    cycle_day: Optional[int] = None  # 1-based, None without an anchor

    @property
    def phase_result(self) -> PhaseResult:
        """Strip the display fields, leaving only the classification."""
        return PhaseResult(
            phase=self.phase,
            is_period=self.is_period,
            is_predicted_period=self.is_predicted_period,
            is_fertile=self.is_fertile
        )
