"""
Pytest configuration and shared fixtures.
"""
import pytest
from datetime import date, timedelta
from typing import Dict, List

from cyclecast.config import ENV_FIELDS, ENV_PREFIX, EngineConfig, reset_config
from cyclecast.models.flow import FlowEntry, FlowIntensity, FlowLog


def make_flow_days(start: date, days: int, intensity: str = "medium") -> List[Dict[str, str]]:
    """Raw storage records for consecutive flow days."""
    return [
        {"date": (start + timedelta(days=i)).isoformat(), "intensity": intensity}
        for i in range(days)
    ]


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Keep environment overrides from leaking between tests."""
    for suffix in ENV_FIELDS:
        monkeypatch.delenv(ENV_PREFIX + suffix, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def engine_config() -> EngineConfig:
    """Default engine configuration."""
    return EngineConfig()


@pytest.fixture
def two_period_records() -> List[Dict[str, str]]:
    """Two 5-day periods 28 days apart: Jan 1-5 and Jan 29-Feb 2, 2024."""
    return make_flow_days(date(2024, 1, 1), 5) + make_flow_days(date(2024, 1, 29), 5)


@pytest.fixture
def two_period_log(two_period_records) -> FlowLog:
    return FlowLog.from_records(two_period_records)


@pytest.fixture
def ongoing_records(two_period_records) -> List[Dict[str, str]]:
    """Two closed periods plus a third one started on Feb 26, 2024."""
    return two_period_records + [{"date": "2024-02-26", "intensity": "heavy"}]


@pytest.fixture
def regular_cycle_log() -> FlowLog:
    """Eight 4-day periods exactly 30 days apart starting Jan 1, 2024."""
    entries = [
        FlowEntry(date=date(2024, 1, 1) + timedelta(days=cycle * 30 + day), intensity=FlowIntensity.LIGHT)
        for cycle in range(8)
        for day in range(4)
    ]
    return FlowLog(entries)


@pytest.fixture
def flow_days():
    """Factory for raw records covering consecutive flow days."""
    return make_flow_days
