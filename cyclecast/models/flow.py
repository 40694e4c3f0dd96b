"""
Flow log model definitions for tracking daily menstrual flow.
"""
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from cyclecast.utils.logging import log_rejected_input, logger


class FlowIntensity(str, Enum):
    """
    Intensity of a logged flow day.
    """
    SPOTTING = "spotting"
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class FlowEntry(BaseModel):
    """
    A single dated flow entry as logged by the user.
    """
    model_config = ConfigDict(frozen=True)

    date: date
    intensity: FlowIntensity

    @field_validator("date", mode="before")
    @classmethod
    def _truncate_timestamp(cls, value: Any) -> Any:
        # Storage snapshots carry ISO timestamps, only the calendar day matters
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value

    @field_validator("intensity", mode="before")
    @classmethod
    def _normalize_intensity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def is_spotting(self) -> bool:
        """Spotting is tracked but never counts as period flow."""
        return self.intensity == FlowIntensity.SPOTTING


RawFlowRecord = Union[FlowEntry, Mapping[str, Any]]


class FlowLog:
    """
    Immutable, date-ordered view of a user's flow entries.

    Example:
        >>> log = FlowLog.from_records([{"date": "2024-01-01", "intensity": "medium"}])
        >>> log.is_logged_period(date(2024, 1, 1))
        True
    """

    def __init__(self, entries: Iterable[FlowEntry] = ()):
        by_date: Dict[date, FlowEntry] = {}
        for entry in entries:
            # Last write wins for duplicate days
            by_date[entry.date] = entry
        self._entries: Tuple[FlowEntry, ...] = tuple(
            by_date[d] for d in sorted(by_date)
        )
        self._by_date = by_date

    @classmethod
    def from_records(cls, records: Optional[Iterable[RawFlowRecord]]) -> "FlowLog":
        """
        Build a log from raw storage records, skipping malformed ones.

        Args:
            records: FlowEntry objects or mappings with "date" and "intensity"

        Returns:
            FlowLog containing every record that could be parsed
        """
        entries: List[FlowEntry] = []
        skipped = 0
        for record in records or ():
            if isinstance(record, FlowEntry):
                entries.append(record)
                continue
            try:
                entries.append(FlowEntry.model_validate(record))
            except PydanticValidationError as e:
                skipped += 1
                log_rejected_input(
                    logger,
                    "Skipping malformed flow record",
                    e,
                    extra={
                        "record": repr(record),
                        "errors": [err["msg"] for err in e.errors()],
                    }
                )
        if skipped:
            logger.info("Flow records skipped", extra={"skipped": skipped, "kept": len(entries)})
        return cls(entries)

    @property
    def entries(self) -> Tuple[FlowEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def entry_on(self, day: date) -> Optional[FlowEntry]:
        """Return the entry logged on a day, if any."""
        return self._by_date.get(day)

    def period_entries(self) -> List[FlowEntry]:
        """Return non-spotting entries in date order."""
        return [e for e in self._entries if not e.is_spotting]

    def is_logged_period(self, day: date) -> bool:
        entry = self._by_date.get(day)
        return entry is not None and not entry.is_spotting

    def is_spotting(self, day: date) -> bool:
        entry = self._by_date.get(day)
        return entry is not None and entry.is_spotting
