"""
Schedule data models for the Restrictions Service.
"""

from typing import FrozenSet, List, Optional
from dataclasses import dataclass, field
from datetime import time
from enum import Enum, IntEnum


class DayOfWeek(IntEnum):
    """Days of the week, numbered like ``datetime.weekday()``."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


ALL_DAYS: FrozenSet[DayOfWeek] = frozenset(DayOfWeek)

DEFAULT_TIMEZONE = "UTC"
DEFAULT_START_TIME = "00:00"
DEFAULT_END_TIME = "23:59"
DEFAULT_ALLOWED_DAYS = ",".join(day.name for day in DayOfWeek)


class ScheduleReason(str, Enum):
    """Machine-readable reason for a schedule decision."""
    NONE = "none"
    DAY_NOT_ALLOWED = "day_not_allowed"
    TIME_NOT_ALLOWED = "time_not_allowed"

    @property
    def description(self) -> Optional[str]:
        if self is ScheduleReason.DAY_NOT_ALLOWED:
            return "Time/Date restriction: Day not allowed"
        if self is ScheduleReason.TIME_NOT_ALLOWED:
            return "Time/Date restriction: Time not allowed"
        return None


def parse_allowed_days(text: Optional[str]) -> FrozenSet[DayOfWeek]:
    """Parse comma-separated day names.

    Names are matched case-insensitively. Unknown names are dropped, so a
    list with nothing recognisable yields an empty set and every day is
    refused.
    """
    if not text:
        return frozenset()

    days = set()
    for name in text.split(","):
        day = DayOfWeek.__members__.get(name.strip().upper())
        if day is not None:
            days.add(day)
    return frozenset(days)


def invalid_day_names(text: Optional[str]) -> List[str]:
    """Return the entries of a day list that are not day names."""
    if not text:
        return []
    return [
        name.strip() for name in text.split(",")
        if name.strip().upper() not in DayOfWeek.__members__
    ]


@dataclass(frozen=True)
class Schedule:
    """An allowed access window.

    ``start_time`` and ``end_time`` stay as ``HH:mm`` text; the evaluator
    parses them and reports unusable values as configuration errors.
    """
    timezone_name: str = DEFAULT_TIMEZONE
    allowed_days: FrozenSet[DayOfWeek] = ALL_DAYS
    start_time: str = DEFAULT_START_TIME
    end_time: str = DEFAULT_END_TIME

    @classmethod
    def from_text(
        cls,
        timezone_name: str = DEFAULT_TIMEZONE,
        allowed_days: str = DEFAULT_ALLOWED_DAYS,
        start_time: str = DEFAULT_START_TIME,
        end_time: str = DEFAULT_END_TIME,
    ) -> "Schedule":
        return cls(
            timezone_name=timezone_name,
            allowed_days=parse_allowed_days(allowed_days),
            start_time=start_time,
            end_time=end_time,
        )

    @property
    def allowed_day_names(self) -> str:
        return ",".join(day.name for day in sorted(self.allowed_days))

    @property
    def time_range(self) -> str:
        return f"{self.start_time} - {self.end_time}"


@dataclass(frozen=True)
class ScheduleOutcome:
    """Result of evaluating an instant against a schedule."""
    allowed: bool
    reason: ScheduleReason = ScheduleReason.NONE
    current_day: Optional[DayOfWeek] = None
    current_time: Optional[time] = field(default=None)
