"""
Time restriction package.

Decides whether an instant falls inside an allowed weekly window: a set of
days plus a daily ``HH:mm`` range, in a named timezone. Ranges whose end
is earlier than their start wrap past midnight (``22:00`` to ``06:00``).
"""

from .models import (
    DayOfWeek, Schedule, ScheduleOutcome, ScheduleReason,
    ALL_DAYS, DEFAULT_TIMEZONE, DEFAULT_ALLOWED_DAYS, DEFAULT_START_TIME, DEFAULT_END_TIME,
    parse_allowed_days, invalid_day_names,
)
from .evaluator import ScheduleEvaluator, resolve_timezone, parse_time_of_day, is_time_in_range

__all__ = [
    "DayOfWeek",
    "Schedule",
    "ScheduleOutcome",
    "ScheduleReason",
    "ALL_DAYS",
    "DEFAULT_TIMEZONE",
    "DEFAULT_ALLOWED_DAYS",
    "DEFAULT_START_TIME",
    "DEFAULT_END_TIME",
    "parse_allowed_days",
    "invalid_day_names",
    "ScheduleEvaluator",
    "resolve_timezone",
    "parse_time_of_day",
    "is_time_in_range",
]
