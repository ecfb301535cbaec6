"""
Schedule evaluation for time restrictions.
"""

import re
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from shared.errors import ConfigurationError
from .models import DayOfWeek, Schedule, ScheduleOutcome, ScheduleReason

_TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")
_OFFSET_PATTERN = re.compile(r"^(?:UTC|GMT|UT)?([+-])(\d{1,2})(?::?(\d{2}))?$")


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Resolve an IANA zone name or a fixed offset such as ``+02:00``."""
    text = (name or "").strip()
    if not text:
        raise ConfigurationError("Timezone is empty")

    if text == "Z":
        return timezone.utc

    offset = _OFFSET_PATTERN.match(text)
    if offset:
        sign, hours, minutes = offset.groups()
        delta = timedelta(hours=int(hours), minutes=int(minutes or 0))
        if delta > timedelta(hours=18):
            raise ConfigurationError(f"Timezone offset out of range: {text}", {"timezone": text})
        return timezone(-delta if sign == "-" else delta)

    try:
        return ZoneInfo(text)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise ConfigurationError(f"Unknown timezone: {text}", {"timezone": text}) from e


def parse_time_of_day(text: Optional[str]) -> time:
    """Parse ``HH:mm`` (or ``HH:mm:ss``) 24-hour text."""
    match = _TIME_PATTERN.match((text or "").strip())
    if not match:
        raise ConfigurationError(f"Invalid time of day: {text!r}", {"value": text})

    hours, minutes, seconds = match.groups()
    try:
        return time(int(hours), int(minutes), int(seconds or 0))
    except ValueError as e:
        raise ConfigurationError(f"Invalid time of day: {text!r}", {"value": text}) from e


def is_time_in_range(current: time, start: time, end: time) -> bool:
    """Inclusive range check; ``start > end`` wraps past midnight."""
    if start <= end:
        return start <= current <= end
    return current >= start or current <= end


class ScheduleEvaluator:
    """Decides whether an instant falls inside a schedule's window.

    Stateless. Each call works only on the ``now`` it is handed, so
    callers must read the clock once per authentication attempt.
    """

    def evaluate(self, now: datetime, schedule: Schedule) -> ScheduleOutcome:
        """Evaluate an instant against a schedule.

        Raises ConfigurationError for an unknown timezone or unparseable
        time bounds. A naive ``now`` is taken to be UTC.
        """
        zone = resolve_timezone(schedule.timezone_name)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        local = now.astimezone(zone)
        current_day = DayOfWeek(local.weekday())
        current_time = local.time()

        if current_day not in schedule.allowed_days:
            return ScheduleOutcome(
                allowed=False,
                reason=ScheduleReason.DAY_NOT_ALLOWED,
                current_day=current_day,
                current_time=current_time
            )

        start = parse_time_of_day(schedule.start_time)
        end = parse_time_of_day(schedule.end_time)

        if not is_time_in_range(current_time, start, end):
            return ScheduleOutcome(
                allowed=False,
                reason=ScheduleReason.TIME_NOT_ALLOWED,
                current_day=current_day,
                current_time=current_time
            )

        return ScheduleOutcome(
            allowed=True,
            reason=ScheduleReason.NONE,
            current_day=current_day,
            current_time=current_time
        )
