"""Departure schedule model: day-type, clock time and headway wait multiplier.

The multiplier scales the expected wait for a vehicle (half the headway).
Factors compound multiplicatively, starting from 1.0:

    saturday            x1.08
    sunday              x1.12
    weekday peak        x0.9   (07:00-09:00, 17:00-20:00)
    late night          x1.25  (23:00-05:00)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from zoneinfo import ZoneInfo

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
DEFAULT_TIME = "08:30"
DEFAULT_BUCKET_MINUTES = 30

SATURDAY_FACTOR = 1.08
SUNDAY_FACTOR = 1.12
WEEKDAY_PEAK_FACTOR = 0.9
LATE_NIGHT_FACTOR = 1.25

# Half-open [start, end) hour ranges
PEAK_HOURS = ((7, 9), (17, 20))
LATE_NIGHT_START = 23
LATE_NIGHT_END = 5


class DayType(StrEnum):
    """Coarse calendar classification for transit schedules."""

    WEEKDAY = "weekday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class DepartureMode(StrEnum):
    """Whether to use the current clock or an explicit day/time."""

    NOW = "now"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ScheduleContext:
    """Resolved departure: day-type, ``HH:MM`` time and wait multiplier."""

    day_type: DayType
    time: str
    wait_multiplier: float
    time_bucket: int  # minute-of-day floored to the bucket width


def normalize_day_type(value: object) -> DayType:
    """Map arbitrary input to a DayType; unknown values become weekday."""
    if value in (DayType.SATURDAY.value, DayType.SUNDAY.value):
        return DayType(value)
    return DayType.WEEKDAY


def normalize_time(value: object, default: str = DEFAULT_TIME) -> str:
    """Return ``value`` if it is a valid 24h ``HH:MM`` string, else ``default``."""
    matched = TIME_PATTERN.match(str(value or ""))
    if not matched:
        return default
    return f"{matched.group(1)}:{matched.group(2)}"


def day_type_for(moment: datetime) -> DayType:
    """Day-type of a calendar date (Mon=0 ... Sun=6)."""
    weekday = moment.weekday()
    if weekday == 6:
        return DayType.SUNDAY
    if weekday == 5:
        return DayType.SATURDAY
    return DayType.WEEKDAY


def wait_multiplier(day_type: DayType, hour: int) -> float:
    """Compound the schedule factors for a day-type and hour of day."""
    multiplier = 1.0
    if day_type == DayType.SATURDAY:
        multiplier *= SATURDAY_FACTOR
    if day_type == DayType.SUNDAY:
        multiplier *= SUNDAY_FACTOR
    if day_type == DayType.WEEKDAY and any(start <= hour < end for start, end in PEAK_HOURS):
        multiplier *= WEEKDAY_PEAK_FACTOR
    if hour >= LATE_NIGHT_START or hour < LATE_NIGHT_END:
        multiplier *= LATE_NIGHT_FACTOR
    return multiplier


def time_bucket(time: str, bucket_minutes: int = DEFAULT_BUCKET_MINUTES) -> int:
    """Floor the minute-of-day of ``time`` to a multiple of ``bucket_minutes``."""
    hours, minutes = (int(part) for part in time.split(":"))
    minute_of_day = hours * 60 + minutes
    return minute_of_day - minute_of_day % bucket_minutes


def resolve_schedule(
    departure_mode: DepartureMode,
    day_type: DayType,
    time: str,
    *,
    now: datetime | None = None,
    timezone: str = "Asia/Seoul",
    bucket_minutes: int = DEFAULT_BUCKET_MINUTES,
) -> ScheduleContext:
    """Resolve a requested departure into a concrete ScheduleContext.

    For ``now`` departures the day-type and time come from the wall clock in
    ``timezone`` (or from ``now`` when given); ``custom`` departures use the
    requested values unchanged.
    """
    if departure_mode == DepartureMode.NOW:
        moment = now or datetime.now(ZoneInfo(timezone))
        day_type = day_type_for(moment)
        time = f"{moment.hour:02d}:{moment.minute:02d}"

    hour = int(time.split(":")[0])
    return ScheduleContext(
        day_type=day_type,
        time=time,
        wait_multiplier=wait_multiplier(day_type, hour),
        time_bucket=time_bucket(time, bucket_minutes),
    )
