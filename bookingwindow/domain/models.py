"""
Domain models for working hours, booking policy and booking requests.

All times of day are UTC. Day-of-week indices follow the stored schedule
format: 0=Sunday, 6=Saturday.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from functools import cached_property
from typing import Dict, List, Mapping, Tuple, Union

import pendulum
from pendulum import Date, DateTime

WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

Timestamp = Union[str, datetime]


def weekday_index(day: date) -> int:
    """Return the day-of-week index with Sunday as 0."""
    return day.isoweekday() % 7


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[weekday_index(day)]


def parse_clock(value: "str | time | None") -> time | None:
    """
    Parse an "HH:MM" string into a time.

    Returns None for missing or malformed values instead of raising, so
    that bad stored data can be treated as closed.
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)
    if not isinstance(value, str):
        return None

    text = value.strip()
    parts = text.split(":")
    if len(parts) != 2 or not all(part.isdigit() and len(part) == 2 for part in parts):
        return None

    hour, minute = int(parts[0]), int(parts[1])
    if hour > 23 or minute > 59:
        return None
    return time(hour=hour, minute=minute)


def format_clock(value: time | None) -> str:
    return value.strftime("%H:%M") if value is not None else "--:--"


def hours_between(earlier: datetime, later: datetime) -> float:
    """Signed, exact number of hours from ``earlier`` to ``later``."""
    return (later.timestamp() - earlier.timestamp()) / 3600


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable UTC time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_hours(self) -> float:
        """Return the exact duration in fractional hours."""
        return hours_between(self.start, self.end)

    @property
    def start_date(self) -> date:
        return date(self.start.year, self.start.month, self.start.day)

    @property
    def end_date(self) -> date:
        return date(self.end.year, self.end.month, self.end.day)

    def spans_multiple_dates(self) -> bool:
        return self.start_date != self.end_date

    def inner_date_bounds(self) -> Tuple[Date, Date] | None:
        """
        First and last calendar date strictly between the start and end
        dates, or None if there are no such dates.
        """
        if (self.end_date - self.start_date).days < 2:
            return None
        return self.start.date().add(days=1), self.end.date().subtract(days=1)

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('YYYY-MM-DD HH:mm')} UTC"


@dataclass(frozen=True)
class DaySpec:
    """
    Opening hours for a single day.

    A spec only counts as open when it is flagged open and carries a
    well-formed same-day window (open_time < close_time).
    """
    is_open: bool = False
    open_time: time | None = None
    close_time: time | None = None

    @classmethod
    def from_strings(cls, is_open: bool, open_time: str | None, close_time: str | None) -> "DaySpec":
        return cls(
            is_open=bool(is_open),
            open_time=parse_clock(open_time),
            close_time=parse_clock(close_time),
        )

    def window(self) -> Tuple[time, time] | None:
        """Return (open, close) or None if the day is effectively closed."""
        if not self.is_open or self.open_time is None or self.close_time is None:
            return None
        if self.open_time >= self.close_time:
            return None
        return self.open_time, self.close_time

    def is_effectively_open(self) -> bool:
        return self.window() is not None


@dataclass(frozen=True)
class DateOverride:
    """Replaces the weekly schedule entry for one specific date."""
    date: date
    is_open: bool = False
    open_time: time | None = None
    close_time: time | None = None
    reason: str | None = None

    def as_day_spec(self) -> DaySpec:
        return DaySpec(
            is_open=self.is_open,
            open_time=self.open_time,
            close_time=self.close_time,
        )


@dataclass(frozen=True)
class ResolvedDay:
    """
    The effective opening hours of one calendar date.

    ``open_time`` and ``close_time`` are both None for a closed day and for
    an open day without time restriction (working hours disabled).
    """
    date: date
    is_open: bool
    open_time: time | None = None
    close_time: time | None = None
    source: str = "weekly"  # "weekly", "override" or "disabled"
    reason: str | None = None

    @property
    def weekday(self) -> str:
        return weekday_name(self.date)

    def is_restricted(self) -> bool:
        return self.open_time is not None and self.close_time is not None

    def contains(self, moment: time) -> bool:
        """Check if a time of day lies inside the open window (inclusive)."""
        if not self.is_open:
            return False
        if not self.is_restricted():
            return True
        return self.open_time <= moment <= self.close_time


@dataclass(frozen=True)
class WeeklySchedule:
    """Day-of-week (0=Sunday) to DaySpec mapping. Missing days are closed."""
    days: Mapping[int, DaySpec] = field(default_factory=dict)

    def __post_init__(self):
        invalid = [day for day in self.days if day not in range(7)]
        if invalid:
            raise ValueError(f"Weekday keys must be between 0 and 6, got {invalid}")

    def for_weekday(self, index: int) -> DaySpec:
        return self.days.get(index, DaySpec())

    def for_date(self, day: date) -> DaySpec:
        return self.for_weekday(weekday_index(day))


@dataclass(frozen=True)
class WorkingHoursConfig:
    """
    An organization's working hours: weekly schedule plus date overrides.

    If ``enabled`` is False every day resolves as open without time limits.
    """
    enabled: bool = False
    weekly_schedule: WeeklySchedule = field(default_factory=WeeklySchedule)
    overrides: Tuple[DateOverride, ...] = ()

    def __post_init__(self):
        ordered = tuple(sorted(self.overrides, key=lambda override: override.date))
        seen: set[date] = set()
        for override in ordered:
            if override.date in seen:
                raise ValueError(f"Duplicate override for date {override.date.isoformat()}")
            seen.add(override.date)
        object.__setattr__(self, "overrides", ordered)

    @cached_property
    def _overrides_by_date(self) -> Dict[date, DateOverride]:
        return {override.date: override for override in self.overrides}

    def override_for(self, day: date) -> DateOverride | None:
        return self._overrides_by_date.get(day)

    def resolve(self, day: date) -> ResolvedDay:
        """
        Resolve the effective opening hours for a date.

        An override for the exact date fully replaces the weekly entry,
        including its open flag.
        """
        day = date(day.year, day.month, day.day)
        if not self.enabled:
            return ResolvedDay(date=day, is_open=True, source="disabled")

        override = self.override_for(day)
        if override is not None:
            spec = override.as_day_spec()
            source, reason = "override", override.reason
        else:
            spec = self.weekly_schedule.for_date(day)
            source, reason = "weekly", None

        window = spec.window()
        if window is None:
            return ResolvedDay(date=day, is_open=False, source=source, reason=reason)

        return ResolvedDay(
            date=day,
            is_open=True,
            open_time=window[0],
            close_time=window[1],
            source=source,
            reason=reason,
        )

    def resolve_range(self, first_day: date, days: int) -> List[ResolvedDay]:
        """Resolve ``days`` consecutive dates starting at ``first_day``."""
        start = pendulum.date(first_day.year, first_day.month, first_day.day)
        return [self.resolve(start.add(days=offset)) for offset in range(days)]

    def count_closed_days(self, first_day: date, last_day: date) -> int:
        """
        Count the dates in [first_day, last_day] that resolve closed.

        The weekly schedule repeats every 7 days, so only overrides inside
        the range are looked at one by one.
        """
        if not self.enabled or last_day < first_day:
            return 0

        first = date(first_day.year, first_day.month, first_day.day)
        last = date(last_day.year, last_day.month, last_day.day)
        closed_weekdays = {
            index for index in range(7)
            if not self.weekly_schedule.for_weekday(index).is_effectively_open()
        }

        weeks, remainder = divmod((last - first).days + 1, 7)
        first_index = weekday_index(first)
        closed = weeks * len(closed_weekdays)
        closed += sum(
            1 for offset in range(remainder)
            if (first_index + offset) % 7 in closed_weekdays
        )

        for override in self.overrides:
            if first <= override.date <= last:
                closed_by_week = weekday_index(override.date) in closed_weekdays
                closed_by_override = not override.as_day_spec().is_effectively_open()
                closed += int(closed_by_override) - int(closed_by_week)
        return closed


@dataclass(frozen=True)
class BookingPolicy:
    """
    Organization-level booking rules.

    ``tags_required`` is carried along for callers but not evaluated here.
    """
    buffer_start_time: int = 0
    max_booking_length: int | None = None
    max_booking_length_skip_closed_days: bool = False
    tags_required: bool = False

    def __post_init__(self):
        if self.buffer_start_time < 0:
            raise ValueError(f"buffer_start_time must not be negative, got {self.buffer_start_time}")
        if self.max_booking_length is not None and self.max_booking_length <= 0:
            raise ValueError(f"max_booking_length must be positive, got {self.max_booking_length}")


@dataclass(frozen=True)
class BookingWindowRequest:
    """
    A proposed booking window for one organization.

    Timestamps may be ISO-8601 strings or datetimes; naive values are read
    as UTC. A missing evaluation instant means "now" at evaluation time.
    """
    organization_id: str
    requested_start: Timestamp
    requested_end: Timestamp
    evaluation_instant: Timestamp | None = None
