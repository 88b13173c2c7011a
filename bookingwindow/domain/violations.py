"""
Violation types and the validation verdict returned by the evaluator.
"""

from dataclasses import dataclass
from datetime import date, time
from typing import ClassVar, List, Tuple, Union

from .models import format_clock, weekday_name


def _format_hours(value: float) -> str:
    """Render an hour count without a trailing .0 for whole numbers."""
    rounded = round(value, 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.2f}"


@dataclass(frozen=True)
class InvalidRange:
    """The requested timestamps are malformed or not in order. Fatal."""
    reason: str

    kind: ClassVar[str] = "invalid_range"

    def describe(self) -> str:
        return self.reason


@dataclass(frozen=True)
class OutsideWorkingHours:
    """
    The booking touches a date outside of its opening hours.

    ``open_time`` and ``close_time`` are None when the date is closed.
    """
    date: date
    open_time: time | None = None
    close_time: time | None = None
    reason: str | None = None

    kind: ClassVar[str] = "outside_working_hours"

    @property
    def weekday(self) -> str:
        return weekday_name(self.date)

    @property
    def is_closed(self) -> bool:
        return self.open_time is None or self.close_time is None

    def describe(self) -> str:
        day_label = f"{self.weekday} ({self.date.isoformat()})"
        if self.is_closed:
            message = f"Organization is closed on {day_label}"
            if self.reason:
                message += f": {self.reason}"
            return message
        return (
            f"Booking must be within working hours on {day_label}: "
            f"{format_clock(self.open_time)} - {format_clock(self.close_time)}"
        )


@dataclass(frozen=True)
class BufferViolation:
    """The booking starts sooner than the minimum advance notice allows."""
    required_buffer_hours: int
    actual_lead_hours: float

    kind: ClassVar[str] = "buffer"

    def describe(self) -> str:
        return f"Booking must be made at least {self.required_buffer_hours} hours in advance"


@dataclass(frozen=True)
class MaxLengthExceeded:
    """
    The booking is longer than the maximum booking length.

    ``effective_hours`` equals ``actual_hours`` unless closed days are
    excluded from the count.
    """
    max_hours: int
    actual_hours: float
    effective_hours: float

    kind: ClassVar[str] = "max_length"

    def describe(self) -> str:
        message = f"Booking exceeds the {self.max_hours}-hour maximum length"
        if self.effective_hours != self.actual_hours:
            message += f" ({_format_hours(self.effective_hours)} hours excluding closed days)"
        else:
            message += f" ({_format_hours(self.actual_hours)} hours)"
        return message


Violation = Union[InvalidRange, OutsideWorkingHours, BufferViolation, MaxLengthExceeded]


@dataclass(frozen=True)
class ValidationVerdict:
    """Outcome of one evaluation. Valid iff there are no violations."""
    violations: Tuple[Violation, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.violations

    @classmethod
    def from_violations(cls, violations: List[Violation]) -> "ValidationVerdict":
        return cls(violations=tuple(violations))

    def of_kind(self, kind: str) -> List[Violation]:
        return [violation for violation in self.violations if violation.kind == kind]

    def messages(self) -> List[str]:
        """One human-readable line per violation, in evaluation order."""
        return [violation.describe() for violation in self.violations]
