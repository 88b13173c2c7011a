"""
Human-readable summaries of an organization's working hours and booking
policy, as shown next to the booking date fields.
"""

from dataclasses import dataclass
from datetime import time
from typing import List, Tuple

from .models import WEEKDAY_NAMES, BookingPolicy, WorkingHoursConfig, format_clock


@dataclass(frozen=True)
class WorkingHoursSummary:
    """
    Condensed view of a weekly schedule.

    ``uniform_hours`` is set only when every working day shares the same
    open and close times.
    """
    working_days: Tuple[str, ...]
    uniform_hours: Tuple[time, time] | None
    has_overrides: bool

    @classmethod
    def from_config(cls, config: WorkingHoursConfig) -> "WorkingHoursSummary":
        windows = []
        for index, name in enumerate(WEEKDAY_NAMES):
            window = config.weekly_schedule.for_weekday(index).window()
            if window is not None:
                windows.append((name, window))

        distinct_windows = {window for _, window in windows}
        uniform = distinct_windows.pop() if len(distinct_windows) == 1 else None

        return cls(
            working_days=tuple(name for name, _ in windows),
            uniform_hours=uniform,
            has_overrides=bool(config.overrides),
        )

    def lines(self) -> List[str]:
        days = ", ".join(self.working_days) if self.working_days else "None"
        if self.uniform_hours is not None:
            hours = f"{format_clock(self.uniform_hours[0])} - {format_clock(self.uniform_hours[1])}"
        else:
            hours = "Vary by day"

        lines = [f"Working days: {days}", f"Working hours: {hours}"]
        if self.has_overrides:
            lines.append("Special dates and holidays are also considered")
        return lines


def summarize_working_hours(config: WorkingHoursConfig) -> WorkingHoursSummary | None:
    """Return a summary, or None when working hours are not enforced."""
    if not config.enabled:
        return None
    return WorkingHoursSummary.from_config(config)


def describe_policy(policy: BookingPolicy) -> List[str]:
    """Hints about the booking policy for display under the date fields."""
    hints: List[str] = []
    if policy.max_booking_length:
        hints.append(f"Maximum booking length is {policy.max_booking_length} hours.")
    if policy.buffer_start_time > 0:
        hints.append(
            f"Minimum advance notice: {policy.buffer_start_time} hours before booking start time."
        )
    return hints
