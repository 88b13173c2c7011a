"""
Core business logic for validating a booking window.

Pure domain logic without any external dependencies (no database, no I/O).
Every call works on its own snapshot of configuration and policy.
"""

import logging
from datetime import datetime
from typing import Callable, List

import pendulum
from pendulum import DateTime

from .models import (
    BookingPolicy,
    BookingWindowRequest,
    ResolvedDay,
    TimeRange,
    Timestamp,
    WorkingHoursConfig,
    hours_between,
)
from .violations import (
    BufferViolation,
    InvalidRange,
    MaxLengthExceeded,
    OutsideWorkingHours,
    ValidationVerdict,
    Violation,
)

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24


def to_utc(value: Timestamp) -> DateTime:
    """
    Normalize a timestamp to a UTC pendulum DateTime.

    Naive datetimes and strings without offset are read as UTC. Only
    absolute date-and-time values are accepted: date-only, time-only and
    relative values such as "now" are rejected.

    Raises:
        ValueError: If the value is not a parseable point in time
    """
    try:
        if isinstance(value, datetime):
            return pendulum.instance(value, tz="UTC").in_timezone("UTC")

        if not isinstance(value, str) or not value.strip() or value.strip().lower() == "now":
            raise ValueError(f"Not a timestamp: {value!r}")

        parsed = pendulum.parse(value.strip(), tz="UTC", exact=True)
        if not isinstance(parsed, DateTime):
            raise ValueError(f"Not a timestamp: {value!r}")
        return parsed.in_timezone("UTC")
    except OverflowError as exc:
        raise ValueError(f"Timestamp out of range: {value!r}") from exc


class BookingWindowEvaluator:
    """
    Decides whether a requested booking window is legal for an organization.

    Algorithm:
    1. Parse and order-check the timestamps (fatal, exclusive)
    2. Buffer: minimum lead time between now and the start
    3. Working hours: start and end must fall inside the resolved open
       windows of their dates
    4. Maximum length, optionally not counting fully closed days

    Steps 2 to 4 run independently and all violations are collected.
    """

    def __init__(self, clock: Callable[[], DateTime] | None = None):
        self._clock = clock or (lambda: pendulum.now("UTC"))

    def evaluate(
        self,
        request: BookingWindowRequest,
        config: WorkingHoursConfig,
        policy: BookingPolicy,
    ) -> ValidationVerdict:
        """
        Validate a booking request against working hours and booking policy.

        Args:
            request: The proposed booking window
            config: Snapshot of the organization's working hours
            policy: Snapshot of the organization's booking policy

        Returns:
            ValidationVerdict listing every violation found
        """
        try:
            start = to_utc(request.requested_start)
            end = to_utc(request.requested_end)
        except ValueError as exc:
            return self._invalid(request, f"Invalid booking dates: {exc}")

        if end <= start:
            return self._invalid(request, "Booking end must be after booking start")

        if request.evaluation_instant is None:
            now = self._clock().in_timezone("UTC")
        else:
            try:
                now = to_utc(request.evaluation_instant)
            except ValueError as exc:
                return self._invalid(request, f"Invalid evaluation instant: {exc}")

        window = TimeRange(start=start, end=end)
        violations: List[Violation] = []
        violations.extend(self._check_buffer(window, now, policy))
        violations.extend(self._check_working_hours(window, config))
        violations.extend(self._check_max_length(window, config, policy))

        verdict = ValidationVerdict.from_violations(violations)
        logger.debug(
            "Evaluated %s for organization %s: %s",
            window,
            request.organization_id,
            "valid" if verdict.valid else [v.kind for v in verdict.violations],
        )
        return verdict

    @staticmethod
    def _invalid(request: BookingWindowRequest, reason: str) -> ValidationVerdict:
        logger.debug("Rejected request for organization %s: %s", request.organization_id, reason)
        return ValidationVerdict.from_violations([InvalidRange(reason=reason)])

    def _check_buffer(
        self,
        window: TimeRange,
        now: DateTime,
        policy: BookingPolicy,
    ) -> List[Violation]:
        """The buffer applies even when working hours are disabled."""
        if policy.buffer_start_time <= 0:
            return []

        lead_hours = hours_between(now, window.start)
        if lead_hours < policy.buffer_start_time:
            return [
                BufferViolation(
                    required_buffer_hours=policy.buffer_start_time,
                    actual_lead_hours=lead_hours,
                )
            ]
        return []

    def _check_working_hours(
        self,
        window: TimeRange,
        config: WorkingHoursConfig,
    ) -> List[Violation]:
        """
        Check the booking boundaries against each touched date's hours.

        Same date: the whole booking must sit inside that date's window.
        Several dates: the start must sit inside the first date's window and
        the end inside the last date's window. Dates in between are not
        constrained.
        """
        if not config.enabled:
            return []

        first_day = config.resolve(window.start_date)

        if not window.spans_multiple_dates():
            if first_day.contains(window.start.time()) and first_day.contains(window.end.time()):
                return []
            return [self._outside(first_day)]

        violations: List[Violation] = []
        if not first_day.contains(window.start.time()):
            violations.append(self._outside(first_day))

        last_day = config.resolve(window.end_date)
        if not last_day.contains(window.end.time()):
            violations.append(self._outside(last_day))

        return violations

    @staticmethod
    def _outside(day: ResolvedDay) -> OutsideWorkingHours:
        return OutsideWorkingHours(
            date=day.date,
            open_time=day.open_time if day.is_open else None,
            close_time=day.close_time if day.is_open else None,
            reason=day.reason,
        )

    def _check_max_length(
        self,
        window: TimeRange,
        config: WorkingHoursConfig,
        policy: BookingPolicy,
    ) -> List[Violation]:
        if policy.max_booking_length is None:
            return []

        actual_hours = window.duration_hours()
        effective_hours = actual_hours

        inner_dates = window.inner_date_bounds()
        if policy.max_booking_length_skip_closed_days and inner_dates is not None:
            closed_days = config.count_closed_days(*inner_dates)
            effective_hours = actual_hours - closed_days * HOURS_PER_DAY

        if effective_hours > policy.max_booking_length:
            return [
                MaxLengthExceeded(
                    max_hours=policy.max_booking_length,
                    actual_hours=actual_hours,
                    effective_hours=effective_hours,
                )
            ]
        return []


_default_evaluator = BookingWindowEvaluator()


def evaluate(
    request: BookingWindowRequest,
    config: WorkingHoursConfig,
    policy: BookingPolicy,
) -> ValidationVerdict:
    """Evaluate a request with the default (wall clock) evaluator."""
    return _default_evaluator.evaluate(request, config, policy)
