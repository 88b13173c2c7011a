"""
Application services for validating booking windows.

The service fetches an organization's configuration snapshot through a
settings store and delegates the actual rule evaluation to the domain-level
``BookingWindowEvaluator``. The store dependency is a simple protocol so it
can be replaced by a stub in tests.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Protocol

from pendulum import DateTime

from ..domain.evaluator import BookingWindowEvaluator, to_utc
from ..domain.models import (
    BookingPolicy,
    BookingWindowRequest,
    ResolvedDay,
    Timestamp,
    WorkingHoursConfig,
)
from ..domain.schedule_summary import WorkingHoursSummary, describe_policy, summarize_working_hours
from ..domain.violations import ValidationVerdict

logger = logging.getLogger(__name__)

SUGGESTED_END_HOUR = 18


class OrganizationSettingsStore(Protocol):
    """Protocol describing the settings lookups needed by the service."""

    def get_working_hours(self, organization_id: str) -> WorkingHoursConfig:
        """Return the working hours snapshot of an organization."""

    def get_booking_policy(self, organization_id: str) -> BookingPolicy:
        """Return the booking policy of an organization."""


class BookingWindowService:
    """
    Orchestrates settings retrieval and booking window evaluation.
    """

    def __init__(
        self,
        settings_store: OrganizationSettingsStore,
        evaluator: BookingWindowEvaluator | None = None,
    ) -> None:
        self._settings_store = settings_store
        self._evaluator = evaluator or BookingWindowEvaluator()

    def validate_booking(
        self,
        *,
        organization_id: str,
        start: Timestamp,
        end: Timestamp,
        now: Timestamp | None = None,
    ) -> ValidationVerdict:
        """
        Validate a proposed booking window for an organization.

        Raises:
            OrganizationNotFoundError: If the organization is unknown
        """
        working_hours = self._settings_store.get_working_hours(organization_id)
        policy = self._settings_store.get_booking_policy(organization_id)

        request = BookingWindowRequest(
            organization_id=organization_id,
            requested_start=start,
            requested_end=end,
            evaluation_instant=now,
        )
        verdict = self._evaluator.evaluate(request, working_hours, policy)

        if not verdict.valid:
            logger.info(
                "Booking window %s - %s rejected for organization %s: %s",
                start,
                end,
                organization_id,
                "; ".join(verdict.messages()),
            )
        return verdict

    def working_hours_summary(self, organization_id: str) -> WorkingHoursSummary | None:
        return summarize_working_hours(self._settings_store.get_working_hours(organization_id))

    def policy_hints(self, organization_id: str) -> List[str]:
        return describe_policy(self._settings_store.get_booking_policy(organization_id))

    def preview_days(self, organization_id: str, first_day: date, days: int = 14) -> List[ResolvedDay]:
        """Resolve the opening hours of ``days`` consecutive dates."""
        if days <= 0:
            raise ValueError("days must be greater than zero")
        working_hours = self._settings_store.get_working_hours(organization_id)
        return working_hours.resolve_range(first_day, days)


def suggest_end_date(new_start: Timestamp, current_end: Timestamp | None) -> DateTime | None:
    """
    Keep the end date consistent after the start date changed.

    If the new start is later than the current end, the end moves to 18:00
    UTC on the start's date. Otherwise, or when either value does not
    parse, the current end is kept.
    """
    if current_end is None:
        return None

    try:
        end = to_utc(current_end)
    except ValueError:
        return None

    try:
        start = to_utc(new_start)
    except ValueError:
        return end

    if start > end:
        return start.set(hour=SUGGESTED_END_HOUR, minute=0, second=0, microsecond=0)
    return end
