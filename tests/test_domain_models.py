"""
Tests for domain models.
"""

from datetime import date, time

import pendulum
import pytest

from bookingwindow.domain.models import (
    BookingPolicy,
    DateOverride,
    DaySpec,
    TimeRange,
    WeeklySchedule,
    WorkingHoursConfig,
    parse_clock,
    weekday_index,
)


def _office_week() -> WeeklySchedule:
    """Monday to Friday 09:00-17:00, weekend closed."""
    open_day = DaySpec(is_open=True, open_time=time(9, 0), close_time=time(17, 0))
    return WeeklySchedule(days={day: open_day for day in range(1, 6)})


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = pendulum.parse("2024-11-25 09:00")
        end = pendulum.parse("2024-11-25 17:30")

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end
        assert tr.duration_hours() == 8.5
        assert not tr.spans_multiple_dates()

    def test_invalid_time_range_raises_error(self):
        """Test that creating an invalid time range raises ValueError."""
        start = pendulum.parse("2024-11-25 17:00")
        end = pendulum.parse("2024-11-25 09:00")

        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=start, end=end)

    def test_inner_date_bounds_exclude_start_and_end_dates(self):
        """Only the dates strictly between start and end are inner dates."""
        tr = TimeRange(
            start=pendulum.parse("2024-11-22 10:00"),
            end=pendulum.parse("2024-11-25 10:00"),
        )

        assert tr.inner_date_bounds() == (date(2024, 11, 23), date(2024, 11, 24))

    def test_no_inner_dates_for_adjacent_dates(self):
        tr = TimeRange(
            start=pendulum.parse("2024-11-25 10:00"),
            end=pendulum.parse("2024-11-26 10:00"),
        )

        assert tr.spans_multiple_dates()
        assert tr.inner_date_bounds() is None


class TestParseClock:
    """Tests for "HH:MM" parsing."""

    def test_parses_valid_values(self):
        assert parse_clock("09:30") == time(9, 30)
        assert parse_clock("23:59") == time(23, 59)
        assert parse_clock(time(8, 15, 42)) == time(8, 15)

    @pytest.mark.parametrize("value", [None, "", "9:30", "24:00", "12:60", "noon", "09:00:00", 900])
    def test_malformed_values_return_none(self, value):
        assert parse_clock(value) is None


class TestDaySpec:
    """Tests for DaySpec model."""

    def test_open_day_has_window(self):
        spec = DaySpec.from_strings(True, "09:00", "17:00")

        assert spec.window() == (time(9, 0), time(17, 0))

    def test_closed_day_has_no_window(self):
        spec = DaySpec.from_strings(False, "09:00", "17:00")

        assert spec.window() is None

    @pytest.mark.parametrize(
        "open_time, close_time",
        [(None, "17:00"), ("09:00", None), ("17:00", "09:00"), ("09:00", "09:00"), ("nine", "17:00")],
    )
    def test_malformed_open_day_is_effectively_closed(self, open_time, close_time):
        spec = DaySpec.from_strings(True, open_time, close_time)

        assert not spec.is_effectively_open()


class TestWorkingHoursConfig:
    """Tests for resolving the effective hours of a date."""

    def test_weekday_index_starts_on_sunday(self):
        assert weekday_index(date(2024, 11, 24)) == 0  # Sunday
        assert weekday_index(date(2024, 11, 25)) == 1  # Monday
        assert weekday_index(date(2024, 11, 23)) == 6  # Saturday

    def test_resolve_uses_weekly_schedule(self):
        config = WorkingHoursConfig(enabled=True, weekly_schedule=_office_week())

        monday = config.resolve(date(2024, 11, 25))
        saturday = config.resolve(date(2024, 11, 23))

        assert monday.is_open
        assert (monday.open_time, monday.close_time) == (time(9, 0), time(17, 0))
        assert monday.source == "weekly"
        assert monday.weekday == "Monday"
        assert not saturday.is_open

    def test_override_replaces_weekly_entry(self):
        config = WorkingHoursConfig(
            enabled=True,
            weekly_schedule=_office_week(),
            overrides=(
                DateOverride(date=date(2024, 12, 25), is_open=False, reason="Christmas Day"),
                DateOverride(
                    date=date(2024, 11, 23),
                    is_open=True,
                    open_time=time(10, 0),
                    close_time=time(14, 0),
                ),
            ),
        )

        christmas = config.resolve(date(2024, 12, 25))  # Wednesday
        saturday = config.resolve(date(2024, 11, 23))

        assert not christmas.is_open
        assert christmas.source == "override"
        assert christmas.reason == "Christmas Day"
        assert saturday.is_open
        assert (saturday.open_time, saturday.close_time) == (time(10, 0), time(14, 0))

    def test_override_without_hours_is_closed(self):
        """No partial merge with the weekly entry."""
        config = WorkingHoursConfig(
            enabled=True,
            weekly_schedule=_office_week(),
            overrides=(DateOverride(date=date(2024, 11, 25), is_open=True),),
        )

        assert not config.resolve(date(2024, 11, 25)).is_open

    def test_overrides_are_sorted_and_unique(self):
        later = DateOverride(date=date(2024, 12, 31))
        earlier = DateOverride(date=date(2024, 12, 24))

        config = WorkingHoursConfig(enabled=True, overrides=(later, earlier))
        assert [o.date for o in config.overrides] == [date(2024, 12, 24), date(2024, 12, 31)]

        with pytest.raises(ValueError, match="Duplicate override"):
            WorkingHoursConfig(enabled=True, overrides=(earlier, DateOverride(date=date(2024, 12, 24))))

    def test_disabled_config_is_always_open(self):
        config = WorkingHoursConfig(enabled=False, weekly_schedule=WeeklySchedule())

        day = config.resolve(date(2024, 11, 23))

        assert day.is_open
        assert not day.is_restricted()
        assert day.contains(time(3, 0))

    def test_resolve_range(self):
        config = WorkingHoursConfig(enabled=True, weekly_schedule=_office_week())

        days = config.resolve_range(date(2024, 11, 22), 4)

        assert [d.date for d in days] == [
            date(2024, 11, 22),
            date(2024, 11, 23),
            date(2024, 11, 24),
            date(2024, 11, 25),
        ]
        assert [d.is_open for d in days] == [True, False, False, True]

    def test_count_closed_days_matches_day_by_day_resolution(self):
        config = WorkingHoursConfig(
            enabled=True,
            weekly_schedule=_office_week(),
            overrides=(
                DateOverride(date=date(2024, 12, 25), is_open=False),  # Wednesday closed
                DateOverride(
                    date=date(2024, 12, 28),  # Saturday opened
                    is_open=True,
                    open_time=time(10, 0),
                    close_time=time(14, 0),
                ),
                DateOverride(date=date(2024, 12, 29), is_open=False),  # Sunday, already closed
                DateOverride(date=date(2025, 3, 1), is_open=False),  # outside the range
            ),
        )

        days = config.resolve_range(date(2024, 12, 2), 40)
        expected = sum(1 for day in days if not day.is_open)

        assert config.count_closed_days(date(2024, 12, 2), date(2025, 1, 10)) == expected
        assert expected == 10

    def test_count_closed_days_edge_cases(self):
        config = WorkingHoursConfig(enabled=True, weekly_schedule=_office_week())

        assert config.count_closed_days(date(2024, 11, 23), date(2024, 11, 23)) == 1
        assert config.count_closed_days(date(2024, 11, 25), date(2024, 11, 24)) == 0
        assert WorkingHoursConfig(enabled=False).count_closed_days(
            date(2024, 11, 23), date(2024, 11, 24)
        ) == 0

    def test_invalid_weekday_key(self):
        with pytest.raises(ValueError, match="between 0 and 6"):
            WeeklySchedule(days={7: DaySpec()})


class TestBookingPolicy:
    """Tests for BookingPolicy invariants."""

    def test_negative_buffer_rejected(self):
        with pytest.raises(ValueError):
            BookingPolicy(buffer_start_time=-1)

    def test_non_positive_max_length_rejected(self):
        with pytest.raises(ValueError):
            BookingPolicy(max_booking_length=0)
