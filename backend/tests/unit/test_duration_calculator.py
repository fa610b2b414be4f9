"""
Tests for the duration calculator.
"""

from datetime import date, datetime, timedelta

import pytest

from statussheet.services.duration_calculator import (
    coerce_date,
    count_working_days,
    derive_duration,
    project_duration_fields,
    remaining_days,
    round_half_up,
    time_remaining_percentage,
)


class TestRoundHalfUp:
    def test_half_goes_up(self):
        assert round_half_up(12.5) == 13
        assert round_half_up(0.5) == 1
        assert round_half_up(87.5) == 88

    def test_below_half_goes_down(self):
        assert round_half_up(61.18) == 61
        assert round_half_up(0.49) == 0


class TestCoerceDate:
    def test_accepts_date_datetime_and_iso_string(self):
        assert coerce_date(date(2025, 1, 1)) == date(2025, 1, 1)
        assert coerce_date(datetime(2025, 1, 1, 15, 30)) == date(2025, 1, 1)
        assert coerce_date("2025-01-01") == date(2025, 1, 1)
        assert coerce_date("2025-01-01T09:00:00Z") == date(2025, 1, 1)

    def test_unusable_values_become_none(self):
        assert coerce_date(None) is None
        assert coerce_date("") is None
        assert coerce_date("not-a-date") is None
        assert coerce_date("2025-13-45") is None
        assert coerce_date(20250101) is None


class TestCountWorkingDays:
    def test_single_full_week(self):
        # Monday to Friday
        assert count_working_days(date(2025, 1, 6), date(2025, 1, 10)) == 5

    def test_weekend_only(self):
        assert count_working_days(date(2025, 1, 11), date(2025, 1, 12)) == 0

    def test_two_calendar_weeks(self):
        assert count_working_days(date(2025, 1, 6), date(2025, 1, 19)) == 10

    def test_same_day(self):
        assert count_working_days(date(2025, 1, 8), date(2025, 1, 8)) == 1
        assert count_working_days(date(2025, 1, 11), date(2025, 1, 11)) == 0

    def test_reversed_range_is_zero(self):
        assert count_working_days(date(2025, 1, 10), date(2025, 1, 6)) == 0


class TestDeriveDuration:
    def test_empty_list_returns_none(self):
        assert derive_duration([]) is None

    def test_all_dates_missing_returns_none(self):
        assert derive_duration([{"date": None}, {"milestone": "No date"}]) is None

    def test_uses_min_and_max_dates(self):
        """Dates are taken regardless of order; total days include both ends."""
        duration = derive_duration(
            [
                {"date": "2025-06-01"},
                {"date": "2025-01-01"},
                {"date": "2025-03-15"},
            ]
        )

        assert duration.start_date == date(2025, 1, 1)
        assert duration.end_date == date(2025, 6, 1)
        assert duration.total_days == 152
        assert duration.working_days == 108

    def test_missing_and_invalid_dates_are_excluded(self):
        duration = derive_duration(
            [
                {"date": "2025-01-06"},
                {"date": None},
                {"date": "garbage"},
                {"date": "2025-01-10"},
            ]
        )

        assert duration.start_date == date(2025, 1, 6)
        assert duration.end_date == date(2025, 1, 10)
        assert duration.total_days == 5
        assert duration.working_days == 5

    def test_single_milestone_has_one_day(self):
        duration = derive_duration([{"date": date(2025, 1, 6)}])

        assert duration.start_date == duration.end_date == date(2025, 1, 6)
        assert duration.total_days == 1
        assert duration.working_days == 1

    def test_accepts_objects_with_date_attribute(self):
        class Row:
            def __init__(self, value):
                self.date = value

        duration = derive_duration([Row(date(2025, 1, 6)), Row(datetime(2025, 1, 10, 8))])

        assert duration.total_days == 5

    def test_total_days_never_below_working_days(self):
        start = date(2025, 1, 1)
        for offset in range(0, 40):
            duration = derive_duration([{"date": start}, {"date": start + timedelta(days=offset)}])
            assert duration.start_date <= duration.end_date
            assert 0 <= duration.working_days <= duration.total_days

    @pytest.mark.parametrize("value", [None, "2025-01-01", {"date": "2025-01-01"}, 42])
    def test_non_sequence_input_raises_type_error(self, value):
        with pytest.raises(TypeError):
            derive_duration(value)


class TestTimeRemainingPercentage:
    def test_missing_dates_return_none(self):
        assert time_remaining_percentage(date(2025, 3, 1), None, date(2025, 6, 1)) is None
        assert time_remaining_percentage(date(2025, 3, 1), date(2025, 1, 1), None) is None

    def test_future_project_has_full_time(self):
        result = time_remaining_percentage(date(2024, 12, 1), date(2025, 1, 1), date(2025, 6, 1))

        assert result.percentage == 100
        assert result.project_starts_in_future is True
        assert result.is_overdue is False

    def test_overdue_project_has_no_time(self):
        result = time_remaining_percentage(date(2025, 7, 1), date(2025, 1, 1), date(2025, 6, 1))

        assert result.percentage == 0
        assert result.is_overdue is True
        assert result.project_starts_in_future is False

    def test_mid_project(self):
        """93 of 152 inclusive days remain on March 1st."""
        result = time_remaining_percentage(date(2025, 3, 1), date(2025, 1, 1), date(2025, 6, 1))

        assert result.percentage == 61
        assert result.project_starts_in_future is False
        assert result.is_overdue is False

    def test_start_and_end_day(self):
        start, end = date(2025, 1, 1), date(2025, 6, 1)

        assert time_remaining_percentage(start, start, end).percentage == 100
        assert time_remaining_percentage(end, start, end).percentage == 1

    def test_rounds_half_up(self):
        # 1 of 8 days left = 12.5%
        result = time_remaining_percentage(date(2025, 1, 8), date(2025, 1, 1), date(2025, 1, 8))

        assert result.percentage == 13

    def test_reversed_dates_are_swapped(self):
        forward = time_remaining_percentage(date(2025, 3, 1), date(2025, 1, 1), date(2025, 6, 1))
        reversed_ = time_remaining_percentage(date(2025, 3, 1), date(2025, 6, 1), date(2025, 1, 1))

        assert forward == reversed_

    def test_accepts_iso_strings(self):
        result = time_remaining_percentage("2025-03-01", "2025-01-01", "2025-06-01T00:00:00")

        assert result.percentage == 61

    def test_always_within_bounds(self):
        start, end = date(2025, 1, 1), date(2025, 1, 20)
        for offset in range(-5, 30):
            today = start + timedelta(days=offset)
            result = time_remaining_percentage(today, start, end)
            assert 0 <= result.percentage <= 100

    def test_invalid_today_raises_type_error(self):
        with pytest.raises(TypeError):
            time_remaining_percentage(None, date(2025, 1, 1), date(2025, 6, 1))


class TestRemainingDays:
    def test_mid_project(self):
        result = remaining_days(date(2025, 3, 1), date(2025, 1, 1), date(2025, 6, 1))

        assert result.total_days_remaining == 93
        assert result.working_days_remaining == 65
        assert result.days_overdue == 0

    def test_future_project_keeps_whole_duration(self):
        result = remaining_days(date(2024, 12, 1), date(2025, 1, 1), date(2025, 6, 1))

        assert result.total_days_remaining == 152
        assert result.working_days_remaining == 108

    def test_overdue_project(self):
        result = remaining_days(date(2025, 7, 1), date(2025, 1, 1), date(2025, 6, 1))

        assert result.total_days_remaining == 0
        assert result.working_days_remaining == 0
        assert result.days_overdue == 30

    def test_missing_dates_return_none(self):
        assert remaining_days(date(2025, 3, 1), None, None) is None


class TestProjectDurationFields:
    def test_no_dated_milestones_clears_everything(self):
        fields = project_duration_fields([{"date": None}], date(2025, 3, 1))

        assert fields.calculated_start_date is None
        assert fields.calculated_end_date is None
        assert fields.total_days is None
        assert fields.working_days is None
        assert fields.total_days_remaining is None
        assert fields.working_days_remaining is None

    def test_fills_all_columns(self):
        fields = project_duration_fields(
            [{"date": "2025-01-01"}, {"date": "2025-06-01"}], date(2025, 3, 1)
        )

        assert fields.calculated_start_date == date(2025, 1, 1)
        assert fields.calculated_end_date == date(2025, 6, 1)
        assert fields.total_days == 152
        assert fields.working_days == 108
        assert fields.total_days_remaining == 93
        assert fields.working_days_remaining == 65
