from datetime import date, time

import pytest

from app.utils.time_helpers import (
    day_of_week,
    format_date,
    is_full_hour,
    parse_clock_time,
    parse_date,
    time_to_string,
)


class TestDayOfWeek:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (date(2024, 1, 7), 0),  # Sunday
            (date(2024, 1, 1), 1),  # Monday
            (date(2024, 1, 6), 6),  # Saturday
        ],
    )
    def test_sunday_is_zero(self, value, expected):
        assert day_of_week(value) == expected


class TestDates:
    def test_format_date_pads(self):
        assert format_date(date(2024, 3, 5)) == "2024-03-05"

    def test_parse_date(self):
        assert parse_date("2024-01-01") == date(2024, 1, 1)

    @pytest.mark.parametrize(
        "value", ["2024-01-01T00:00:00Z", "01/01/2024", "2024-1-1", "", "2024-02-30"]
    )
    def test_parse_date_rejects_non_calendar_strings(self, value):
        with pytest.raises(ValueError):
            parse_date(value)


class TestClockTimes:
    def test_parse_hh_mm(self):
        assert parse_clock_time("08:00") == time(8, 0)
        assert parse_clock_time("23:30:15") == time(23, 30, 15)

    @pytest.mark.parametrize("value", ["24:00", "8am", "08:60", "08"])
    def test_parse_rejects_bad_times(self, value):
        with pytest.raises(ValueError):
            parse_clock_time(value)

    def test_is_full_hour(self):
        assert is_full_hour(time(9))
        assert not is_full_hour(time(9, 30))

    def test_time_to_string(self):
        assert time_to_string(time(7, 5, 30)) == "07:05"
