from datetime import date, datetime, time

from app.domain.intervals import absolute_range, duration_hours, ranges_overlap

MONDAY = date(2024, 1, 1)


class TestAbsoluteRange:
    def test_same_day_range(self):
        assert absolute_range(MONDAY, time(8), time(10)) == (
            datetime(2024, 1, 1, 8),
            datetime(2024, 1, 1, 10),
        )

    def test_end_before_start_crosses_midnight(self):
        start, end = absolute_range(MONDAY, time(23), time(1))
        assert start == datetime(2024, 1, 1, 23)
        assert end == datetime(2024, 1, 2, 1)

    def test_equal_times_span_full_day(self):
        start, end = absolute_range(MONDAY, time(8), time(8))
        assert end - start == datetime(2024, 1, 2, 8) - datetime(2024, 1, 1, 8)

    def test_duration_hours(self):
        assert duration_hours(MONDAY, time(8), time(10)) == 2
        assert duration_hours(MONDAY, time(22), time(2)) == 4


class TestRangesOverlap:
    def test_partial_overlap(self):
        a = (datetime(2024, 1, 1, 8), datetime(2024, 1, 1, 9))
        b = (datetime(2024, 1, 1, 8, 30), datetime(2024, 1, 1, 9, 30))
        assert ranges_overlap(*a, *b)
        assert ranges_overlap(*b, *a)

    def test_touching_ranges_do_not_overlap(self):
        a = (datetime(2024, 1, 1, 8), datetime(2024, 1, 1, 9))
        b = (datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 10))
        assert not ranges_overlap(*a, *b)
        assert not ranges_overlap(*b, *a)

    def test_containment(self):
        outer = (datetime(2024, 1, 1, 8), datetime(2024, 1, 1, 12))
        inner = (datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 10))
        assert ranges_overlap(*outer, *inner)
        assert ranges_overlap(*inner, *outer)

    def test_overnight_range_overlaps_next_morning(self):
        late = absolute_range(MONDAY, time(23), time(2))
        early = (datetime(2024, 1, 2, 1), datetime(2024, 1, 2, 3))
        assert ranges_overlap(*late, *early)
