from datetime import date, datetime, timezone

import pytest

from shared.domain.value_objects import TimeWindow, format_clock, parse_clock, parse_day


@pytest.mark.parametrize(
    "value, minutes",
    [("00:00", 0), ("09:30", 570), ("18:00", 1080), ("7:30", 450), ("24:00", 1440)],
)
def test_parse_clock_accepts_half_hour_grid(value, minutes):
    assert parse_clock(value) == minutes


@pytest.mark.parametrize("value", ["18:15", "25:00", "24:30", "12:60", "noon", "", "1800", None])
def test_parse_clock_rejects_invalid_values(value):
    with pytest.raises(ValueError):
        parse_clock(value)


def test_format_clock_pads_hours_and_minutes():
    assert format_clock(450) == "07:30"
    assert format_clock(1440) == "24:00"


def test_parse_day_keeps_the_calendar_day_of_timestamps():
    late_utc = datetime(2024, 5, 10, 23, 30, tzinfo=timezone.utc)

    assert parse_day(late_utc) == date(2024, 5, 10)
    assert parse_day("2024-05-10") == date(2024, 5, 10)
    assert parse_day(date(2024, 5, 10)) == date(2024, 5, 10)


def test_parse_day_rejects_garbage():
    with pytest.raises(ValueError):
        parse_day("10.05.2024")


def test_window_requires_start_before_end():
    with pytest.raises(ValueError):
        TimeWindow(date(2024, 5, 10), 1200, 1080)
    with pytest.raises(ValueError):
        TimeWindow(date(2024, 5, 10), 1080, 1080)


def test_window_overlap_excludes_shared_boundary():
    day = date(2024, 5, 10)
    evening = TimeWindow.parse(day, "18:00", "20:00")

    assert evening.overlaps_with(TimeWindow.parse(day, "19:00", "21:00"))
    assert evening.overlaps_with(TimeWindow.parse(day, "18:30", "19:30"))
    assert evening.overlaps_with(TimeWindow.parse(day, "17:00", "22:00"))
    assert not evening.overlaps_with(TimeWindow.parse(day, "20:00", "22:00"))
    assert not evening.overlaps_with(TimeWindow.parse(day, "16:00", "18:00"))


def test_windows_on_different_days_never_overlap():
    first = TimeWindow.parse("2024-05-10", "18:00", "20:00")
    second = TimeWindow.parse("2024-05-11", "18:00", "20:00")

    assert not first.overlaps_with(second)


def test_window_duration_and_str():
    window = TimeWindow.parse("2024-05-10", "18:00", "20:30")

    assert window.duration == 150
    assert str(window) == "2024-05-10 18:00-20:30"
