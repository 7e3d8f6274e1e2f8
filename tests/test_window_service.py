from datetime import datetime, timedelta

import pytz

from app.services.window_service import (
    build_window,
    days_in_month,
    get_timezone,
    shift_month,
    today_index,
)
from timeline_helpers import utc


def test_window_wraps_year_boundary():
    window = build_window(utc(2025, 1, 10, 12), pytz.UTC)

    assert [m.label for m in window.months] == ["Nov", "Dec", "Jan"]
    assert [m.day_count for m in window.months] == [30, 31, 31]
    assert window.total_days == 92
    assert window.window_start == utc(2024, 11, 1)


def test_month_positions_use_cumulative_offsets():
    window = build_window(utc(2025, 1, 10), pytz.UTC)

    assert [m.offset for m in window.months] == [0, 30, 61]
    assert window.months[0].position == 0
    assert window.months[1].position == (30 / 92) * 100
    assert window.months[2].position == (61 / 92) * 100
    assert abs(sum(m.width for m in window.months) - 100) < 1e-9


def test_leap_february_is_counted():
    leap = build_window(utc(2024, 3, 15), pytz.UTC)
    common = build_window(utc(2023, 3, 15), pytz.UTC)

    assert [m.day_count for m in leap.months] == [31, 29, 31]
    assert leap.total_days == 91
    assert [m.day_count for m in common.months] == [31, 28, 31]
    assert common.total_days == 90


def test_window_ending_in_february():
    window = build_window(utc(2024, 2, 10), pytz.UTC)

    assert [m.label for m in window.months] == ["Dec", "Jan", "Feb"]
    assert window.window_start == utc(2023, 12, 1)
    assert window.total_days == 31 + 31 + 29


def test_window_starts_at_local_midnight():
    tz = pytz.timezone("America/New_York")
    # 03:00 UTC on Jan 1 is still Dec 31 in New York
    window = build_window(utc(2025, 1, 1, 3), tz)

    assert [m.label for m in window.months] == ["Oct", "Nov", "Dec"]
    assert window.window_start == utc(2024, 10, 1, 4)  # midnight EDT


def test_today_index_floors_whole_days():
    window = build_window(utc(2025, 1, 10), pytz.UTC)

    assert today_index(window, window.window_start) == 0
    assert today_index(window, window.window_start + timedelta(days=61, hours=5)) == 61
    assert today_index(window, utc(2025, 1, 10, 23, 59)) == 70


def test_today_index_counts_local_calendar_days_across_dst():
    tz = pytz.timezone("America/New_York")
    late = tz.localize(datetime(2025, 12, 31, 23, 30))
    window = build_window(late, tz)

    assert window.total_days == 92
    assert today_index(window, late, tz) == 91
    # Spring forward: the first hour after local midnight is already the new day
    spring = tz.localize(datetime(2025, 3, 10, 0, 30))
    assert today_index(build_window(spring, tz), spring, tz) == 31 + 28 + 9


def test_shift_month_and_day_counts():
    assert shift_month(2025, 1, -2) == (2024, 11)
    assert shift_month(2024, 12, 1) == (2025, 1)
    assert days_in_month(2024, 2) == 29
    assert days_in_month(1900, 2) == 28
    assert days_in_month(2000, 2) == 29
    assert days_in_month(2024, 12) == 31


def test_unknown_timezone_falls_back_to_utc():
    assert get_timezone("Not/A_Zone") is pytz.UTC
    assert get_timezone("") is pytz.UTC
    assert get_timezone("Europe/Bucharest").zone == "Europe/Bucharest"
