import pytest
import pytz

from app.services.coordinate_service import CoordinateMapper
from app.services.window_service import build_window
from timeline_helpers import utc


@pytest.mark.parametrize("total_days", [89, 90, 91, 92])
def test_percent_to_day_inverts_day_to_percent(total_days):
    mapper = CoordinateMapper(total_days)
    for day in range(total_days):
        assert mapper.percent_to_day(mapper.day_to_percent(day)) == day


def test_percent_inside_a_day_column_maps_to_that_day():
    mapper = CoordinateMapper(92)
    left, width = mapper.day_span(10)

    assert mapper.percent_to_day(left + width / 2) == 10
    assert mapper.percent_to_day(left + width * 0.999) == 10
    assert mapper.percent_to_day(left + width) == 11


def test_percent_is_clamped_to_window():
    mapper = CoordinateMapper(92)

    assert mapper.percent_to_day(-5) == 0
    assert mapper.percent_to_day(100) == 91
    assert mapper.percent_to_day(250) == 91


def test_day_span():
    mapper = CoordinateMapper(90)
    assert mapper.day_span(45) == (50.0, 100 / 90)


def test_month_labels_follow_window_offsets():
    window = build_window(utc(2025, 1, 10), pytz.UTC)
    mapper = CoordinateMapper(window.total_days)

    labels = mapper.month_labels(window)
    assert [label for label, _ in labels] == ["Nov", "Dec", "Jan"]
    assert [position for _, position in labels] == [m.position for m in window.months]
    assert mapper.percent_to_day(labels[2][1]) == 61


def test_rejects_empty_window():
    with pytest.raises(ValueError):
        CoordinateMapper(0)
