"""
Observation window service
Builds the three-month calendar window and resolves timezones
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import List, Tuple

import pytz

from ..models import MonthSpan, ObservationWindow

logger = logging.getLogger(__name__)

WINDOW_MONTHS = 3
ONE_DAY = timedelta(days=1)
MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def get_timezone(name: str) -> pytz.BaseTzInfo:
    """
    Get timeline timezone, default to UTC if the name is unknown
    """
    try:
        return pytz.timezone(name or "UTC")
    except pytz.UnknownTimeZoneError:
        logger.warning(f"Unknown timezone '{name}', falling back to UTC")
        return pytz.UTC


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move (year, month) by `delta` calendar months, wrapping year boundaries."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def days_in_month(year: int, month: int) -> int:
    # Day 0 of the next month is the last day of this one
    next_year, next_month = shift_month(year, month, 1)
    return (date(next_year, next_month, 1) - ONE_DAY).day


def local_midnight(tz: pytz.BaseTzInfo, day: date) -> datetime:
    return tz.localize(datetime.combine(day, time.min))


def build_window(now: datetime, tz: pytz.BaseTzInfo, months: int = WINDOW_MONTHS) -> ObservationWindow:
    """
    Build the observation window ending with the month containing `now`

    Months are ordered oldest-first. `window_start` is local midnight of the
    first day of the oldest month in `tz`.
    """
    local_now = now.astimezone(tz)

    raw_months: List[Tuple[str, int, datetime]] = []
    for i in range(months - 1, -1, -1):
        year, month = shift_month(local_now.year, local_now.month, -i)
        start_date = local_midnight(tz, date(year, month, 1))
        raw_months.append((MONTH_LABELS[month - 1], days_in_month(year, month), start_date))

    total_days = sum(day_count for _, day_count, _ in raw_months)

    spans = []
    offset = 0
    for label, day_count, start_date in raw_months:
        spans.append(MonthSpan(
            label=label,
            day_count=day_count,
            start_date=start_date,
            offset=offset,
            position=(offset / total_days) * 100,
            width=(day_count / total_days) * 100,
        ))
        offset += day_count

    return ObservationWindow(months=spans, total_days=total_days, window_start=spans[0].start_date)


def today_index(window: ObservationWindow, now: datetime, tz: pytz.BaseTzInfo = pytz.UTC) -> int:
    """Calendar days between the window's first day and the local date of `now`."""
    return (now.astimezone(tz).date() - window.window_start.date()).days
