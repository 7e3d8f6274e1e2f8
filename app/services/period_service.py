"""
Period compaction service
Collapses per-day statuses into contiguous runs for rendering
"""

from typing import Callable, List, Optional

from ..models import DayStatus, StatusPeriod


def compact_periods(
    resolve: Callable[[int], DayStatus],
    today_index: int,
    total_days: int,
) -> List[StatusPeriod]:
    """
    Scan days 0..min(today_index, total_days - 1) once and emit maximal runs

    Scanning stops at the first future day. Periods come out ordered,
    contiguous and non-overlapping; adjacent periods never share a status.
    """
    periods: List[StatusPeriod] = []
    last_day = min(today_index, total_days - 1)

    current_status: Optional[DayStatus] = None
    period_start = 0
    day = 0

    while day <= last_day:
        status = resolve(day)
        if status is DayStatus.FUTURE:
            break

        if current_status is None:
            current_status = status
            period_start = day
        elif status is not current_status:
            periods.append(StatusPeriod(start_day=period_start, end_day=day - 1, status=current_status))
            current_status = status
            period_start = day
        day += 1

    if current_status is not None:
        periods.append(StatusPeriod(start_day=period_start, end_day=day - 1, status=current_status))

    return periods
