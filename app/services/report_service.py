"""
Report generation service
Exports a timeline snapshot as tabular data
"""

import io
from typing import Any, Dict

import pandas as pd

from ..models import DayStatus
from .timeline_service import TimelineSnapshot

PERIOD_COLUMNS = ["start_day", "end_day", "start_date", "end_date", "days", "status"]


def periods_frame(snapshot: TimelineSnapshot) -> pd.DataFrame:
    """
    One row per status period, with calendar dates for both ends
    """
    rows = []
    for period in snapshot.periods:
        start_date, _ = snapshot.resolver.day_bounds(period.start_day)
        end_date, _ = snapshot.resolver.day_bounds(period.end_day)
        rows.append({
            "start_day": period.start_day,
            "end_day": period.end_day,
            "start_date": start_date.date().isoformat(),
            "end_date": end_date.date().isoformat(),
            "days": period.days,
            "status": period.status.value,
        })
    return pd.DataFrame(rows, columns=PERIOD_COLUMNS)


def periods_to_csv(snapshot: TimelineSnapshot) -> str:
    df = periods_frame(snapshot)
    csv_buffer = io.StringIO()
    df.to_csv(csv_buffer, index=False)
    return csv_buffer.getvalue()


def summarize(snapshot: TimelineSnapshot) -> Dict[str, Any]:
    """
    Up/down day counts over the resolved part of the window
    """
    df = periods_frame(snapshot)
    up_days = int(df.loc[df["status"] == DayStatus.UP.value, "days"].sum())
    down_days = int(df.loc[df["status"] == DayStatus.DOWN.value, "days"].sum())
    resolved = up_days + down_days

    return {
        "up_days": up_days,
        "down_days": down_days,
        "resolved_days": resolved,
        "uptime_percentage": round((up_days / max(1, resolved)) * 100, 1),
    }
