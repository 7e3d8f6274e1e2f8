"""
Day status service
Contains the core day-by-day reconstruction algorithm
"""

from bisect import bisect_left
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

import pytz

from ..models import DayStatus, StatusEvent
from .window_service import local_midnight


@dataclass(frozen=True)
class ResolverPolicy:
    # A trailing "up" heartbeat older than this marks past days as down
    stale_heartbeat: timedelta = timedelta(hours=12)
    # Silence between two "up" heartbeats longer than this is an outage
    outage_gap: timedelta = timedelta(days=1)

    @classmethod
    def from_settings(cls, settings) -> "ResolverPolicy":
        return cls(
            stale_heartbeat=timedelta(hours=settings.STALE_HEARTBEAT_HOURS),
            outage_gap=timedelta(hours=settings.OUTAGE_GAP_HOURS),
        )


def system_up_since(now: datetime, uptime_seconds: int, server_start_time: Optional[datetime] = None) -> datetime:
    """
    The authoritative "up since" instant: the reported start time if known,
    otherwise `now` minus the reported uptime
    """
    if server_start_time is not None:
        return server_start_time
    return now - timedelta(seconds=uptime_seconds)


class DayStatusResolver:
    """
    Infer an up/down/future status for each day of the window from a sparse,
    unsorted heartbeat log

    This is a best-effort heuristic reconstruction, not a ground-truth log:
    - Any event inside the day: the chronologically last one wins
    - Last event before the day was "down": down until an "up" is logged
    - Between two "up" events further apart than `outage_gap`: down
    - Trailing "up" older than `stale_heartbeat`: past days are down
    - No earlier event at all: up only if the system was up by day start
    """

    def __init__(
        self,
        events: Sequence[StatusEvent],
        window_start: datetime,
        today_index: int,
        system_up_since: datetime,
        now: datetime,
        policy: Optional[ResolverPolicy] = None,
        tz: Optional[pytz.BaseTzInfo] = None,
    ):
        # Sort once; stable, so equal timestamps keep input order
        self._events: List[StatusEvent] = sorted(events, key=lambda e: e.timestamp)
        self._stamps: List[datetime] = [e.timestamp for e in self._events]
        self.window_start = window_start
        self.today_index = today_index
        self.system_up_since = system_up_since
        self.now = now
        self.policy = policy or ResolverPolicy()
        self.tz = tz or pytz.UTC

    def day_bounds(self, day_index: int) -> Tuple[datetime, datetime]:
        # Local midnights, so a DST day is 23 or 25 hours long
        first_day = self.window_start.date()
        return (
            local_midnight(self.tz, first_day + timedelta(days=day_index)),
            local_midnight(self.tz, first_day + timedelta(days=day_index + 1)),
        )

    def resolve(self, day_index: int) -> DayStatus:
        if day_index > self.today_index:
            return DayStatus.FUTURE

        day_start, day_end = self.day_bounds(day_index)

        if self._events:
            # Events in [0, end_pos) are before day_end, events from end_pos on are at or after it
            end_pos = bisect_left(self._stamps, day_end)
            if end_pos > 0 and self._stamps[end_pos - 1] >= day_start:
                return self._events[end_pos - 1].status

            start_pos = bisect_left(self._stamps, day_start)
            before = self._events[start_pos - 1] if start_pos > 0 else None
            after = self._events[end_pos] if end_pos < len(self._events) else None

            if before is not None and before.status is DayStatus.DOWN:
                if after is not None and after.status is DayStatus.UP:
                    if before.timestamp <= day_start and day_end <= after.timestamp:
                        return DayStatus.DOWN
                else:
                    # No recovery logged yet
                    return DayStatus.DOWN
            elif before is not None:
                return self._resolve_after_up(day_index, day_start, day_end, before, after)

        # No usable neighbours: compare against the system start
        if self.system_up_since <= day_start:
            return DayStatus.UP
        return DayStatus.DOWN

    def _resolve_after_up(
        self,
        day_index: int,
        day_start: datetime,
        day_end: datetime,
        before: StatusEvent,
        after: Optional[StatusEvent],
    ) -> DayStatus:
        if after is not None and after.status is DayStatus.UP:
            gap = after.timestamp - before.timestamp
            if gap > self.policy.outage_gap and before.timestamp < day_start and day_end < after.timestamp:
                return DayStatus.DOWN
        else:
            # Nothing after, or the next report is "down": judge by heartbeat age
            stale = self.now - before.timestamp > self.policy.stale_heartbeat
            if stale and day_index < self.today_index:
                return DayStatus.DOWN
        return DayStatus.UP
