"""
Timeline service
Assembles the full timeline snapshot and keeps a live one in sync with the clock
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional, Sequence

import pytz

from ..models import DayInfo, DayStatus, ObservationWindow, StatusEvent, StatusPeriod, TooltipGeometry
from .clock_service import RefreshClock
from .coordinate_service import CoordinateMapper
from .interaction_service import InteractionSurface
from .period_service import compact_periods
from .status_service import DayStatusResolver, ResolverPolicy, system_up_since
from .window_service import MONTH_LABELS, build_window, get_timezone, today_index

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value


def format_uptime(seconds: int) -> str:
    """Render an uptime duration as "Xd Yh Zm"."""
    days, rest = divmod(int(seconds), 86400)
    hours, rest = divmod(rest, 3600)
    return f"{days}d {hours}h {rest // 60}m"


def format_day(value: datetime) -> str:
    return f"{MONTH_LABELS[value.month - 1]} {value.day}, {value.year}"


@dataclass
class TimelineSnapshot:
    now: datetime
    window: ObservationWindow
    today_index: int
    system_up_since: datetime
    resolver: DayStatusResolver
    mapper: CoordinateMapper
    periods: List[StatusPeriod] = field(default_factory=list)

    @property
    def total_days(self) -> int:
        return self.window.total_days

    def resolve(self, day_index: int) -> DayStatus:
        return self.resolver.resolve(day_index)

    def describe_day(self, day_index: int) -> Optional[DayInfo]:
        """
        Tooltip view-model for a day, or None outside [0, today_index]
        """
        if day_index < 0 or day_index > self.today_index or day_index >= self.total_days:
            return None
        day_start, _ = self.resolver.day_bounds(day_index)
        return DayInfo(
            day_index=day_index,
            day_start=day_start,
            date_string=format_day(day_start),
            status=self.resolve(day_index),
            is_live=day_index == self.today_index,
            label=f"Day {day_index + 1} of {self.total_days}",
        )


def build_timeline(
    uptime_seconds: int,
    status_history: Sequence[StatusEvent],
    now: datetime,
    server_start_time: Optional[datetime] = None,
    tz: Optional[pytz.BaseTzInfo] = None,
    policy: Optional[ResolverPolicy] = None,
) -> TimelineSnapshot:
    """
    Rebuild the whole timeline from its inputs

    Nothing is cached between calls: window, today index, resolver and
    periods are all derived from `now` and the supplied log.
    """
    now = as_utc(now)
    tz = tz or pytz.UTC
    up_since = system_up_since(
        now, uptime_seconds, as_utc(server_start_time) if server_start_time else None
    )

    window = build_window(now, tz)
    today = today_index(window, now, tz)
    resolver = DayStatusResolver(
        [replace(event, timestamp=as_utc(event.timestamp)) for event in status_history],
        window_start=window.window_start,
        today_index=today,
        system_up_since=up_since,
        now=now,
        policy=policy,
        tz=tz,
    )
    periods = compact_periods(resolver.resolve, today, window.total_days)

    return TimelineSnapshot(
        now=now,
        window=window,
        today_index=today,
        system_up_since=up_since,
        resolver=resolver,
        mapper=CoordinateMapper(window.total_days),
        periods=periods,
    )


@dataclass(frozen=True)
class TimelineInputs:
    uptime_seconds: int
    status_history: List[StatusEvent]
    server_start_time: Optional[datetime] = None
    discarded_events: int = 0


class TimelineMonitor:
    """
    Live timeline for one monitored system

    Inputs are supplied externally via configure(); the snapshot is rebuilt
    then and on every clock tick, never on pointer events.
    """

    def __init__(self, clock: RefreshClock, settings):
        self.clock = clock
        self.tz = get_timezone(settings.TIMEZONE)
        self.policy = ResolverPolicy.from_settings(settings)
        self.inputs: Optional[TimelineInputs] = None
        self._snapshot: Optional[TimelineSnapshot] = None
        self.surface = InteractionSurface(lambda: self._snapshot, TooltipGeometry.from_settings(settings))
        clock.subscribe(self._on_tick)

    @property
    def snapshot(self) -> Optional[TimelineSnapshot]:
        return self._snapshot

    def configure(self, inputs: TimelineInputs) -> TimelineSnapshot:
        # Pin the start instant so a fixed uptime does not slide forward with the clock
        start = inputs.server_start_time
        if start is None:
            start = system_up_since(self.clock.now, inputs.uptime_seconds)
        self.inputs = TimelineInputs(
            uptime_seconds=inputs.uptime_seconds,
            status_history=list(inputs.status_history),
            server_start_time=as_utc(start),
            discarded_events=inputs.discarded_events,
        )
        self.surface.pointer_leave()
        return self.refresh()

    def refresh(self) -> Optional[TimelineSnapshot]:
        if self.inputs is None:
            return None
        self._snapshot = build_timeline(
            self.inputs.uptime_seconds,
            self.inputs.status_history,
            now=self.clock.now,
            server_start_time=self.inputs.server_start_time,
            tz=self.tz,
            policy=self.policy,
        )
        logger.debug(
            f"Timeline rebuilt: {len(self._snapshot.periods)} periods, today={self._snapshot.today_index}"
        )
        return self._snapshot

    def close(self) -> None:
        """Stop following the clock."""
        self.clock.unsubscribe(self._on_tick)

    def _on_tick(self, now: datetime) -> None:
        self.refresh()
