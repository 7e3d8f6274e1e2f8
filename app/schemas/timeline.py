from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from ..models import DayInfo, HoverState, SurfaceBox
from ..services.timeline_service import TimelineSnapshot, format_uptime


class StatusEventIn(BaseModel):
    status: Any = None
    timestamp: Any = None


class TimelineRequest(BaseModel):
    uptime_seconds: int = Field(ge=0)
    server_start_time: Optional[datetime] = None
    status_history: List[StatusEventIn] = Field(default_factory=list)
    now: Optional[datetime] = None  # defaults to the server clock


class BoxIn(BaseModel):
    left: float = 0
    top: float = 0
    width: float = Field(gt=0)
    height: float = Field(gt=0)

    def to_box(self) -> SurfaceBox:
        return SurfaceBox(left=self.left, top=self.top, width=self.width, height=self.height)


class PointerIn(BaseModel):
    client_x: float
    client_y: float
    box: BoxIn
    viewport: Optional[BoxIn] = None


class HoverRequest(BaseModel):
    timeline: TimelineRequest
    pointer: PointerIn


class MonthOut(BaseModel):
    label: str
    day_count: int
    start_date: datetime
    position: float
    width: float


class PeriodOut(BaseModel):
    start_day: int
    end_day: int
    status: str


class DayInfoOut(BaseModel):
    day_index: int
    date: datetime
    date_string: str
    status: str
    is_live: bool
    label: str

    @classmethod
    def from_info(cls, info: DayInfo) -> "DayInfoOut":
        return cls(
            day_index=info.day_index,
            date=info.day_start,
            date_string=info.date_string,
            status=info.status.value,
            is_live=info.is_live,
            label=info.label,
        )


class HoverOut(BaseModel):
    state: str
    day_index: Optional[int] = None
    anchor_x: Optional[float] = None
    anchor_y: Optional[float] = None
    day: Optional[DayInfoOut] = None

    @classmethod
    def from_hover(cls, state: str, hover: Optional[HoverState], info: Optional[DayInfo]) -> "HoverOut":
        if hover is None:
            return cls(state=state)
        return cls(
            state=state,
            day_index=hover.day_index,
            anchor_x=hover.anchor_x,
            anchor_y=hover.anchor_y,
            day=DayInfoOut.from_info(info) if info else None,
        )


class TimelineResponse(BaseModel):
    now: datetime
    window_start: datetime
    total_days: int
    today_index: int
    system_up_since: datetime
    uptime: str
    months: List[MonthOut]
    periods: List[PeriodOut]
    discarded_events: int = 0

    @classmethod
    def from_snapshot(cls, snapshot: TimelineSnapshot, uptime_seconds: int, discarded_events: int = 0) -> "TimelineResponse":
        return cls(
            now=snapshot.now,
            window_start=snapshot.window.window_start,
            total_days=snapshot.total_days,
            today_index=snapshot.today_index,
            system_up_since=snapshot.system_up_since,
            uptime=format_uptime(uptime_seconds),
            months=[
                MonthOut(
                    label=m.label,
                    day_count=m.day_count,
                    start_date=m.start_date,
                    position=m.position,
                    width=m.width,
                )
                for m in snapshot.window.months
            ],
            periods=[
                PeriodOut(start_day=p.start_day, end_day=p.end_day, status=p.status.value)
                for p in snapshot.periods
            ],
            discarded_events=discarded_events,
        )
