from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List


class DayStatus(str, Enum):
    UP = "up"
    DOWN = "down"
    FUTURE = "future"


@dataclass(frozen=True)
class StatusEvent:
    """A single heartbeat: the system reported itself up or down at `timestamp`."""

    status: DayStatus  # UP or DOWN, never FUTURE
    timestamp: datetime


@dataclass(frozen=True)
class MonthSpan:
    label: str
    day_count: int
    start_date: datetime
    offset: int  # days before this month inside the window
    position: float  # percent
    width: float  # percent


@dataclass(frozen=True)
class ObservationWindow:
    months: List[MonthSpan]
    total_days: int
    window_start: datetime


@dataclass(frozen=True)
class StatusPeriod:
    start_day: int
    end_day: int
    status: DayStatus

    @property
    def days(self) -> int:
        return self.end_day - self.start_day + 1


@dataclass(frozen=True)
class DayInfo:
    day_index: int
    day_start: datetime
    date_string: str
    status: DayStatus
    is_live: bool
    label: str


@dataclass(frozen=True)
class HoverState:
    day_index: int
    anchor_x: float
    anchor_y: float


@dataclass(frozen=True)
class SurfaceBox:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def contains_x(self, x: float) -> bool:
        return self.left <= x <= self.right


@dataclass(frozen=True)
class TooltipGeometry:
    offset: float = 60.0
    width: float = 160.0
    height: float = 72.0

    @classmethod
    def from_settings(cls, settings) -> "TooltipGeometry":
        return cls(
            offset=settings.TOOLTIP_OFFSET_PX,
            width=settings.TOOLTIP_WIDTH_PX,
            height=settings.TOOLTIP_HEIGHT_PX,
        )
