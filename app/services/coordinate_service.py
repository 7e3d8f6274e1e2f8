"""
Coordinate mapping service
Maps between day indices and horizontal percentages of the timeline
"""

import math
from typing import List, Tuple

from ..models import ObservationWindow

# Percent inputs are rounded to this many places before flooring, so that
# floating point error in day_to_percent never drops a day to its neighbour
_PERCENT_PRECISION = 9


class CoordinateMapper:
    def __init__(self, total_days: int):
        if total_days <= 0:
            raise ValueError("total_days must be positive")
        self.total_days = total_days

    def day_to_percent(self, day_index: int) -> float:
        return (day_index / self.total_days) * 100

    def percent_to_day(self, percent: float) -> int:
        """Day bucket under `percent`, clamped to [0, total_days - 1]."""
        day = math.floor(round((percent / 100) * self.total_days, _PERCENT_PRECISION))
        return max(0, min(self.total_days - 1, day))

    def day_span(self, day_index: int) -> Tuple[float, float]:
        """(left, width) of a day column, both in percent."""
        return self.day_to_percent(day_index), 100 / self.total_days

    def month_labels(self, window: ObservationWindow) -> List[Tuple[str, float]]:
        # Cumulative month offsets, not per-day sums
        return [(month.label, (month.offset / self.total_days) * 100) for month in window.months]
