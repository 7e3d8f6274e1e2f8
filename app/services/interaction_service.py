"""
Interaction service
Turns pointer events over the rendered timeline into hover state
"""

from typing import Callable, Optional, Tuple

from ..models import DayInfo, HoverState, SurfaceBox, TooltipGeometry

IDLE = "idle"
HOVERING = "hovering"


def clamp_anchor(
    client_x: float,
    client_y: float,
    bounds: SurfaceBox,
    tooltip: TooltipGeometry,
) -> Tuple[float, float]:
    """
    Anchor the tooltip `tooltip.offset` above the pointer, moved just enough
    to keep it inside `bounds`

    The tooltip is drawn centred on anchor_x with its bottom edge on anchor_y.
    A tooltip wider or taller than `bounds` is centred / pinned to the top.
    """
    half_width = tooltip.width / 2
    if tooltip.width >= bounds.width:
        anchor_x = bounds.left + bounds.width / 2
    else:
        anchor_x = min(max(client_x, bounds.left + half_width), bounds.right - half_width)

    anchor_y = client_y - tooltip.offset
    if tooltip.height >= bounds.height:
        anchor_y = bounds.top + tooltip.height
    else:
        anchor_y = min(max(anchor_y, bounds.top + tooltip.height), bounds.bottom)

    return anchor_x, anchor_y


class InteractionSurface:
    """
    Two-state machine over the rendered timeline: idle, or hovering a day

    `snapshot_source` returns the current TimelineSnapshot (or None before one
    exists). Every event replaces the hover state; it is never updated in place.
    """

    def __init__(self, snapshot_source: Callable[[], Optional[object]], tooltip: Optional[TooltipGeometry] = None):
        self._snapshot_source = snapshot_source
        self.tooltip = tooltip or TooltipGeometry()
        self.hover: Optional[HoverState] = None

    @property
    def state(self) -> str:
        return HOVERING if self.hover is not None else IDLE

    def pointer_move(
        self,
        client_x: float,
        client_y: float,
        box: SurfaceBox,
        viewport: Optional[SurfaceBox] = None,
    ) -> Optional[HoverState]:
        snapshot = self._snapshot_source()
        if snapshot is None or box.width <= 0 or not box.contains_x(client_x):
            self.hover = None
            return None

        percent = ((client_x - box.left) / box.width) * 100
        day_index = snapshot.mapper.percent_to_day(percent)
        if day_index < 0 or day_index > snapshot.today_index:
            self.hover = None
            return None

        anchor_x, anchor_y = clamp_anchor(client_x, client_y, viewport or box, self.tooltip)
        self.hover = HoverState(day_index=day_index, anchor_x=anchor_x, anchor_y=anchor_y)
        return self.hover

    def pointer_leave(self) -> None:
        self.hover = None

    def hovered_day(self) -> Optional[DayInfo]:
        snapshot = self._snapshot_source()
        if self.hover is None or snapshot is None:
            return None
        return snapshot.describe_day(self.hover.day_index)
