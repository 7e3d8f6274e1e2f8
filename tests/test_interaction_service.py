import pytest

from app.models import DayStatus, HoverState, SurfaceBox, TooltipGeometry
from app.services.interaction_service import HOVERING, IDLE, InteractionSurface, clamp_anchor

# 92-day window rendered 920px wide: 10px per day
BOX = SurfaceBox(left=100, top=200, width=920, height=80)
VIEWPORT = SurfaceBox(left=0, top=0, width=1280, height=800)


@pytest.fixture
def surface(make_snapshot, long_up_since):
    snapshot = make_snapshot(server_start_time=long_up_since)
    return InteractionSurface(lambda: snapshot)


def test_starts_idle(surface):
    assert surface.state == IDLE
    assert surface.hover is None
    assert surface.hovered_day() is None


def test_pointer_move_hovers_day(surface):
    hover = surface.pointer_move(205, 250, BOX, VIEWPORT)

    assert hover == HoverState(day_index=10, anchor_x=205, anchor_y=190)
    assert surface.state == HOVERING

    info = surface.hovered_day()
    assert info.date_string == "Nov 11, 2024"
    assert info.label == "Day 11 of 92"
    assert info.status is DayStatus.UP
    assert not info.is_live


def test_hovering_today_is_live(surface):
    surface.pointer_move(100 + 70 * 10 + 3, 250, BOX, VIEWPORT)

    info = surface.hovered_day()
    assert info.day_index == 70
    assert info.is_live
    assert info.date_string == "Jan 10, 2025"


def test_future_day_clears_hover(surface):
    surface.pointer_move(205, 250, BOX, VIEWPORT)
    assert surface.pointer_move(100 + 80 * 10 + 5, 250, BOX, VIEWPORT) is None
    assert surface.state == IDLE


def test_pointer_outside_box_clears_hover(surface):
    surface.pointer_move(205, 250, BOX, VIEWPORT)
    assert surface.pointer_move(50, 250, BOX, VIEWPORT) is None
    assert surface.state == IDLE


def test_pointer_leave_always_clears(surface):
    surface.pointer_leave()
    assert surface.state == IDLE

    surface.pointer_move(205, 250, BOX, VIEWPORT)
    surface.pointer_leave()
    assert surface.state == IDLE
    assert surface.hovered_day() is None


def test_each_move_replaces_hover_state(surface):
    first = surface.pointer_move(205, 250, BOX, VIEWPORT)
    second = surface.pointer_move(215, 250, BOX, VIEWPORT)

    assert first.day_index == 10
    assert second.day_index == 11
    assert first is not second


def test_no_snapshot_means_idle():
    surface = InteractionSurface(lambda: None)
    assert surface.pointer_move(205, 250, BOX) is None
    assert surface.state == IDLE


def test_anchor_defaults_to_box_bounds(surface):
    hover = surface.pointer_move(105, 250, BOX)

    # Pushed right and down to keep a 160x72 tooltip inside the box
    assert hover.anchor_x == BOX.left + 80
    assert hover.anchor_y == BOX.top + 72


@pytest.mark.parametrize("x", [0, 5, 79, 150, 221, 295, 300])
@pytest.mark.parametrize("y", [0, 10, 71, 130, 199, 200])
def test_tooltip_never_leaves_bounds(x, y):
    bounds = SurfaceBox(left=0, top=0, width=300, height=200)
    tooltip = TooltipGeometry(offset=60, width=160, height=72)
    anchor_x, anchor_y = clamp_anchor(x, y, bounds, tooltip)

    assert bounds.left <= anchor_x - tooltip.width / 2
    assert anchor_x + tooltip.width / 2 <= bounds.right
    assert bounds.top <= anchor_y - tooltip.height
    assert anchor_y <= bounds.bottom


def test_tooltip_keeps_pointer_position_when_it_fits():
    bounds = SurfaceBox(left=0, top=0, width=1000, height=600)
    assert clamp_anchor(500, 300, bounds, TooltipGeometry()) == (500, 240)


def test_oversized_tooltip_is_centred():
    bounds = SurfaceBox(left=10, top=0, width=100, height=50)
    anchor_x, anchor_y = clamp_anchor(20, 40, bounds, TooltipGeometry())

    assert anchor_x == 60
    assert anchor_y == 72
