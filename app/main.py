"""
Uptime Timeline API
Availability timeline reconstruction endpoints
"""

import logging
from datetime import datetime
from typing import Tuple

import pytz
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .config import settings
from .schemas.timeline import (
    DayInfoOut,
    HoverOut,
    HoverRequest,
    PointerIn,
    TimelineRequest,
    TimelineResponse,
)
from .services.clock_service import RefreshClock, utc_now
from .services.event_service import InvalidStatusEventError, parse_status_history
from .services.interaction_service import InteractionSurface
from .services.report_service import periods_to_csv, summarize
from .services.status_service import ResolverPolicy
from .services.timeline_service import TimelineInputs, TimelineMonitor, TimelineSnapshot, build_timeline
from .services.window_service import get_timezone
from .models import TooltipGeometry

logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Process start, reported by /health
SERVER_START_TIME = utc_now()

# Initialize FastAPI app
app = FastAPI(title=settings.PROJECT_NAME)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

clock = RefreshClock(interval_seconds=settings.REFRESH_INTERVAL_SECONDS)
monitor = TimelineMonitor(clock, settings)


@app.on_event("startup")
async def on_startup() -> None:
    """Start the refresh clock"""
    clock.tick()
    clock.start()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    """Stop the refresh clock and drop hover state"""
    await clock.stop()
    monitor.surface.pointer_leave()


def _parse_inputs(request: TimelineRequest) -> TimelineInputs:
    events, discarded = parse_status_history(
        [event.model_dump() for event in request.status_history],
        policy=settings.INVALID_EVENT_POLICY,
    )
    return TimelineInputs(
        uptime_seconds=request.uptime_seconds,
        status_history=events,
        server_start_time=request.server_start_time,
        discarded_events=discarded,
    )


def _build(request: TimelineRequest) -> Tuple[TimelineSnapshot, TimelineInputs]:
    inputs = _parse_inputs(request)
    snapshot = build_timeline(
        inputs.uptime_seconds,
        inputs.status_history,
        now=request.now or clock.now,
        server_start_time=inputs.server_start_time,
        tz=get_timezone(settings.TIMEZONE),
        policy=ResolverPolicy.from_settings(settings),
    )
    return snapshot, inputs


def _monitor_response(snapshot: TimelineSnapshot) -> TimelineResponse:
    uptime_seconds = max(0, int((snapshot.now - snapshot.system_up_since).total_seconds()))
    return TimelineResponse.from_snapshot(
        snapshot, uptime_seconds, discarded_events=monitor.inputs.discarded_events
    )


# ===== TIMELINE ENDPOINTS =====

@app.post("/timeline", response_model=TimelineResponse)
def get_timeline(request: TimelineRequest):
    """
    Reconstruct the three-month availability timeline from the supplied inputs
    """
    try:
        snapshot, inputs = _build(request)
        return TimelineResponse.from_snapshot(snapshot, inputs.uptime_seconds, inputs.discarded_events)

    except InvalidStatusEventError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Timeline reconstruction failed")
        raise HTTPException(status_code=500, detail=f"Error building timeline: {str(e)}")


@app.post("/timeline/days/{day_index}", response_model=DayInfoOut)
def get_day(day_index: int, request: TimelineRequest):
    """
    Tooltip details for one day of the timeline
    """
    try:
        snapshot, _ = _build(request)
        info = snapshot.describe_day(day_index)
        if info is None:
            raise HTTPException(status_code=404, detail=f"Day {day_index} is not in the resolved range")
        return DayInfoOut.from_info(info)

    except HTTPException:
        raise
    except InvalidStatusEventError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Day lookup failed")
        raise HTTPException(status_code=500, detail=f"Error resolving day: {str(e)}")


@app.post("/timeline/hover", response_model=HoverOut)
def hover_timeline(request: HoverRequest):
    """
    Resolve a single pointer position over the rendered timeline
    """
    try:
        snapshot, _ = _build(request.timeline)
        surface = InteractionSurface(lambda: snapshot, TooltipGeometry.from_settings(settings))
        return _pointer_move(surface, request.pointer)

    except InvalidStatusEventError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Hover resolution failed")
        raise HTTPException(status_code=500, detail=f"Error resolving hover: {str(e)}")


def _pointer_move(surface: InteractionSurface, pointer: PointerIn) -> HoverOut:
    hover = surface.pointer_move(
        pointer.client_x,
        pointer.client_y,
        pointer.box.to_box(),
        pointer.viewport.to_box() if pointer.viewport else None,
    )
    return HoverOut.from_hover(surface.state, hover, surface.hovered_day())


# ===== LIVE MONITOR ENDPOINTS =====
# async so they run on the event loop alongside the refresh clock

@app.put("/monitor", response_model=TimelineResponse)
async def configure_monitor(request: TimelineRequest):
    """
    Replace the monitored inputs and rebuild the live timeline
    """
    try:
        snapshot = monitor.configure(_parse_inputs(request))
        return _monitor_response(snapshot)

    except InvalidStatusEventError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Monitor configuration failed")
        raise HTTPException(status_code=500, detail=f"Error configuring monitor: {str(e)}")


@app.get("/monitor", response_model=TimelineResponse)
async def get_monitor():
    """
    Current live timeline, as of the last clock tick
    """
    snapshot = monitor.snapshot
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Monitor is not configured")
    return _monitor_response(snapshot)


@app.post("/monitor/pointer", response_model=HoverOut)
async def monitor_pointer_move(pointer: PointerIn):
    if monitor.snapshot is None:
        raise HTTPException(status_code=404, detail="Monitor is not configured")
    return _pointer_move(monitor.surface, pointer)


@app.post("/monitor/pointer/leave", response_model=HoverOut)
async def monitor_pointer_leave():
    monitor.surface.pointer_leave()
    return HoverOut.from_hover(monitor.surface.state, None, None)


@app.get("/monitor/report")
async def get_monitor_report():
    """
    Status periods of the live timeline as CSV
    """
    snapshot = monitor.snapshot
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Monitor is not configured")

    return PlainTextResponse(
        content=periods_to_csv(snapshot),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=uptime_periods.csv"}
    )


@app.get("/monitor/summary")
async def get_monitor_summary():
    snapshot = monitor.snapshot
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Monitor is not configured")
    return summarize(snapshot)


# ===== HELPER ENDPOINTS =====

@app.get("/")
def read_root():
    """Root endpoint"""
    return {"message": "Uptime Timeline API is running"}


@app.get("/health")
def health_check():
    """Health check endpoint, in the shape the timeline consumes"""
    now = datetime.now(pytz.UTC)
    return {
        "status": "healthy",
        "timestamp": now.isoformat(),
        "uptime": int((now - SERVER_START_TIME).total_seconds()),
        "server_start_time": SERVER_START_TIME.isoformat(),
        "clock_running": clock.running,
    }
