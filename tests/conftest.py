# tests/conftest.py
from datetime import timedelta

import pytest

from app.services.timeline_service import build_timeline
from timeline_helpers import utc


@pytest.fixture
def jan_now():
    return utc(2025, 1, 10, 12)


@pytest.fixture
def make_snapshot(jan_now):
    def _make(events=(), uptime_seconds=0, server_start_time=None, now=None, **kwargs):
        return build_timeline(
            uptime_seconds,
            list(events),
            now=now or jan_now,
            server_start_time=server_start_time,
            **kwargs,
        )
    return _make


@pytest.fixture
def long_up_since(jan_now):
    return jan_now - timedelta(days=365)
