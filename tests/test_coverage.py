"""Unit tests for CoverageTracker."""

import pytest

from agrinav.nav_core.coverage import CoverageTracker
from agrinav.nav_core.models import VehiclePosition


def pos(lat, lon=7.0):
    return VehiclePosition(latitude=lat, longitude=lon)


@pytest.fixture
def tracker(clock):
    return CoverageTracker(clock=clock)


def test_empty_path_stats(tracker):
    """Test stats of an empty path."""
    stats = tracker.stats()
    assert stats.total_count == 0
    assert stats.treated_count == 0
    assert stats.coverage_percentage == 0.0
    assert stats.approximate_distance_m == 0.0
    assert stats.measured_distance_m == 0.0
    assert stats.average_speed_kmh == 0.0


def test_zero_duration_has_zero_speed(tracker):
    """Test zero elapsed time gives zero average speed."""
    tracker.on_position(pos(45.0), connected=True, fix_quality=1)
    assert tracker.stats().average_speed_kmh == 0.0


@pytest.mark.parametrize(
    "connected, quality",
    [(False, 1), (True, 0), (False, 0)],
)
def test_points_need_connection_and_fix(tracker, connected, quality):
    """Test points are recorded only while connected with a fix."""
    assert tracker.on_position(pos(45.0), connected=connected, fix_quality=quality) is None
    assert len(tracker) == 0


def test_records_treated_points(tracker, clock):
    """Test recorded points carry the clock time and treated flag."""
    point = tracker.on_position(pos(45.0), connected=True, fix_quality=4)
    assert point.treated is True
    assert point.timestamp == clock.now
    assert len(tracker) == 1


def test_stats(tracker, clock):
    """Test distance, area and duration stats."""
    for i in range(10):
        tracker.on_position(pos(45.0 + i * 0.00001), connected=True, fix_quality=1)
    clock.advance(10.0)

    stats = tracker.stats()
    assert stats.total_count == 10
    assert stats.treated_count == 10
    assert stats.coverage_percentage == pytest.approx(100.0)
    assert stats.approximate_distance_m == pytest.approx(20.0)
    assert stats.session_duration_s == pytest.approx(10.0)
    # 20 m in 10 s = 2 m/s = 7.2 km/h
    assert stats.average_speed_kmh == pytest.approx(7.2)
    assert stats.measured_distance_m == pytest.approx(9 * 1.112, rel=1e-3)


def test_implement_engagement_drives_treated(clock):
    """Test implement engagement marks points as treated."""
    engaged = iter([True, False, True, False])
    tracker = CoverageTracker(implement_engaged=lambda: next(engaged), clock=clock)
    for _ in range(4):
        tracker.on_position(pos(45.0), connected=True, fix_quality=1)

    stats = tracker.stats()
    assert stats.treated_count == 2
    assert stats.coverage_percentage == pytest.approx(50.0)


def test_clear_keeps_session_clock(tracker, clock):
    """Test clear keeps the session start time."""
    started = tracker.started_at
    tracker.on_position(pos(45.0), connected=True, fix_quality=1)
    clock.advance(5.0)

    tracker.clear()

    assert len(tracker) == 0
    assert tracker.started_at == started
    assert tracker.stats().session_duration_s == pytest.approx(5.0)


def test_path_is_a_copy(tracker):
    """Test the returned path is a copy."""
    tracker.on_position(pos(45.0), connected=True, fix_quality=1)
    tracker.path.clear()
    assert len(tracker) == 1
