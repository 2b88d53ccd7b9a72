"""
Tests for trip progress statistics and summaries.
"""
import pytest

from app.schemas.day_plan import DayPlanStatus
from app.services.progress_service import calculate_trip_stats, calculate_trip_summary
from app.tests.factories import make_days, make_trip


def _completed(day, actual_km):
    return day.model_copy(update={"status": DayPlanStatus.COMPLETED, "actual_km": actual_km})


def test_trip_stats():
    days = make_days([100, 100, 50])
    days[0] = _completed(days[0], 120)
    days[1] = days[1].model_copy(update={"status": DayPlanStatus.COMPLETED})

    stats = calculate_trip_stats(make_trip(days, total_km=250))

    # Completed day without a recorded distance counts its target
    assert stats.completed_km == 220
    assert stats.remaining_km == 30
    assert stats.completed_days == 2
    assert stats.remaining_days == 1
    assert stats.progress_percent == pytest.approx(88.0)


def test_trip_stats_are_not_clamped():
    days = make_days([100, 100, 50])
    days[0] = _completed(days[0], 300)

    stats = calculate_trip_stats(make_trip(days, total_km=250))

    assert stats.progress_percent == pytest.approx(120.0)
    assert stats.remaining_km == -50


def test_trip_stats_ignore_skipped_days():
    days = make_days([100, 100], statuses=[DayPlanStatus.SKIPPED, DayPlanStatus.PLANNED])
    stats = calculate_trip_stats(make_trip(days, total_km=200))

    assert stats.completed_km == 0
    assert stats.completed_days == 0
    assert stats.remaining_days == 2
    assert stats.progress_percent == 0


def test_trip_stats_for_zero_length_route():
    days = make_days([0])
    stats = calculate_trip_stats(make_trip(days, total_km=0))
    assert stats.progress_percent == 0.0


def test_trip_summary():
    days = make_days([100, 100, 0, 50])
    days[0] = _completed(days[0], 90)
    days[1] = _completed(days[1], 110)
    days[2] = days[2].model_copy(update={"status": DayPlanStatus.SKIPPED})

    summary = calculate_trip_summary(days)

    assert summary.total_days == 4
    assert summary.cycling_days == 2
    assert summary.rest_days == 1
    assert summary.total_distance_km == 200
    assert summary.average_distance_per_day == 100
    assert summary.longest_day_km == 110
    assert summary.shortest_day_km == 90


def test_trip_summary_without_riding():
    summary = calculate_trip_summary(make_days([100, 50]))

    assert summary.cycling_days == 0
    assert summary.total_distance_km == 0
    assert summary.average_distance_per_day == 0
    assert summary.longest_day_km == 0
    assert summary.shortest_day_km == 0
