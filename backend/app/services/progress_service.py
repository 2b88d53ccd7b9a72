"""
Progress service for trip completion statistics.
"""
from typing import Sequence

from app.schemas.day_plan import DayPlan, DayPlanStatus, is_rest_day
from app.schemas.trip import TripPlan, TripStats, TripSummary


def calculate_trip_stats(trip: TripPlan) -> TripStats:
    """
    Completion statistics for a trip.

    Ridden distance counts actual_km of completed days (target_km when no
    actual distance was recorded). Neither the percentage nor the remaining
    distance is clamped: riding further than planned gives more than 100%
    and a negative remaining distance.
    """
    completed = [day for day in trip.day_plans if day.status == DayPlanStatus.COMPLETED]
    completed_km = sum(
        day.actual_km if day.actual_km is not None else day.target_km
        for day in completed
    )
    total_km = trip.total_distance_km
    # A zero-length route has nothing to progress through
    progress_percent = completed_km / total_km * 100 if total_km > 0 else 0.0

    return TripStats(
        completed_km=completed_km,
        remaining_km=total_km - completed_km,
        completed_days=len(completed),
        remaining_days=len(trip.day_plans) - len(completed),
        progress_percent=progress_percent,
    )


def calculate_trip_summary(days: Sequence[DayPlan]) -> TripSummary:
    """Summary of ridden distances across a schedule."""
    completed = [day for day in days if day.status == DayPlanStatus.COMPLETED]
    distances = [day.actual_km for day in completed if day.actual_km]
    total_km = sum(distances)

    return TripSummary(
        total_days=len(days),
        cycling_days=len(completed),
        rest_days=sum(1 for day in days if is_rest_day(day)),
        total_distance_km=total_km,
        average_distance_per_day=total_km / len(completed) if completed else 0.0,
        longest_day_km=max(distances) if distances else 0.0,
        shortest_day_km=min(distances) if distances else 0.0,
    )
