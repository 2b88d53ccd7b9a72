"""
Route splitting service.

Turns a parsed route and a daily distance target into the initial day-by-day
schedule of a trip.
"""
import logging
import math
import uuid
from datetime import date
from typing import List, Optional, Sequence

from app.core.exceptions import InvalidParameter
from app.core.result import returns_result
from app.core.utils import add_days
from app.schemas.day_plan import DayPlan, DayPlanStatus, RouteSegment
from app.schemas.route import (
    Coordinate, ImportedRouteSource, Route, RoutePoint, RouteSource,
)
from app.schemas.trip import Difficulty, TripPlan, TripPlanStatus

logger = logging.getLogger(__name__)

# Float slack when counting segments, so 300 km / 100 km gives 3 days, not 4
_SEGMENT_EPSILON = 1e-9

SUGGESTED_DAILY_DISTANCE_KM = {
    Difficulty.EASY: 100.0,  # Flat terrain, good paths
    Difficulty.MODERATE: 80.0,  # Some hills, mixed surfaces
    Difficulty.DIFFICULT: 60.0,  # Mountainous, challenging terrain
}

# Average riding speeds in km/h
AVERAGE_SPEED_KMH = {
    Difficulty.EASY: 20.0,
    Difficulty.MODERATE: 16.0,
    Difficulty.DIFFICULT: 12.0,
}


def new_day_id() -> str:
    return str(uuid.uuid4())


def find_point_at_distance(points: Sequence[RoutePoint], target_km: float) -> Coordinate:
    """
    Find the first route point at or just past `target_km`.

    Falls back to the route's final point when the target lies beyond the last
    point, and to (0, 0) for an empty route.
    """
    if not points:
        return Coordinate(latitude=0.0, longitude=0.0)

    for point in points:
        if point.distance_from_start_km >= target_km:
            return Coordinate(latitude=point.latitude, longitude=point.longitude)

    last = points[-1]
    return Coordinate(latitude=last.latitude, longitude=last.longitude)


def count_segments(total_km: float, daily_distance_km: float) -> int:
    """Number of riding days needed: ceil(total / daily)."""
    if total_km <= 0:
        return 0
    return max(1, math.ceil(total_km / daily_distance_km - _SEGMENT_EPSILON))


@returns_result
def split_route_into_days(
    route: Route,
    daily_distance_km: float,
    start_date: date,
) -> List[DayPlan]:
    """
    Split a route into consecutive daily segments.

    Day i starts at i * daily_distance_km and is dated start_date + i days.
    The last day is clamped to the route's total distance, so it may be
    shorter than the target but never longer.

    Args:
        route: Parsed route with cumulative point distances
        daily_distance_km: Target distance per day, must be positive
        start_date: Date of the first riding day

    Returns:
        OperationResult holding the ordered day plans. Fails with
        InvalidParameter for a non-positive daily distance, or an empty
        route with a non-zero total distance.
    """
    if daily_distance_km is None or daily_distance_km <= 0:
        raise InvalidParameter("Daily distance must be greater than 0")

    total_km = route.total_distance_km
    if not route.points and total_km > 0:
        raise InvalidParameter("Route has no points")

    day_count = count_segments(total_km, daily_distance_km)
    plans: List[DayPlan] = []

    for day_index in range(day_count):
        start_km = day_index * daily_distance_km
        # Last segment ends exactly at the route's end
        if day_index == day_count - 1:
            end_km = total_km
        else:
            end_km = min(start_km + daily_distance_km, total_km)
        distance_km = end_km - start_km

        segment = RouteSegment(
            route_id=route.id,
            start_km=start_km,
            end_km=end_km,
            distance_km=distance_km,
            start_point=find_point_at_distance(route.points, start_km),
            end_point=find_point_at_distance(route.points, end_km),
        )

        plans.append(DayPlan(
            id=new_day_id(),
            date=add_days(start_date, day_index),
            route_id=route.id,
            start_km=start_km,
            target_km=distance_km,
            actual_km=None,
            status=DayPlanStatus.PLANNED,
            notes="",
            segment=segment,
        ))

    logger.debug(f"Split route {route.id} ({total_km} km) into {len(plans)} days of {daily_distance_km} km")
    return plans


def default_trip_name(route: Route, route_source: RouteSource) -> str:
    if isinstance(route_source, ImportedRouteSource):
        return f"{route_source.name} Trip"
    return f"{route.name} Trip"


@returns_result
def create_trip_plan(
    route: Route,
    route_source: RouteSource,
    start_date: date,
    daily_distance_km: float,
    name: Optional[str] = None,
) -> TripPlan:
    """Create a new, unsaved trip plan for any route source."""
    day_plans = split_route_into_days(route, daily_distance_km, start_date).unwrap()

    return TripPlan(
        name=name or default_trip_name(route, route_source),
        route_id=route.id,
        route_source=route_source,
        start_date=start_date,
        end_date=day_plans[-1].date if day_plans else None,
        daily_distance_km=daily_distance_km,
        total_distance_km=route.total_distance_km,
        estimated_days=len(day_plans),
        status=TripPlanStatus.PLANNING,
        day_plans=day_plans,
    )


def get_suggested_daily_distance(difficulty: Difficulty) -> float:
    """Suggested daily distance in km for a route difficulty."""
    return SUGGESTED_DAILY_DISTANCE_KM.get(Difficulty(difficulty), 80.0)


def estimate_riding_time(distance_km: float, difficulty: Difficulty) -> float:
    """Estimated riding time in hours."""
    speed = AVERAGE_SPEED_KMH.get(Difficulty(difficulty), 16.0)
    return distance_km / speed
