"""
Day plan routes: schedule edits and day status changes.
"""
from fastapi import APIRouter, Depends
from typing import List
from app.api.dependencies import get_planner, unwrap_or_raise
from app.schemas.day_plan import DayCompletion, DayDateUpdate, DayDistanceUpdate
from app.schemas.expense import Expense
from app.schemas.trip import AdjustRemainingRequest, TripPlan
from app.services.trip_service import TripPlanner

router = APIRouter(prefix="/trips/{trip_id}/days", tags=["schedule"])


@router.patch("/{day_id}/distance", response_model=TripPlan)
async def update_day_distance(
    trip_id: int,
    day_id: str,
    update: DayDistanceUpdate,
    planner: TripPlanner = Depends(get_planner)
):
    """Change a day's target distance; later days shift along the route."""
    return unwrap_or_raise(planner.update_day_distance(trip_id, day_id, update.target_km))


@router.patch("/{day_id}/date", response_model=TripPlan)
async def update_day_date(
    trip_id: int,
    day_id: str,
    update: DayDateUpdate,
    planner: TripPlanner = Depends(get_planner)
):
    """Move a day to another date and re-order the schedule."""
    return unwrap_or_raise(planner.update_day_date(trip_id, day_id, update.date))


@router.post("/{day_id}/rest-day", response_model=TripPlan)
async def insert_rest_day(
    trip_id: int,
    day_id: str,
    planner: TripPlanner = Depends(get_planner)
):
    """Insert a rest day after the given day, pushing later days back."""
    return unwrap_or_raise(planner.insert_rest_day(trip_id, day_id))


@router.delete("/{day_id}", response_model=TripPlan)
async def remove_day(
    trip_id: int,
    day_id: str,
    planner: TripPlanner = Depends(get_planner)
):
    return unwrap_or_raise(planner.remove_day(trip_id, day_id))


@router.post("/adjust", response_model=TripPlan)
async def adjust_remaining(
    trip_id: int,
    request: AdjustRemainingRequest,
    planner: TripPlanner = Depends(get_planner)
):
    """Spread the distance still to go over the days after `through_index`."""
    return unwrap_or_raise(planner.adjust_remaining(trip_id, request.through_index))


@router.post("/{day_id}/start", response_model=TripPlan)
async def start_day(trip_id: int, day_id: str, planner: TripPlanner = Depends(get_planner)):
    return unwrap_or_raise(planner.start_day(trip_id, day_id))


@router.post("/{day_id}/complete", response_model=TripPlan)
async def complete_day(
    trip_id: int,
    day_id: str,
    completion: DayCompletion,
    planner: TripPlanner = Depends(get_planner)
):
    """Record the distance ridden on a day."""
    return unwrap_or_raise(planner.complete_day(
        trip_id, day_id, completion.actual_km, redistribute=completion.redistribute
    ))


@router.post("/{day_id}/skip", response_model=TripPlan)
async def skip_day(trip_id: int, day_id: str, planner: TripPlanner = Depends(get_planner)):
    return unwrap_or_raise(planner.skip_day(trip_id, day_id))


@router.get("/{day_id}/expenses", response_model=List[Expense])
async def get_day_expenses(trip_id: int, day_id: str, planner: TripPlanner = Depends(get_planner)):
    """Expenses linked to one day."""
    return unwrap_or_raise(planner.expenses_for_day(trip_id, day_id))
