"""
Trip plan routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
from app.api.dependencies import get_planner, unwrap_or_raise
from app.schemas.trip import TripCreate, TripPlan, TripPlanStatus, TripStats, TripSummary, TripUpdate
from app.services.trip_service import TripPlanner

router = APIRouter(prefix="/trips", tags=["trips"])


@router.post("", response_model=TripPlan, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    planner: TripPlanner = Depends(get_planner)
):
    """Split a route into daily stages and create the trip."""
    return unwrap_or_raise(planner.create_trip(
        route=trip_data.route,
        route_source=trip_data.route_source,
        start_date=trip_data.start_date,
        daily_distance_km=trip_data.daily_distance_km,
        name=trip_data.name,
        budget=trip_data.budget,
    ))


@router.get("", response_model=List[TripPlan])
async def list_trips(
    status_filter: Optional[TripPlanStatus] = Query(None, alias="status"),
    planner: TripPlanner = Depends(get_planner)
):
    """List trips, optionally filtered by status."""
    return planner.list_trips(status_filter)


@router.get("/active", response_model=TripPlan)
async def get_active_trip(planner: TripPlanner = Depends(get_planner)):
    """Get the trip currently being ridden."""
    trip = planner.get_active_trip()
    if not trip:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No active trip"
        )
    return trip


@router.get("/{trip_id}", response_model=TripPlan)
async def get_trip(trip_id: int, planner: TripPlanner = Depends(get_planner)):
    """Get a trip with its full schedule."""
    return unwrap_or_raise(planner.get_trip(trip_id))


@router.patch("/{trip_id}", response_model=TripPlan)
async def update_trip(
    trip_id: int,
    trip_data: TripUpdate,
    planner: TripPlanner = Depends(get_planner)
):
    """Rename a trip or change its budget."""
    if trip_data.name is not None:
        unwrap_or_raise(planner.rename_trip(trip_id, trip_data.name))
    if trip_data.clear_budget:
        unwrap_or_raise(planner.set_budget(trip_id, None))
    elif trip_data.budget is not None:
        unwrap_or_raise(planner.set_budget(trip_id, trip_data.budget))
    return unwrap_or_raise(planner.get_trip(trip_id))


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_trip(trip_id: int, planner: TripPlanner = Depends(get_planner)):
    """Delete a trip, its day plans and its expenses."""
    unwrap_or_raise(planner.delete_trip(trip_id))


@router.post("/{trip_id}/pause", response_model=TripPlan)
async def pause_trip(trip_id: int, planner: TripPlanner = Depends(get_planner)):
    return unwrap_or_raise(planner.pause_trip(trip_id))


@router.post("/{trip_id}/resume", response_model=TripPlan)
async def resume_trip(trip_id: int, planner: TripPlanner = Depends(get_planner)):
    return unwrap_or_raise(planner.resume_trip(trip_id))


@router.get("/{trip_id}/stats", response_model=TripStats)
async def get_trip_stats(trip_id: int, planner: TripPlanner = Depends(get_planner)):
    """Completed and remaining distance and days."""
    return unwrap_or_raise(planner.get_trip_stats(trip_id))


@router.get("/{trip_id}/summary", response_model=TripSummary)
async def get_trip_summary(trip_id: int, planner: TripPlanner = Depends(get_planner)):
    """Ridden-distance summary over the schedule."""
    return unwrap_or_raise(planner.get_trip_summary(trip_id))
