"""
Budget routes.
"""
from fastapi import APIRouter, Depends
from app.api.dependencies import get_planner, unwrap_or_raise
from app.schemas.budget import BudgetStatus
from app.schemas.trip import Budget, TripPlan
from app.services.trip_service import TripPlanner

router = APIRouter(prefix="/budget", tags=["budget"])


@router.get("/{trip_id}", response_model=BudgetStatus)
async def get_budget_status(trip_id: int, planner: TripPlanner = Depends(get_planner)):
    """Spending against the trip budget."""
    return unwrap_or_raise(planner.get_budget_status(trip_id))


@router.put("/{trip_id}", response_model=TripPlan)
async def set_budget(
    trip_id: int,
    budget: Budget,
    planner: TripPlanner = Depends(get_planner)
):
    """Set or edit the budget for a trip."""
    return unwrap_or_raise(planner.set_budget(trip_id, budget))


@router.delete("/{trip_id}", response_model=TripPlan)
async def clear_budget(trip_id: int, planner: TripPlanner = Depends(get_planner)):
    return unwrap_or_raise(planner.set_budget(trip_id, None))
